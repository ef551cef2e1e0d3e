from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from deps import get_db
from .Admin_schema import AdminLoginRequest, AdminLoginResponse, AdminIdentityResponse
from .Admin_crud import authenticate_admin, issue_admin_token
from Login_module.Utils import Security as security
from Login_module.Utils.auth_user import AdminIdentity, get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post("/login", response_model=AdminLoginResponse)
def admin_login(
    req: AdminLoginRequest,
    request: Request,
    db: Session = Depends(get_db)
):
    """
    Exchange admin email and password for a signed, time-limited token.
    The error message is the same for an unknown email and a wrong password.
    """
    client_ip = request.client.host if request.client else "unknown"

    try:
        admin = authenticate_admin(db, req.email, req.password)
    except SQLAlchemyError as e:
        logger.error(f"Database error during admin login: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error"
        )

    if not admin:
        logger.warning(f"Failed admin login attempt | IP: {client_ip}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers=security.UNAUTHORIZED_HEADERS
        )

    logger.info(f"Admin {admin.id} logged in | IP: {client_ip}")
    return AdminLoginResponse(
        token=issue_admin_token(admin),
        expiresIn=security.ACCESS_TOKEN_EXPIRE_SECONDS
    )


@router.get("/me", response_model=AdminIdentityResponse)
def get_admin_identity(admin: AdminIdentity = Depends(get_current_admin)):
    """Return the identity carried by a valid admin token."""
    return AdminIdentityResponse(id=admin.id, email=admin.email)
