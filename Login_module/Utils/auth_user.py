from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from Login_module.Utils import Security as security

# auto_error=False so a missing header is reported as 401 instead of 403
security_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AdminIdentity:
    id: int
    email: str


def verify_admin_token(token: str) -> AdminIdentity:
    """
    Verifies an admin token and returns the identity it carries.
    Verification is stateless: only signature and expiry are checked.
    """
    payload = security.decode_access_token(token)

    admin_id = payload.get("sub")
    email = payload.get("email")
    if not admin_id or not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token does not contain admin info",
            headers=security.UNAUTHORIZED_HEADERS
        )

    try:
        return AdminIdentity(id=int(admin_id), email=email)
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers=security.UNAUTHORIZED_HEADERS
        )


def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme)
) -> AdminIdentity:
    """
    Validates the Bearer token of a mutating request.
    Runs before any store access in the routes that depend on it.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers=security.UNAUTHORIZED_HEADERS
        )

    return verify_admin_token(credentials.credentials)
