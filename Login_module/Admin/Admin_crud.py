from sqlalchemy.orm import Session
from typing import Optional
import logging

from .Admin_model import Admin
from Login_module.Utils import Security as security

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def get_admin_by_email(db: Session, email: str) -> Optional[Admin]:
    """
    Retrieve admin by email (case-insensitive).
    """
    return db.query(Admin).filter(Admin.email == normalize_email(email)).first()


def create_admin(db: Session, email: str, password: str) -> Admin:
    """
    Create a new admin with a bcrypt password hash.
    Only used by the out-of-band bootstrap script and tests.
    """
    admin = Admin(
        email=normalize_email(email),
        password_hash=security.hash_password(password)
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info(f"Admin created: {admin.email}")
    return admin


def authenticate_admin(db: Session, email: str, password: str) -> Optional[Admin]:
    """
    Return the admin when email and password match, otherwise None.
    Callers must not reveal which of the two was wrong.
    """
    admin = get_admin_by_email(db, email)
    if not admin:
        return None
    if not security.verify_password(password, admin.password_hash):
        return None
    return admin


def issue_admin_token(admin: Admin) -> str:
    return security.create_access_token({"sub": str(admin.id), "email": admin.email})
