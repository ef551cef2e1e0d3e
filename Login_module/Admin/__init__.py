"""
Admin module - single admin account, password login and token issuance.
"""
from .Admin_model import Admin
from .Admin_crud import (
    get_admin_by_email,
    create_admin,
    authenticate_admin,
    issue_admin_token
)

__all__ = [
    "Admin",
    "get_admin_by_email",
    "create_admin",
    "authenticate_admin",
    "issue_admin_token"
]
