"""
One-time bootstrap of the admin account.

Creates the admin from ADMIN_EMAIL / ADMIN_PASSWORD unless an admin with that
email already exists.

Usage:
    python init_admin.py
"""
import sys
from pathlib import Path
from dotenv import load_dotenv
import logging

# Add project root to path
ROOT_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT_DIR))

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

from sqlalchemy.exc import SQLAlchemyError

from config import settings
from database import SessionLocal
from create_all_tables import create_missing_tables
from Login_module.Admin.Admin_crud import get_admin_by_email, create_admin


def init_admin(db, email: str, password: str) -> bool:
    """
    Create the admin account if it is missing.
    Returns True when a new admin was created.
    """
    if get_admin_by_email(db, email):
        logger.info("Admin already exists")
        return False

    admin = create_admin(db, email, password)
    logger.info(f"Admin created successfully: {admin.email}")
    return True


def main() -> int:
    try:
        create_missing_tables()
        db = SessionLocal()
        try:
            init_admin(db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)
        finally:
            db.close()
    except SQLAlchemyError as e:
        logger.error(f"Error initializing admin: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
