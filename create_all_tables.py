"""
Script to create the database tables if they don't exist.
Useful for a quick local setup; the application itself runs Alembic migrations on startup.

Usage:
    python create_all_tables.py
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

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

from database import Base, engine
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError

# Import models to register them with Base.metadata
from Member_module.Member_model import Member
from Login_module.Admin.Admin_model import Admin

EXPECTED_TABLES = {
    'members': 'Member_module.Member_model.Member',
    'admins': 'Login_module.Admin.Admin_model.Admin',
}


def create_missing_tables(bind=engine) -> list:
    """
    Create the expected tables that don't exist yet.
    Returns the names of the tables that were created.
    """
    existing_tables = set(inspect(bind).get_table_names())
    missing = [name for name in EXPECTED_TABLES if name not in existing_tables]
    if not missing:
        logger.info("All tables already exist")
        return []

    logger.info(f"Creating missing tables: {', '.join(missing)}")
    Base.metadata.create_all(bind=bind, tables=[Base.metadata.tables[name] for name in missing])
    for name in missing:
        logger.info(f"  created {name} ({EXPECTED_TABLES[name]})")
    return missing


def main() -> int:
    try:
        create_missing_tables()
    except OperationalError as e:
        logger.error(f"Cannot connect to database: {e}")
        logger.error("Please check your DATABASE_URL environment variable")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
