"""
Initialize database with default staff accounts
"""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.orm import Session
from campushire.core.database import SessionLocal, init_db
from campushire.models.user import User, Role
from campushire.auth.service import create_user
import structlog

logger = structlog.get_logger()

DEFAULT_ACCOUNTS = [
    {"email": "placement.admin@campus.local", "full_name": "Placement Cell Admin", "role": Role.ADMIN},
    {"email": "recruiter@campus.local", "full_name": "Placement Cell Recruiter", "role": Role.RECRUITER},
]


def create_default_accounts(db: Session):
    """Create the placement cell's staff accounts if missing"""
    for account in DEFAULT_ACCOUNTS:
        existing = db.query(User).filter(User.email == account["email"]).first()
        if existing:
            logger.info("account_exists", email=account["email"])
            continue
        create_user(db, account["email"], full_name=account["full_name"], role=account["role"])


def main():
    """Main initialization function"""
    logger.info("initializing_database")
    
    init_db()
    
    db: Session = SessionLocal()
    try:
        create_default_accounts(db)
        logger.info("database_initialization_complete")
    except Exception as e:
        logger.error("database_initialization_failed", error=str(e))
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
