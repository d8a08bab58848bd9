"""Create the schema and seed reference categories plus demo accounts.

Usage: python -m finance_tracker.scripts.seed_database
"""

import logging
import sys

from sqlalchemy.engine import Engine

from finance_tracker.config import get_settings
from finance_tracker.database.engine import create_db_engine, dispose_engine, init_database
from finance_tracker.domain.entities import Role
from finance_tracker.repositories.user import UserRepository
from finance_tracker.services.auth_service import hash_password
from finance_tracker.services.category_service import CategoryService

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"
DEMO_USERS = [
    ("admin@test.com", "Admin User", Role.ADMIN),
    ("user@test.com", "Regular User", Role.USER),
    ("readonly@test.com", "Read Only User", Role.READ_ONLY),
]


def seed_database(engine: Engine) -> None:
    logger.info("Starting database seeding...")
    init_database(engine)

    with engine.begin() as conn:
        added = CategoryService(conn).seed_defaults()
        logger.info(f"Categories seeded ({added} added)")

        user_repo = UserRepository(conn)
        password_hash = hash_password(DEMO_PASSWORD)
        for email, username, role in DEMO_USERS:
            if user_repo.email_exists(email):
                logger.info(f"Demo user {email} already present, skipping")
                continue
            user_repo.create(email=email, username=username, password_hash=password_hash, role=role)
            logger.info(f"Created demo user {email} ({role.value})")

    logger.info(f"Demo credentials: <email> / {DEMO_PASSWORD}")


def main() -> int:
    settings = get_settings()
    engine = create_db_engine(settings)
    try:
        seed_database(engine)
    except Exception:
        logger.exception("Database setup failed")
        return 1
    finally:
        dispose_engine(engine)
    logger.info("Database setup completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
