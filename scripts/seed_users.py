"""Create a demo Director and Staff account in the configured database."""
import logging

from leavedesk.core.exceptions import ValidationError
from leavedesk.core.logging import setup_logging
from leavedesk.database import SessionLocal, init_db
from leavedesk.models.user import UserRole
from leavedesk.services.identity import IdentityService

setup_logging()
logger = logging.getLogger("seed_users")

DEMO_USERS = [
    ("director@example.com", "Director123!", "Demo Director", UserRole.DIRECTOR, None, ""),
    ("staff@example.com", "Staff123!", "Demo Staff", UserRole.STAFF, "IT", "EMP-001"),
]


def main():
    init_db()
    db = SessionLocal()
    try:
        identity = IdentityService(db)
        for email, password, name, role, department, employee_id in DEMO_USERS:
            try:
                user = identity.sign_up(email, password, name, role, department, employee_id)
            except ValidationError as e:
                logger.info(f"Skipping {email}: {e.message}")
                continue
            logger.info(f"Created {role.value} -> {email} ({user.id})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
