"""Seed the role catalogue and the bootstrap admin user.

Usage:
    python -m blog_backend.seed
"""

import logging

from sqlalchemy.orm import Session

from blog_backend.config import settings
from blog_backend.core.identity import create_user, ensure_roles, get_or_create_role, get_user_by_email
from blog_backend.database import SessionLocal
from blog_backend.models.user import ROLE_ADMIN, User

logger = logging.getLogger(__name__)


def seed_roles_and_admin(db: Session) -> User:
    """Create the admin/author roles and the configured admin user if missing.

    Running it again leaves existing data untouched apart from granting the
    admin role to the configured user when it lacks it.
    """
    ensure_roles(db)
    db.commit()

    admin = get_user_by_email(db, settings.admin_email)
    if admin is None:
        return create_user(
            db,
            name=settings.admin_name,
            email=settings.admin_email,
            password=settings.admin_password,
            roles=[ROLE_ADMIN],
        )

    if ROLE_ADMIN not in admin.role_names:
        admin.roles.append(get_or_create_role(db, ROLE_ADMIN))
        db.commit()
        db.refresh(admin)
        logger.info(f"Granted {ROLE_ADMIN!r} to existing user {admin.id}")
    return admin


def main() -> None:
    logging.basicConfig(level=settings.log_level)
    db = SessionLocal()
    try:
        admin = seed_roles_and_admin(db)
        logger.info(f"Seed complete, admin user is {admin.email}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
