"""Identity store: users, roles and role assignments."""

import logging
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blog_backend.core.exceptions import ConflictError
from blog_backend.core.policy import Actor
from blog_backend.core.security import hash_password
from blog_backend.models.user import KNOWN_ROLES, ROLE_AUTHOR, Role, User

logger = logging.getLogger(__name__)


def resolve_role(requested: Optional[str]) -> str:
    """Return the requested role if it is a known one, otherwise "author"."""
    if requested is None:
        return ROLE_AUTHOR
    normalized = requested.strip().lower()
    if normalized in KNOWN_ROLES:
        return normalized
    logger.warning(f"Unknown role {requested!r} requested at registration, assigning {ROLE_AUTHOR!r}")
    return ROLE_AUTHOR


def get_user(db: Session, user_id: UUID) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalars(select(User).where(User.email == email).limit(1)).first()


def get_or_create_role(db: Session, name: str) -> Role:
    """Fetch a role by name, adding it to the session if it does not exist yet."""
    role = db.scalars(select(Role).where(Role.name == name).limit(1)).first()
    if role is None:
        role = Role(name=name)
        db.add(role)
        db.flush()
    return role


def ensure_roles(db: Session, names: Iterable[str] = KNOWN_ROLES) -> list[Role]:
    """Make sure every named role exists. Safe to call repeatedly."""
    return [get_or_create_role(db, name) for name in names]


def create_user(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    roles: Iterable[str] = (ROLE_AUTHOR,),
) -> User:
    """Create a user with the given roles and commit it.

    Args:
        db: Database session
        name: Display name
        email: Unique email address
        password: Plain text password (will be hashed)
        roles: Role names to assign; may be empty

    Returns:
        User: The persisted user

    Raises:
        ConflictError: If the email is already registered
    """
    if get_user_by_email(db, email) is not None:
        raise ConflictError("email", "The email has already been taken.")

    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
    )
    user.roles = ensure_roles(db, roles)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("email", "The email has already been taken.") from e
    except Exception:
        db.rollback()
        raise
    db.refresh(user)

    logger.info(f"Created user {user.id} with roles {sorted(user.role_names)}")
    return user


def to_actor(user: User) -> Actor:
    """Build the policy-facing actor for a persisted user."""
    return Actor(
        id=user.id,
        name=user.name,
        email=user.email,
        roles=user.role_names,
    )
