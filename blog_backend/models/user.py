"""User and role models."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Uuid
from sqlalchemy.orm import relationship

from blog_backend.database import Base

ROLE_ADMIN = "admin"
ROLE_AUTHOR = "author"
KNOWN_ROLES = (ROLE_ADMIN, ROLE_AUTHOR)

user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    """Named capability label that can be attached to users."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), unique=True, nullable=False)

    def __repr__(self) -> str:
        """String representation of Role."""
        return f"<Role(id={self.id}, name={self.name})>"


class User(Base):
    """User model for authentication and authorization."""

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Relationships
    roles = relationship("Role", secondary=user_roles, lazy="selectin", order_by="Role.name")

    @property
    def role_names(self) -> frozenset[str]:
        """Names of the roles assigned to this user."""
        return frozenset(role.name for role in self.roles)

    def __repr__(self) -> str:
        """String representation of User."""
        return f"<User(id={self.id}, email={self.email}, roles={sorted(self.role_names)})>"
