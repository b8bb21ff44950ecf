"""Comment model."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship

from blog_backend.database import Base


class Comment(Base):
    """Append-only comment left by a user on a post."""

    __tablename__ = "comments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    post_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    body = Column(Text, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Relationships
    post = relationship("Post", back_populates="comments")
    user = relationship("User")

    def __repr__(self) -> str:
        """String representation of Comment."""
        return f"<Comment(id={self.id}, post_id={self.post_id}, user_id={self.user_id})>"
