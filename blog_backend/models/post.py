"""Post model."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from blog_backend.database import Base
from blog_backend.models.comment import Comment


class Post(Base):
    """Blog post owned by the user who created it."""

    __tablename__ = "posts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    author_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String(100), nullable=False, index=True)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Relationships
    author = relationship("User", backref="posts")
    comments = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by=lambda: [Comment.created_at, Comment.id],
    )

    def __repr__(self) -> str:
        """String representation of Post."""
        return f"<Post(id={self.id}, title={self.title}, author_id={self.author_id})>"
