"""Revoked access token model."""

from sqlalchemy import Column, DateTime, String

from blog_backend.database import Base


class RevokedToken(Base):
    """Access token invalidated at logout, kept until its natural expiry."""

    __tablename__ = "revoked_tokens"

    jti = Column(String(64), primary_key=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self) -> str:
        """String representation of RevokedToken."""
        return f"<RevokedToken(jti={self.jti}, expires_at={self.expires_at})>"
