"""Database models package."""

from blog_backend.models.comment import Comment
from blog_backend.models.post import Post
from blog_backend.models.revoked_token import RevokedToken
from blog_backend.models.user import Role, User

__all__ = ["User", "Role", "Post", "Comment", "RevokedToken"]
