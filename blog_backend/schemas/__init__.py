"""Pydantic schemas package."""

from blog_backend.schemas.auth import (
    MessageResponse,
    RegisterResponse,
    TokenResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from blog_backend.schemas.comment import CommentCreate, CommentResponse, CreatedCommentResponse, UserSummary
from blog_backend.schemas.post import (
    PostCreate,
    PostDetailEnvelope,
    PostDetailResponse,
    PostEnvelope,
    PostPage,
    PostResponse,
    PostUpdate,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "TokenResponse",
    "RegisterResponse",
    "MessageResponse",
    "UserSummary",
    "CommentCreate",
    "CommentResponse",
    "CreatedCommentResponse",
    "PostCreate",
    "PostUpdate",
    "PostResponse",
    "PostDetailResponse",
    "PostEnvelope",
    "PostDetailEnvelope",
    "PostPage",
]
