"""Comment schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserSummary(BaseModel):
    """Minimal user reference embedded in posts and comments."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str


class CommentCreate(BaseModel):
    """Comment creation request schema."""

    body: str = Field(..., min_length=1, max_length=5000)

    @field_validator("body", mode="before")
    @classmethod
    def normalize_body(cls, v: str) -> str:
        """Normalize body by stripping whitespace."""
        return v.strip() if isinstance(v, str) else v


class CommentResponse(BaseModel):
    """Comment response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    body: str
    user: UserSummary
    created_at: str


class CreatedCommentResponse(CommentResponse):
    """Comment response returned right after creation."""

    post_id: str
