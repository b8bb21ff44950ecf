"""Post schemas."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blog_backend.schemas.comment import CommentResponse, UserSummary


def _strip(v: Any) -> Any:
    return v.strip() if isinstance(v, str) else v


class PostCreate(BaseModel):
    """Post creation request schema."""

    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=100)

    @field_validator("title", "content", "category", mode="before")
    @classmethod
    def normalize_text(cls, v: str) -> str:
        """Normalize text fields by stripping whitespace."""
        return _strip(v)


class PostUpdate(BaseModel):
    """Post update request schema. Unknown fields such as author_id are ignored."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)

    @field_validator("title", "content", "category", mode="before")
    @classmethod
    def normalize_text(cls, v: Optional[str]) -> Optional[str]:
        """Normalize text fields by stripping whitespace."""
        return _strip(v)


class PostResponse(BaseModel):
    """Post response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    content: str
    category: str
    author: UserSummary
    created_at: str
    updated_at: str


class PostDetailResponse(PostResponse):
    """Single post with its comments."""

    comments: list[CommentResponse]


class PostEnvelope(BaseModel):
    """Single post wrapped in a data envelope."""

    data: PostResponse


class PostDetailEnvelope(BaseModel):
    """Single post with comments wrapped in a data envelope."""

    data: PostDetailResponse


class PageLinks(BaseModel):
    """Links to neighbouring pages."""

    first: str
    last: str
    prev: Optional[str] = None
    next: Optional[str] = None


class PageMeta(BaseModel):
    """Pagination metadata."""

    model_config = ConfigDict(populate_by_name=True)

    current_page: int
    from_: Optional[int] = Field(default=None, alias="from")
    to: Optional[int] = None
    last_page: int
    per_page: int
    total: int
    path: str


class PostPage(BaseModel):
    """Paginated list of posts."""

    data: list[PostResponse]
    links: PageLinks
    meta: PageMeta
