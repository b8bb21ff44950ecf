"""Posts router."""

import logging
from datetime import date, datetime, timezone
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from blog_backend.core.dependencies import CurrentActor
from blog_backend.core.exceptions import InternalError, NotFoundError
from blog_backend.core.policy import Action, Actor, authorize
from blog_backend.core.post_query import PostFilters, PostQuery, page_links, page_meta, page_request, paginate
from blog_backend.database import get_db
from blog_backend.models.comment import Comment
from blog_backend.models.post import Post
from blog_backend.models.user import User
from blog_backend.schemas.auth import MessageResponse
from blog_backend.schemas.comment import CommentResponse, UserSummary
from blog_backend.schemas.post import (
    PostCreate,
    PostDetailEnvelope,
    PostDetailResponse,
    PostEnvelope,
    PostPage,
    PostResponse,
    PostUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])


def user_summary(user: User) -> UserSummary:
    return UserSummary(id=str(user.id), name=user.name)


def post_response(post: Post) -> PostResponse:
    return PostResponse(
        id=str(post.id),
        title=post.title,
        content=post.content,
        category=post.category,
        author=user_summary(post.author),
        created_at=post.created_at.isoformat(),
        updated_at=post.updated_at.isoformat(),
    )


def comment_response(comment: Comment) -> CommentResponse:
    return CommentResponse(
        id=str(comment.id),
        body=comment.body,
        user=user_summary(comment.user),
        created_at=comment.created_at.isoformat(),
    )


def parse_post_id(post_id: str) -> UUID:
    """Parse a path id; ids that are not UUIDs cannot resolve to a post."""
    try:
        return UUID(post_id)
    except ValueError:
        raise NotFoundError("Post not found")


def load_post(db: Session, post_id: str, with_comments: bool = False) -> Post:
    """Fetch a post with its author (and optionally its comments with their users).

    Raises:
        NotFoundError: If no post has this id
    """
    options = [selectinload(Post.author)]
    if with_comments:
        options.append(selectinload(Post.comments).selectinload(Comment.user))

    post = db.scalars(
        select(Post).where(Post.id == parse_post_id(post_id)).options(*options)
    ).first()
    if post is None:
        raise NotFoundError("Post not found")
    return post


@router.get("", response_model=PostPage)
async def list_posts(
    request: Request,
    actor: CurrentActor,
    db: Annotated[Session, Depends(get_db)],
    search: Optional[str] = None,
    category: Optional[str] = None,
    author_id: Optional[UUID] = None,
    date_from: Annotated[Optional[date], Query(alias="from")] = None,
    date_to: Annotated[Optional[date], Query(alias="to")] = None,
    sort: Optional[str] = None,
    page: Optional[str] = None,
    per_page: Optional[str] = None,
) -> PostPage:
    """List posts with optional search, filters, sorting and pagination.

    Args:
        request: Incoming request, used to build page links
        actor: Current authenticated actor
        db: Database session
        search: Substring matched against title, author name or category
        category: Exact category
        author_id: Exact author id
        date_from: Earliest creation date (inclusive)
        date_to: Latest creation date (inclusive)
        sort: Field to sort by, prefixed with '-' for descending
        page: 1-based page number
        per_page: Page size

    Returns:
        PostPage: Posts on the requested page plus links and metadata
    """
    authorize(actor, Action.READ_POST)

    query = PostQuery(
        PostFilters(
            search=search,
            category=category,
            author_id=author_id,
            date_from=date_from,
            date_to=date_to,
            sort=sort,
        )
    )
    result = paginate(db, query, page_request(page, per_page))

    return PostPage(
        data=[post_response(post) for post in result.items],
        links=page_links(request.url, result),
        meta=page_meta(request.url, result),
    )


def require_post_creator(actor: CurrentActor) -> Actor:
    """Resolve the actor and check the create-post rule before the body is validated."""
    authorize(actor, Action.CREATE_POST)
    return actor


@router.post("", response_model=PostEnvelope, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    actor: Annotated[Actor, Depends(require_post_creator)],
    db: Annotated[Session, Depends(get_db)],
) -> PostEnvelope:
    """Create a post owned by the current actor.

    Raises:
        AuthorizationError: If the actor has neither the admin nor the author role
    """
    now = datetime.now(timezone.utc)
    new_post = Post(
        author_id=actor.id,
        title=post_data.title,
        content=post_data.content,
        category=post_data.category,
        created_at=now,
        updated_at=now,
    )

    db.add(new_post)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InternalError() from e

    logger.info(f"Post {new_post.id} created by user {actor.id}")

    return PostEnvelope(data=post_response(load_post(db, str(new_post.id))))


@router.get("/{post_id}", response_model=PostDetailEnvelope)
async def get_post(
    post_id: str,
    actor: CurrentActor,
    db: Annotated[Session, Depends(get_db)],
) -> PostDetailEnvelope:
    """Get a post with its author and comments.

    Raises:
        NotFoundError: If post not found
    """
    post = load_post(db, post_id, with_comments=True)
    authorize(actor, Action.READ_POST, post)

    summary = post_response(post)
    return PostDetailEnvelope(
        data=PostDetailResponse(
            **summary.model_dump(),
            comments=[comment_response(comment) for comment in post.comments],
        )
    )


@router.put("/{post_id}", response_model=PostEnvelope)
async def update_post(
    post_id: str,
    post_data: PostUpdate,
    actor: CurrentActor,
    db: Annotated[Session, Depends(get_db)],
) -> PostEnvelope:
    """Update title, content or category of a post.

    Raises:
        NotFoundError: If post not found
        AuthorizationError: If the actor is neither an admin nor the owner
    """
    post = load_post(db, post_id)
    authorize(actor, Action.UPDATE_POST, post)

    # Update fields if provided
    if post_data.title is not None:
        post.title = post_data.title
    if post_data.content is not None:
        post.content = post_data.content
    if post_data.category is not None:
        post.category = post_data.category

    post.updated_at = datetime.now(timezone.utc)

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InternalError() from e

    logger.info(f"Post {post.id} updated by user {actor.id}")

    return PostEnvelope(data=post_response(load_post(db, post_id)))


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: str,
    actor: CurrentActor,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Delete a post and its comments.

    Raises:
        NotFoundError: If post not found
        AuthorizationError: If the actor is neither an admin nor the owner
    """
    post = load_post(db, post_id)
    authorize(actor, Action.DELETE_POST, post)

    db.delete(post)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InternalError() from e

    logger.info(f"Post {post_id} deleted by user {actor.id}")

    return MessageResponse(message="Post deleted")
