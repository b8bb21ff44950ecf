"""Comments router."""

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blog_backend.core.dependencies import CurrentActor
from blog_backend.core.exceptions import InternalError
from blog_backend.core.policy import Action, authorize
from blog_backend.database import get_db
from blog_backend.models.comment import Comment
from blog_backend.routers.posts import load_post
from blog_backend.schemas.comment import CommentCreate, CreatedCommentResponse, UserSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["comments"])


@router.post("/{post_id}/comments", response_model=CreatedCommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    post_id: str,
    comment_data: CommentCreate,
    actor: CurrentActor,
    db: Annotated[Session, Depends(get_db)],
) -> CreatedCommentResponse:
    """Add a comment to a post.

    Args:
        post_id: Post UUID
        comment_data: Comment body
        actor: Current authenticated actor
        db: Database session

    Returns:
        CreatedCommentResponse: The stored comment with its author

    Raises:
        NotFoundError: If post not found
    """
    post = load_post(db, post_id)
    authorize(actor, Action.CREATE_COMMENT, post)

    comment = Comment(
        post_id=post.id,
        user_id=actor.id,
        body=comment_data.body,
        created_at=datetime.now(timezone.utc),
    )

    db.add(comment)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InternalError() from e
    db.refresh(comment)

    logger.info(f"Comment {comment.id} added to post {post_id} by user {actor.id}")

    return CreatedCommentResponse(
        id=str(comment.id),
        post_id=str(comment.post_id),
        body=comment.body,
        user=UserSummary(id=str(actor.id), name=actor.name),
        created_at=comment.created_at.isoformat(),
    )
