"""FastAPI dependencies resolving the current user from a bearer token."""

from datetime import datetime, timezone
from typing import Annotated, Any, Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blog_backend.core.exceptions import AuthenticationError, InternalError
from blog_backend.core.identity import get_user, to_actor
from blog_backend.core.policy import Actor
from blog_backend.core.security import decode_access_token
from blog_backend.database import get_db
from blog_backend.models.revoked_token import RevokedToken
from blog_backend.models.user import User

_bearer_scheme = HTTPBearer(auto_error=False)


def is_token_revoked(db: Session, jti: str) -> bool:
    return db.get(RevokedToken, jti) is not None


def revoke_token(db: Session, payload: dict[str, Any]) -> None:
    """Record the token's jti so it is rejected until it expires."""
    jti = payload["jti"]
    if is_token_revoked(db, jti):
        return
    expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
    db.add(RevokedToken(jti=jti, expires_at=expires_at))
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InternalError() from e


def get_token_payload(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(_bearer_scheme)],
    db: Annotated[Session, Depends(get_db)],
) -> dict[str, Any]:
    """Verified claims of the presented bearer token.

    Raises:
        AuthenticationError: If the token is missing, invalid, expired or revoked
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Not authenticated")

    payload = decode_access_token(credentials.credentials)
    if payload is None or "sub" not in payload or "jti" not in payload:
        raise AuthenticationError("Invalid or expired token")

    if is_token_revoked(db, payload["jti"]):
        raise AuthenticationError("Token has been revoked")

    return payload


def get_current_user(
    payload: Annotated[dict[str, Any], Depends(get_token_payload)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Resolve the user the token was issued to."""
    try:
        user_id = UUID(str(payload["sub"]))
    except ValueError:
        raise AuthenticationError("Invalid or expired token")

    user = get_user(db, user_id)
    if user is None:
        raise AuthenticationError("User not found")
    return user


def get_current_actor(
    user: Annotated[User, Depends(get_current_user)],
) -> Actor:
    """Policy-facing view of the current user."""
    return to_actor(user)


CurrentActor = Annotated[Actor, Depends(get_current_actor)]
