"""Authentication router."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from blog_backend.core.dependencies import get_current_user, get_token_payload, revoke_token
from blog_backend.core.exceptions import AuthenticationError
from blog_backend.core.identity import create_user, get_user_by_email, resolve_role
from blog_backend.core.security import create_access_token, token_ttl_seconds, verify_password
from blog_backend.database import get_db
from blog_backend.models.user import User
from blog_backend.schemas.auth import (
    MessageResponse,
    RegisterResponse,
    TokenResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def user_response(user: User) -> UserResponse:
    return UserResponse(
        id=str(user.id),
        email=user.email,
        name=user.name,
        roles=sorted(user.role_names),
        created_at=user.created_at.isoformat(),
    )


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
) -> RegisterResponse:
    """Create a new user account and sign it in.

    Args:
        user_data: Registration data (name, email, password, confirmation, optional role)
        db: Database session

    Returns:
        RegisterResponse: Created user and an access token

    Raises:
        ConflictError: If email already exists
    """
    new_user = create_user(
        db,
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        roles=[resolve_role(user_data.role)],
    )

    access_token = create_access_token(data={"sub": str(new_user.id)})

    return RegisterResponse(
        user=user_response(new_user),
        access_token=access_token,
        token_type="bearer",
    )


@router.post("/login", response_model=TokenResponse, status_code=status.HTTP_200_OK)
async def login(
    user_data: UserLogin,
    db: Annotated[Session, Depends(get_db)],
) -> TokenResponse:
    """Authenticate user and return access token.

    Raises:
        AuthenticationError: If email or password is invalid
    """
    user = get_user_by_email(db, user_data.email)
    if user is None or not verify_password(user_data.password, user.password_hash):
        logger.warning(f"Failed login attempt for {user_data.email}")
        raise AuthenticationError("Invalid credentials")

    access_token = create_access_token(data={"sub": str(user.id)})

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=token_ttl_seconds(),
    )


@router.post("/logout", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def logout(
    payload: Annotated[dict[str, Any], Depends(get_token_payload)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Invalidate the presented access token."""
    revoke_token(db, payload)
    logger.info(f"User {payload['sub']} logged out")
    return MessageResponse(message="Successfully logged out")


@router.get("/me", response_model=UserResponse)
async def me(current_user: Annotated[User, Depends(get_current_user)]) -> UserResponse:
    """Return the authenticated user."""
    return user_response(current_user)
