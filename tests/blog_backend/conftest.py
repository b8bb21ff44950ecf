"""Pytest fixtures for backend tests."""

import os

# Settings require these; set them before any blog_backend import.
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-blog-backend")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timezone
from typing import Callable, Generator, Iterable, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import blog_backend.models  # noqa: F401
from blog_backend.core.identity import create_user as create_identity
from blog_backend.core.security import create_access_token
from blog_backend.database import Base, get_db
from blog_backend.main import app
from blog_backend.models.post import Post
from blog_backend.models.user import ROLE_AUTHOR, User


@pytest.fixture(scope="function")
def test_db_engine():
    """Create a database engine for testing.

    Uses an in-memory SQLite database unless TEST_DATABASE_URL is set.
    """
    test_db_url = os.getenv("TEST_DATABASE_URL", "sqlite://")

    if test_db_url.startswith("sqlite"):
        engine = create_engine(
            test_db_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(test_db_url, pool_pre_ping=True)

    # Create all tables
    Base.metadata.create_all(bind=engine)

    yield engine

    # Cleanup: drop all tables
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine) -> Generator[Session, None, None]:
    """Create a database session for testing with automatic rollback."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_db_engine,
    )

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        # Rollback any uncommitted changes to clean up test data
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def test_client(test_db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database dependency override."""

    def override_get_db() -> Generator[Session, None, None]:
        """Override get_db dependency to use test database session."""
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    client = TestClient(app)

    try:
        yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def create_user(test_db_session: Session) -> Callable:
    """Factory function to create users directly in the database.

    Returns:
        Function that creates a user with given parameters and returns (user, token)

    Example:
        ```python
        def test_example(create_user):
            user, token = create_user(
                email="test@example.com",
                password="testpassword123",
                name="Test User",
                roles=["admin"],
            )
        ```
    """

    def _create_user(
        email: str,
        password: str = "testpassword123",
        name: str = "Test User",
        roles: Iterable[str] = (ROLE_AUTHOR,),
    ) -> tuple[User, str]:
        """Create a user in the database and return user with access token.

        Args:
            email: User email address
            password: Plain text password (will be hashed)
            name: User name
            roles: Role names to assign (default: author only)

        Returns:
            Tuple of (Created User object, JWT access token)
        """
        user = create_identity(
            test_db_session,
            name=name,
            email=email,
            password=password,
            roles=roles,
        )
        token = create_access_token(data={"sub": str(user.id)})
        return user, token

    return _create_user


@pytest.fixture(scope="function")
def create_post(test_db_session: Session) -> Callable:
    """Factory function to create posts directly in the database."""

    def _create_post(
        author: User,
        title: str,
        category: str = "Technology",
        content: str = "Content here",
        created_at: Optional[datetime] = None,
    ) -> Post:
        timestamp = created_at or datetime.now(timezone.utc)
        post = Post(
            author_id=author.id,
            title=title,
            content=content,
            category=category,
            created_at=timestamp,
            updated_at=timestamp,
        )
        test_db_session.add(post)
        test_db_session.commit()
        test_db_session.refresh(post)
        return post

    return _create_post
