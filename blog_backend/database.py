"""Database connection and session management."""

from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from blog_backend.config import settings

# Same URL alembic/env.py migrates
DATABASE_URL = settings.database_url


def engine_options(url: str) -> dict[str, Any]:
    """Return create_engine keyword arguments suited to the database backend.

    SQLite does not take pool sizing arguments and needs same-thread checks
    disabled because FastAPI serves sync endpoints from a thread pool.
    """
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Verify connections before using
        "pool_size": 10,  # Number of connections to maintain
        "max_overflow": 20,  # Maximum number of connections beyond pool_size
    }


# Create database engine with connection pooling
engine = create_engine(
    DATABASE_URL,
    echo=False,  # Set to True for SQL query logging in development
    **engine_options(DATABASE_URL),
)

# Create session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# Base class for declarative models
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Dependency for getting database session.

    Yields:
        Session: SQLAlchemy database session

    Example:
        ```python
        from blog_backend.database import get_db

        @app.get("/posts")
        def get_posts(db: Session = Depends(get_db)):
            return db.query(Post).all()
        ```
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
