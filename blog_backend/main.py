import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import uvicorn

from blog_backend.config import settings
from blog_backend.core.exceptions import register_exception_handlers
from blog_backend.routers import auth, comments, posts


def configure_logging() -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


configure_logging()

app = FastAPI(title=settings.app_name)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router)
app.include_router(posts.router)
app.include_router(comments.router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "healthy", "service": "blog_backend"}


if __name__ == "__main__":
    uvicorn.run(
        "blog_backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        loop="asyncio",  # Explicitly use asyncio instead of auto (which tries uvloop)
    )
