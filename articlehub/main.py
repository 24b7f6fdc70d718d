"""ArticleHub API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ArticleHubError → structured JSON responses
    - CORS and rate limit configured from settings (not hardcoded)
    - Database pool initialized on startup and disposed on shutdown via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Avatars served from the upload directory under /uploads
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi.middleware import SlowAPIMiddleware

from articlehub.api.error_handlers import register_error_handlers
from articlehub.api.routes import (
    articles, auth, comments, health, profile, reactions, users,
)
from articlehub.config import get_settings
from articlehub.infrastructure.database import close_db, init_db
from articlehub.infrastructure.http_guards import SecurityHeadersMiddleware, build_limiter
from articlehub.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    logger.info("ArticleHub API started")
    yield
    logger.info("ArticleHub API shutting down")
    await close_db()


app = FastAPI(
    title="ArticleHub API", version=API_VERSION, lifespan=lifespan,
)

settings = get_settings()
# Last added runs outermost: CORS and security headers also wrap 429 responses
app.state.limiter = build_limiter(settings)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(profile.router)
app.include_router(articles.router)
app.include_router(comments.router)
app.include_router(reactions.router)

# check_dir=False: the directory is created in lifespan, after import
app.mount(
    "/uploads",
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="uploads",
)


@app.get("/", tags=["root"])
async def root():
    return {
        "message": "ArticleHub Backend API",
        "version": API_VERSION,
        "status": "running",
    }


register_error_handlers(app)
