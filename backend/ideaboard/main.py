"""FastAPI application entry point. Registers middleware, exception handlers and API routers."""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from ideaboard.config import settings
from ideaboard.database import Base, engine
from ideaboard.errors import register_exception_handlers
from ideaboard.logging_config import setup_logging
import ideaboard.models  # noqa: F401 - registers model metadata
from ideaboard.routers import (
    auth, ideas, comments, groups, surveys, notifications, users, dashboard, export, audit,
)

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="IdeaBoard API",
    description="Internal idea board: ideas, likes, comments, groups, surveys and gamification",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "HEAD", "PATCH"],
    allow_headers=["Origin", "Content-Type", "Accept", "Authorization", "X-Requested-With"],
    max_age=86400,
)

register_exception_handlers(app)

# Register all routers
app.include_router(auth.router)
app.include_router(ideas.router)
app.include_router(comments.router)
app.include_router(groups.router)
app.include_router(surveys.router)
app.include_router(notifications.router)
app.include_router(users.router)
app.include_router(dashboard.router)
app.include_router(export.router)
app.include_router(audit.router)


@app.on_event("startup")
def ensure_schema():
    Base.metadata.create_all(bind=engine)
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    logger.info("IdeaBoard API started (debug=%s)", settings.DEBUG)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "IdeaBoard API"}
