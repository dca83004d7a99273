"""FastAPI application entrypoint for the posts API."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from posts_api.api.posts import router as posts_router
from posts_api.core.config import get_settings
from posts_api.core.responses import register_error_handlers
from posts_api.db import models as _models  # noqa: F401

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)
logger.info("Starting posts API with settings=%s", settings.safe_for_logging())

app = FastAPI(title="Posts API")
register_error_handlers(app)
app.include_router(posts_router)


@app.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint for service readiness."""
    return {"status": "ok"}
