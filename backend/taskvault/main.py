"""TaskVault API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map every failure through core/error_mapping
    - CORS configured from settings (not hardcoded)
    - Connection pool created on startup and disposed on shutdown via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Missing signing secret is logged at startup but does not abort boot:
      registration and health probes keep working, token routes answer 500
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskvault.api.error_handlers import register_error_handlers
from taskvault.api.routes import auth, health, tasks
from taskvault.config import get_settings
from taskvault.infrastructure.database import close_db, init_db
from taskvault.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


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
    if not settings.jwt_secret:
        logger.error("JWT_SECRET is not set: token issuance and verification will fail")
    logger.info("TaskVault API started")
    yield
    await close_db()
    logger.info("TaskVault API shut down")


app = FastAPI(title="TaskVault API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(tasks.router)

register_error_handlers(app)
