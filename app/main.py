from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from app.api import health
from app.api.errors import register_exception_handlers
from app.core.config import settings
from app.core.database import engine
from app.core.logging_config import setup_logging
from app.core.logging_middleware import LoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} starting")
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    setup_logging()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan,
    )
    app.add_middleware(LoggingMiddleware)
    register_exception_handlers(app)
    app.include_router(health.router)
    return app


app = create_app()
