"""Main FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes.health import router as health_router
from api.v1 import router as v1_router
from core.config import settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler
from infrastructure.database.session import engine

logger = structlog.get_logger()

# Initialize structured logging
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup/shutdown tasks."""
    logger.info("application_started", environment=settings.app_env)
    yield
    await engine.dispose()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=(
            "## User Directory\n\n"
            "Stores registrant profiles and serves a paginated, multi-criteria "
            "search over completed registrations.\n\n"
            "### Features\n"
            "- **Profiles**: create, update, complete registration and delete "
            "(anonymize) your own profile\n"
            "- **Search**: text match on names and affiliation, role and usage "
            "filters including the catch-all `other`\n"
            "- **Redaction**: other users' profiles only expose public fields\n\n"
            "### Authentication\n"
            "All endpoints (except `/health`) require a valid Keycloak access token "
            "in the Authorization header:\n"
            "```\nAuthorization: Bearer <your_token>\n```\n\n"
            "### Rate Limits\n"
            "- GET endpoints: 30 requests/minute\n"
            "- POST/PUT/DELETE: 10 requests/minute"
        ),
        version="1.0.0",
        debug=settings.debug,
        openapi_tags=[
            {
                "name": "health",
                "description": "Health check endpoints",
            },
            {
                "name": "users",
                "description": "Profile lifecycle and user search",
            },
        ],
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Security & tracking middleware (LIFO order - last added = outermost)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # GZip compression for responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Setup exception handlers
    setup_exception_handlers(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(v1_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
