"""
Rewrite every user's roles and portal usages in canonical code form.

Runs outside the request path. Each record is written independently; records
that fail are listed at the end and the script exits non-zero.

Usage:
    DATABASE_URL=postgresql://... python scripts/renormalize_categories.py
"""

import asyncio
import os
import sys

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

import structlog  # noqa: E402

from core.config import settings  # noqa: E402
from core.logging import setup_logging  # noqa: E402
from domain.services.user_service import UserService  # noqa: E402
from infrastructure.database.session import async_session_factory, engine  # noqa: E402
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork  # noqa: E402

logger = structlog.get_logger()


async def main() -> int:
    service = UserService(
        lambda: SQLAlchemyUnitOfWork(async_session_factory),
        migration_concurrency=settings.category_migration_concurrency,
    )
    try:
        report = await service.renormalize_categories()
    finally:
        await engine.dispose()

    for keycloak_id, error in report.failures:
        logger.error("record_not_migrated", keycloak_id=keycloak_id, error=error)
    return 1 if report.failures else 0


if __name__ == "__main__":
    setup_logging()
    sys.exit(asyncio.run(main()))
