"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.user_service import UserService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.storage.s3_storage import S3ObjectStorage


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_object_storage() -> S3ObjectStorage:
    """Get the profile image storage instance."""
    return S3ObjectStorage(
        bucket=settings.profile_image_bucket,
        region=settings.aws_region,
    )


@lru_cache
def get_user_service() -> UserService:
    """Get User service instance."""
    return UserService(
        get_uow_factory(),
        object_storage=get_object_storage(),
        image_extension=settings.profile_image_extension,
        image_content_type=settings.profile_image_content_type,
        image_upload_expiry=settings.profile_image_upload_expiry_seconds,
        migration_concurrency=settings.category_migration_concurrency,
    )
