"""User service layer with business logic."""

import asyncio
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

import structlog

from core.exceptions import (
    IncompleteRegistrationError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from domain.entities.categories import normalize_roles, normalize_usages
from domain.entities.user import (
    ANONYMIZED_FIELDS,
    UserExistence,
    UserPatch,
    UserProfile,
)
from domain.entities.user_query import SortKey
from domain.repositories.object_storage import IObjectStorage
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.user_search import DEFAULT_PAGE_SIZE, build_user_search_query
from domain.services.visibility import is_own_record, redact

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class UserSearchResult:
    """Read-only value object: one redacted page of users and the total count."""

    users: list[dict[str, Any]]
    total: int


@dataclass(frozen=True, slots=True)
class PresignedUpload:
    s3_key: str
    presign_url: str


@dataclass(frozen=True)
class CategoryMigrationReport:
    """Outcome of a category re-normalization pass."""

    processed: int
    updated: int
    failures: list[tuple[str, str]] = field(default_factory=list)


class UserService:
    """Service layer for user profile business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        object_storage: Optional[IObjectStorage] = None,
        image_extension: str = "jpeg",
        image_content_type: str = "image/jpeg",
        image_upload_expiry: int = 60 * 5,
        migration_concurrency: int = 10,
    ) -> None:
        self._uow_factory = uow_factory
        self._storage = object_storage
        self._image_extension = image_extension
        self._image_content_type = image_content_type
        self._image_upload_expiry = image_upload_expiry
        self._migration_concurrency = migration_concurrency

    async def search(
        self,
        page_size: int = DEFAULT_PAGE_SIZE,
        page_index: int = 0,
        sort: Sequence[SortKey] = (),
        match: str | None = None,
        roles: Sequence[str] = (),
        data_uses: Sequence[str] = (),
        role_options: Sequence[str] = (),
        usage_options: Sequence[str] = (),
    ) -> UserSearchResult:
        """Search completed, live registrations. Rows only carry public fields."""
        query = build_user_search_query(
            page_size=page_size,
            page_index=page_index,
            sort=sort,
            match=match,
            roles=roles,
            data_uses=data_uses,
            role_options=role_options,
            usage_options=usage_options,
        )
        async with self._uow_factory() as uow:
            users, total = await uow.users.search(query)

        return UserSearchResult(
            users=[redact(user, is_own_record=False) for user in users],
            total=total,
        )

    async def get_visible(self, caller_id: str, requested_id: str | None = None) -> dict[str, Any]:
        """Get a live user, redacted unless the caller owns it."""
        own = is_own_record(caller_id, requested_id)
        keycloak_id = caller_id if requested_id is None else requested_id
        async with self._uow_factory() as uow:
            user = await uow.users.get_by_keycloak_id(keycloak_id)
            if not user:
                raise UserNotFoundError(keycloak_id)
            return redact(user, is_own_record=own)

    async def exists(self, keycloak_id: str) -> UserExistence:
        """Report whether any record exists for the identity and if it is registered."""
        async with self._uow_factory() as uow:
            user = await uow.users.get_by_keycloak_id(keycloak_id, include_deleted=True)
            return UserExistence(
                exists=user is not None,
                completed_registration=bool(user and user.completed_registration),
            )

    async def create(self, keycloak_id: str, payload: Mapping[str, Any]) -> UserProfile:
        """Create the caller's record.

        Caller-supplied identity, status and timestamps are ignored. The record
        starts registered only when the payload passes the registration gate.
        """
        patch = UserPatch.from_payload(payload)
        now = datetime.utcnow()

        async with self._uow_factory() as uow:
            existing = await uow.users.get_by_keycloak_id(keycloak_id)
            if existing:
                raise UserAlreadyExistsError(keycloak_id)

            user = UserProfile(
                **patch.values,
                keycloak_id=keycloak_id,
                completed_registration=patch.is_complete_registration(),
                creation_date=now,
                updated_date=now,
            )
            created = await uow.users.create(user)
            await uow.commit()

        logger.info(
            "user_created",
            user_id=created.id,
            completed_registration=created.completed_registration,
        )
        return created

    async def update(self, keycloak_id: str, payload: Mapping[str, Any]) -> UserProfile:
        """Overwrite the fields present in ``payload``; others are left unchanged."""
        patch = UserPatch.from_payload(payload)
        updated = await self._write(
            keycloak_id, {**patch.values, "updated_date": datetime.utcnow()}
        )
        logger.info("user_updated", user_id=updated.id, fields=sorted(patch.values))
        return updated

    async def complete_registration(
        self, keycloak_id: str, payload: Mapping[str, Any]
    ) -> UserProfile:
        """Apply ``payload`` and mark the registration complete.

        Nothing is written unless every required consent field is present and truthy.
        """
        patch = UserPatch.from_payload(payload)
        missing = patch.missing_registration_fields()
        if missing:
            raise IncompleteRegistrationError(missing)

        updated = await self._write(
            keycloak_id,
            {
                **patch.values,
                "completed_registration": True,
                "updated_date": datetime.utcnow(),
            },
        )
        logger.info("user_registration_completed", user_id=updated.id)
        return updated

    async def delete(self, keycloak_id: str) -> None:
        """Anonymize the caller's record and mark it deleted.

        Every identifying field gets its own random token. The row itself is
        kept. A record that is already deleted no longer matches its old
        identity, so a second call raises UserNotFoundError instead of
        scrambling again.
        """
        values: dict[str, Any] = {name: str(uuid4()) for name in ANONYMIZED_FIELDS}
        values["deleted"] = True
        values["updated_date"] = datetime.utcnow()

        deleted = await self._write(keycloak_id, values)
        logger.info("user_anonymized", user_id=deleted.id)

    async def get_profile_image_upload_url(self, keycloak_id: str) -> PresignedUpload:
        """Presign an upload of the caller's profile image."""
        key = self._profile_image_key(keycloak_id)
        url = await self._require_storage().presign_upload(
            key, self._image_content_type, self._image_upload_expiry
        )
        return PresignedUpload(s3_key=key, presign_url=url)

    async def delete_profile_image(self, keycloak_id: str) -> None:
        """Delete the caller's profile image object."""
        await self._require_storage().delete(self._profile_image_key(keycloak_id))

    async def renormalize_categories(self) -> CategoryMigrationReport:
        """Rewrite every stored record's category sets in canonical form.

        Deleted records are rewritten too. They are addressed by primary key
        because their identity was scrambled. Each record is written in its
        own unit of work, and a failing record is logged and reported without
        stopping the others.
        """
        async with self._uow_factory() as uow:
            users = await uow.users.list_all()

        semaphore = asyncio.Semaphore(max(1, self._migration_concurrency))

        async def renormalize(user: UserProfile) -> bool:
            roles = normalize_roles(user.roles)
            usages = normalize_usages(user.portal_usages)
            async with semaphore, self._uow_factory() as record_uow:
                updated_user = await record_uow.users.update_by_id(
                    user.id,
                    {
                        "roles": roles,
                        "portal_usages": usages,
                        "updated_date": datetime.utcnow(),
                    },
                )
                if updated_user is None:
                    raise UserNotFoundError(user.keycloak_id)
                await record_uow.commit()
            return roles != user.roles or usages != user.portal_usages

        results = await asyncio.gather(
            *(renormalize(user) for user in users), return_exceptions=True
        )

        updated = 0
        failures: list[tuple[str, str]] = []
        for user, result in zip(users, results):
            if isinstance(result, BaseException):
                logger.error(
                    "category_migration_record_failed",
                    user_id=user.id,
                    error=str(result),
                    error_type=type(result).__name__,
                )
                failures.append((user.keycloak_id, str(result)))
            elif result:
                updated += 1

        report = CategoryMigrationReport(
            processed=len(users), updated=updated, failures=failures
        )
        logger.info(
            "category_migration_completed",
            processed=report.processed,
            updated=report.updated,
            failed=len(report.failures),
        )
        return report

    async def _write(self, keycloak_id: str, values: Mapping[str, Any]) -> UserProfile:
        """Write to the live record for the identity or raise UserNotFoundError."""
        async with self._uow_factory() as uow:
            updated = await uow.users.update(keycloak_id, values)
            if not updated:
                raise UserNotFoundError(keycloak_id)
            await uow.commit()
            return updated

    def _profile_image_key(self, keycloak_id: str) -> str:
        return f"{keycloak_id}.{self._image_extension}"

    def _require_storage(self) -> IObjectStorage:
        if self._storage is None:
            raise RuntimeError("UserService was created without object storage.")
        return self._storage

