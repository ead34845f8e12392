"""SQLAlchemy implementation of User repository."""

from collections.abc import Mapping
from typing import Any

from sqlalchemy import ColumnElement, func, not_, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from core.exceptions import UserAlreadyExistsError
from domain.entities.user import USER_FIELDS, UserProfile
from domain.entities.user_query import (
    ContainsAll,
    FieldEquals,
    NotContainedIn,
    Predicate,
    TextMatch,
    UserSearchQuery,
)
from infrastructure.database.models import UserModel


def _like_pattern(text: str) -> str:
    """Substring pattern with LIKE wildcards in ``text`` escaped."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _column(name: str) -> InstrumentedAttribute[Any]:
    if name not in USER_FIELDS:
        raise ValueError(f"Unknown user field: {name}")
    return getattr(UserModel, name)  # type: ignore[no-any-return]


def to_condition(predicate: Predicate) -> ColumnElement[bool]:
    """Translate a search predicate into a SQL condition.

    Category sets are JSONB arrays: ``@>`` checks contains-all and ``<@``
    checks contained-by.
    """
    if isinstance(predicate, FieldEquals):
        return _column(predicate.field) == predicate.value
    if isinstance(predicate, TextMatch):
        pattern = _like_pattern(predicate.text)
        return or_(*(_column(name).ilike(pattern, escape="\\") for name in predicate.fields))
    if isinstance(predicate, ContainsAll):
        return _column(predicate.field).contains(list(predicate.values))
    if isinstance(predicate, NotContainedIn):
        return not_(_column(predicate.field).contained_by(list(predicate.universe)))
    raise TypeError(f"Unsupported predicate: {predicate!r}")


class SQLAlchemyUserRepository:
    """SQLAlchemy implementation of IUserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_keycloak_id(
        self, keycloak_id: str, include_deleted: bool = False
    ) -> UserProfile | None:
        """Get a user by identity-provider subject."""
        model = await self._get_model(keycloak_id, include_deleted)
        return self._to_entity(model) if model else None

    async def search(self, query: UserSearchQuery) -> tuple[list[UserProfile], int]:
        """Get one page of matching users and the total match count."""
        conditions = [to_condition(predicate) for predicate in query.predicates]

        count_stmt = select(func.count()).select_from(UserModel).where(*conditions)
        total = (await self._session.execute(count_stmt)).scalar() or 0

        order_by = [
            _column(key.field).desc() if key.descending else _column(key.field).asc()
            for key in query.sort
        ]
        stmt = (
            select(UserModel)
            .where(*conditions)
            .order_by(*order_by, UserModel.id.asc())
            .offset(query.offset)
            .limit(query.limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()], total

    async def list_all(self) -> list[UserProfile]:
        """Get every stored user, deleted ones included."""
        stmt = select(UserModel).order_by(UserModel.id)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, user: UserProfile) -> UserProfile:
        """Insert a new user."""
        model = self._to_model(user)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise UserAlreadyExistsError(user.keycloak_id) from exc
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, keycloak_id: str, values: Mapping[str, Any]) -> UserProfile | None:
        """Write ``values`` to the live user with this identity."""
        model = await self._get_model(keycloak_id, include_deleted=False)
        if not model:
            return None

        for name, value in values.items():
            setattr(model, _column(name).key, value)

        await self._session.flush()
        return self._to_entity(model)

    async def update_by_id(self, user_id: int, values: Mapping[str, Any]) -> UserProfile | None:
        """Write ``values`` to the user row with this primary key, deleted or not."""
        model = await self._session.get(UserModel, user_id)
        if not model:
            return None

        for name, value in values.items():
            setattr(model, _column(name).key, value)

        await self._session.flush()
        return self._to_entity(model)

    async def _get_model(self, keycloak_id: str, include_deleted: bool) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.keycloak_id == keycloak_id)
        if not include_deleted:
            stmt = stmt.where(UserModel.deleted.is_(False))
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: UserModel) -> UserProfile:
        """Convert ORM model to domain entity."""
        return UserProfile(
            id=model.id,
            keycloak_id=model.keycloak_id,
            first_name=model.first_name,
            last_name=model.last_name,
            era_commons_id=model.era_commons_id,
            nih_ned_id=model.nih_ned_id,
            email=model.email,
            public_email=model.public_email,
            external_individual_fullname=model.external_individual_fullname,
            external_individual_email=model.external_individual_email,
            roles=list(model.roles or []),
            affiliation=model.affiliation,
            portal_usages=list(model.portal_usages or []),
            research_area=model.research_area,
            commercial_use_reason=model.commercial_use_reason,
            linkedin=model.linkedin,
            profile_image_key=model.profile_image_key,
            consent_date=model.consent_date,
            understand_disclaimer=model.understand_disclaimer,
            accepted_terms=model.accepted_terms,
            completed_registration=model.completed_registration,
            deleted=model.deleted,
            creation_date=model.creation_date,
            updated_date=model.updated_date,
        )

    def _to_model(self, entity: UserProfile) -> UserModel:
        """Convert domain entity to ORM model. The store assigns ``id``."""
        return UserModel(
            keycloak_id=entity.keycloak_id,
            first_name=entity.first_name,
            last_name=entity.last_name,
            era_commons_id=entity.era_commons_id,
            nih_ned_id=entity.nih_ned_id,
            email=entity.email,
            public_email=entity.public_email,
            external_individual_fullname=entity.external_individual_fullname,
            external_individual_email=entity.external_individual_email,
            roles=list(entity.roles),
            affiliation=entity.affiliation,
            portal_usages=list(entity.portal_usages),
            research_area=entity.research_area,
            commercial_use_reason=entity.commercial_use_reason,
            linkedin=entity.linkedin,
            profile_image_key=entity.profile_image_key,
            consent_date=entity.consent_date,
            understand_disclaimer=entity.understand_disclaimer,
            accepted_terms=entity.accepted_terms,
            completed_registration=entity.completed_registration,
            deleted=entity.deleted,
            creation_date=entity.creation_date,
            updated_date=entity.updated_date,
        )
