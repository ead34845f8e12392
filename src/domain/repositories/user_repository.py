"""User repository protocol."""

from collections.abc import Mapping
from typing import Any, Protocol

from domain.entities.user import UserProfile
from domain.entities.user_query import UserSearchQuery


class IUserRepository(Protocol):
    """Repository interface for UserProfile entities."""

    async def get_by_keycloak_id(
        self, keycloak_id: str, include_deleted: bool = False
    ) -> UserProfile | None:
        """Get a user by identity-provider subject, live records only by default."""
        ...

    async def search(self, query: UserSearchQuery) -> tuple[list[UserProfile], int]:
        """Get one page of matching users and the total match count."""
        ...

    async def list_all(self) -> list[UserProfile]:
        """Get every stored user, deleted ones included."""
        ...

    async def create(self, user: UserProfile) -> UserProfile:
        """Insert a new user. Raises UserAlreadyExistsError on duplicate identity."""
        ...

    async def update(self, keycloak_id: str, values: Mapping[str, Any]) -> UserProfile | None:
        """Write ``values`` to the live user with this identity.

        Returns the updated user, or None when no live user matches.
        """
        ...

    async def update_by_id(self, user_id: int, values: Mapping[str, Any]) -> UserProfile | None:
        """Write ``values`` to the user with this primary key, including deleted users.

        Returns the updated user, or None when no row has this key.
        """
        ...
