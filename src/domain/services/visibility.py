"""Which user fields a caller may see."""

from dataclasses import asdict
from typing import Any

from domain.entities.user import USER_FIELDS, UserProfile

# Visible on records the caller does not own, and on every search row.
PUBLIC_USER_FIELDS = frozenset(
    {
        "id",
        "keycloak_id",
        "first_name",
        "last_name",
        "roles",
        "portal_usages",
        "creation_date",
        "updated_date",
        "public_email",
        "commercial_use_reason",
        "linkedin",
        "affiliation",
        "profile_image_key",
    }
)


def fields_for(is_own_record: bool) -> frozenset[str]:
    return USER_FIELDS if is_own_record else PUBLIC_USER_FIELDS


def is_own_record(caller_id: str, requested_id: str | None) -> bool:
    """A request without an explicit target is a request for the caller's own record."""
    return requested_id is None or requested_id == caller_id


def redact(user: UserProfile, is_own_record: bool) -> dict[str, Any]:
    """Project a user onto the fields the caller may see."""
    visible = fields_for(is_own_record)
    return {key: value for key, value in asdict(user).items() if key in visible}
