"""User profile domain entity."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from domain.entities.categories import normalize_roles, normalize_usages

# Fields a caller can never write through create/update/complete.
IMMUTABLE_FIELDS = frozenset(
    {
        "id",
        "keycloak_id",
        "completed_registration",
        "creation_date",
        "updated_date",
        "deleted",
    }
)

# Must be present and truthy before a registration is complete.
REGISTRATION_REQUIRED_FIELDS = ("consent_date", "understand_disclaimer", "accepted_terms")

# Personally identifying fields scrambled by the anonymizing delete.
ANONYMIZED_FIELDS = (
    "keycloak_id",
    "email",
    "affiliation",
    "public_email",
    "nih_ned_id",
    "era_commons_id",
    "first_name",
    "last_name",
    "linkedin",
    "external_individual_fullname",
    "external_individual_email",
)


@dataclass
class UserProfile:
    """Domain entity for a registrant profile."""

    keycloak_id: str
    id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    era_commons_id: Optional[str] = None
    nih_ned_id: Optional[str] = None
    email: Optional[str] = None
    public_email: Optional[str] = None
    external_individual_fullname: Optional[str] = None
    external_individual_email: Optional[str] = None
    roles: list[str] = field(default_factory=list)
    affiliation: Optional[str] = None
    portal_usages: list[str] = field(default_factory=list)
    research_area: Optional[str] = None
    commercial_use_reason: Optional[str] = None
    linkedin: Optional[str] = None
    profile_image_key: Optional[str] = None
    consent_date: Optional[datetime] = None
    understand_disclaimer: bool = False
    accepted_terms: bool = False
    completed_registration: bool = False
    deleted: bool = False
    creation_date: datetime = field(default_factory=datetime.utcnow)
    updated_date: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_date is always at least as recent as creation_date."""
        if self.updated_date < self.creation_date:
            self.updated_date = self.creation_date


USER_FIELDS = frozenset(UserProfile.__dataclass_fields__)


@dataclass(frozen=True)
class UserPatch:
    """Explicit set of field writes for a user record.

    Only keys present in ``values`` are written; a key mapped to ``None``
    clears that field. Immutable and unknown keys are dropped and category
    sets are normalized on construction.
    """

    values: Mapping[str, Any]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "UserPatch":
        values = {
            key: value
            for key, value in payload.items()
            if key in USER_FIELDS and key not in IMMUTABLE_FIELDS
        }
        if "roles" in values:
            values["roles"] = normalize_roles(values["roles"])
        if "portal_usages" in values:
            values["portal_usages"] = normalize_usages(values["portal_usages"])
        return cls(values=values)

    def missing_registration_fields(self) -> list[str]:
        """Required registration fields absent or falsy in this patch."""
        return [name for name in REGISTRATION_REQUIRED_FIELDS if not self.values.get(name)]

    def is_complete_registration(self) -> bool:
        return not self.missing_registration_fields()


@dataclass(frozen=True, slots=True)
class UserExistence:
    """Read-only value object: whether a record exists and is registered."""

    exists: bool
    completed_registration: bool
