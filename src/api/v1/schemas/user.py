"""Pydantic schemas for User API."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserWrite(BaseModel):
    """Writable profile fields.

    Only fields present in the request body are applied (see
    ``to_payload``). Identity, status flags and timestamps are not
    accepted here and are dropped if sent.
    """

    model_config = ConfigDict(extra="ignore")

    first_name: str | None = Field(None, max_length=255)
    last_name: str | None = Field(None, max_length=255)
    era_commons_id: str | None = Field(None, max_length=255)
    nih_ned_id: str | None = Field(None, max_length=255)
    email: str | None = Field(None, max_length=255)
    public_email: str | None = Field(None, max_length=255)
    external_individual_fullname: str | None = Field(None, max_length=255)
    external_individual_email: str | None = Field(None, max_length=255)
    roles: list[str] = Field(default_factory=list)
    affiliation: str | None = Field(None, max_length=255)
    portal_usages: list[str] = Field(default_factory=list)
    research_area: str | None = None
    commercial_use_reason: str | None = None
    linkedin: str | None = Field(None, max_length=255)
    profile_image_key: str | None = Field(None, max_length=255)
    consent_date: datetime | None = None
    understand_disclaimer: bool = False
    accepted_terms: bool = False

    @field_validator("consent_date")
    @classmethod
    def to_naive_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    def to_payload(self) -> dict[str, Any]:
        """Fields explicitly sent by the caller, explicit nulls included."""
        return self.model_dump(exclude_unset=True)


class UserResponse(BaseModel):
    """Schema for a user record.

    Every field is optional: routes serialize with ``exclude_unset`` so a
    redacted record only carries the fields the caller may see.
    """

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 123,
                "keycloak_id": "2f7c1c1e-7d0e-4c43-9d1e-0d1f3b7e9a10",
                "first_name": "Ada",
                "last_name": "Smith",
                "roles": ["researcher"],
                "portal_usages": ["identifying_dataset"],
                "affiliation": "Example University",
                "creation_date": "2026-01-28T10:00:00",
                "updated_date": "2026-01-28T10:00:00",
            }
        },
    )

    id: int | None = None
    keycloak_id: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    era_commons_id: str | None = None
    nih_ned_id: str | None = None
    email: str | None = None
    public_email: str | None = None
    external_individual_fullname: str | None = None
    external_individual_email: str | None = None
    roles: list[str] | None = None
    affiliation: str | None = None
    portal_usages: list[str] | None = None
    research_area: str | None = None
    commercial_use_reason: str | None = None
    linkedin: str | None = None
    profile_image_key: str | None = None
    consent_date: datetime | None = None
    understand_disclaimer: bool | None = None
    accepted_terms: bool | None = None
    completed_registration: bool | None = None
    deleted: bool | None = None
    creation_date: datetime | None = None
    updated_date: datetime | None = None


class UserDetailResponse(BaseModel):
    """Schema for single User."""

    data: UserResponse


class UserSearchResponse(BaseModel):
    """Schema for one page of search results."""

    data: list[UserResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class UserExistenceData(BaseModel):
    exists: bool
    completed_registration: bool


class UserExistenceResponse(BaseModel):
    data: UserExistenceData


class PresignedUploadData(BaseModel):
    s3_key: str
    presign_url: str


class PresignedUploadResponse(BaseModel):
    """Schema for a profile image upload URL."""

    data: PresignedUploadData
