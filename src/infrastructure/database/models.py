"""SQLAlchemy ORM models."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class UserModel(Base):
    """Registrant profile model.

    Rows are never physically deleted: the anonymizing delete scrambles the
    identifying columns and sets ``deleted``.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    keycloak_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(255))
    last_name: Mapped[Optional[str]] = mapped_column(String(255))
    era_commons_id: Mapped[Optional[str]] = mapped_column(String(255))
    nih_ned_id: Mapped[Optional[str]] = mapped_column(String(255))
    email: Mapped[Optional[str]] = mapped_column(String(255))
    public_email: Mapped[Optional[str]] = mapped_column(String(255))
    external_individual_fullname: Mapped[Optional[str]] = mapped_column(String(255))
    external_individual_email: Mapped[Optional[str]] = mapped_column(String(255))
    roles: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    affiliation: Mapped[Optional[str]] = mapped_column(String(255))
    portal_usages: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    research_area: Mapped[Optional[str]] = mapped_column(Text)
    commercial_use_reason: Mapped[Optional[str]] = mapped_column(Text)
    linkedin: Mapped[Optional[str]] = mapped_column(String(255))
    profile_image_key: Mapped[Optional[str]] = mapped_column(String(255))
    consent_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    understand_disclaimer: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    accepted_terms: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed_registration: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, index=True
    )
    deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    creation_date: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_date: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
