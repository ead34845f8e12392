"""Structured search query for user records.

A query is a conjunction of predicates plus ordering and a page window.
Predicates name entity fields, never storage columns, so the repository
decides how each one is executed.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class FieldEquals:
    """``field == value``."""

    field: str
    value: object


@dataclass(frozen=True, slots=True)
class TextMatch:
    """Case-insensitive substring match of ``text`` on any of ``fields``."""

    fields: tuple[str, ...]
    text: str


@dataclass(frozen=True, slots=True)
class ContainsAll:
    """The record's set ``field`` holds every one of ``values``."""

    field: str
    values: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class NotContainedIn:
    """The record's set ``field`` has at least one element outside ``universe``."""

    field: str
    universe: tuple[str, ...]


Predicate = FieldEquals | TextMatch | ContainsAll | NotContainedIn


@dataclass(frozen=True, slots=True)
class SortKey:
    field: str
    descending: bool = False


@dataclass(frozen=True)
class UserSearchQuery:
    """Conjunctive filter, ordering and page window for a user search."""

    predicates: tuple[Predicate, ...]
    limit: int
    offset: int = 0
    sort: tuple[SortKey, ...] = field(default_factory=tuple)
