"""Builds structured user search queries from caller criteria."""

from collections.abc import Sequence

from core.exceptions import InvalidSortError, MissingFilterOptionsError
from domain.entities.categories import is_other
from domain.entities.user_query import (
    ContainsAll,
    FieldEquals,
    NotContainedIn,
    Predicate,
    SortKey,
    TextMatch,
    UserSearchQuery,
)
from domain.services.visibility import PUBLIC_USER_FIELDS

DEFAULT_PAGE_SIZE = 15
MATCH_FIELDS = ("first_name", "last_name", "affiliation")
SORTABLE_FIELDS = PUBLIC_USER_FIELDS - {"roles", "portal_usages"}

_DIRECTIONS = {"asc": False, "ascending": False, "desc": True, "descending": True}


def parse_sort(sort: str | None) -> tuple[SortKey, ...]:
    """Parse ``field:direction`` tokens separated by commas.

    Direction is case-insensitive and defaults to ascending when omitted.
    """
    if not sort:
        return ()

    keys: list[SortKey] = []
    for token in sort.split(","):
        token = token.strip()
        if not token:
            continue
        name, _, direction = token.partition(":")
        name = name.strip()
        direction = direction.strip().lower() or "asc"
        if name not in SORTABLE_FIELDS or direction not in _DIRECTIONS:
            raise InvalidSortError(token)
        keys.append(SortKey(field=name, descending=_DIRECTIONS[direction]))
    return tuple(keys)


def _category_predicates(
    field: str,
    filters: Sequence[str],
    universe: Sequence[str],
    universe_parameter: str,
) -> list[Predicate]:
    """Translate one category dimension's filters into predicates.

    Concrete codes require the record to hold all of them. The "other"
    sentinel requires at least one code outside the known universe. When both
    are requested the predicates are ANDed.
    """
    predicates: list[Predicate] = []
    concrete = tuple(
        value.strip().lower() for value in filters if value.strip() and not is_other(value)
    )
    if concrete:
        predicates.append(ContainsAll(field=field, values=concrete))

    if any(is_other(value) for value in filters):
        known = tuple(value.strip() for value in universe if value.strip())
        if not known:
            raise MissingFilterOptionsError(universe_parameter)
        predicates.append(NotContainedIn(field=field, universe=known))
    return predicates


def build_user_search_query(
    page_size: int = DEFAULT_PAGE_SIZE,
    page_index: int = 0,
    sort: Sequence[SortKey] = (),
    match: str | None = None,
    roles: Sequence[str] = (),
    data_uses: Sequence[str] = (),
    role_options: Sequence[str] = (),
    usage_options: Sequence[str] = (),
) -> UserSearchQuery:
    """Assemble the search filter over completed, live registrations."""
    if page_size < 0 or page_index < 0:
        raise ValueError("page_size and page_index must be non-negative")

    predicates: list[Predicate] = [
        FieldEquals(field="completed_registration", value=True),
        FieldEquals(field="deleted", value=False),
    ]

    if match and match.strip():
        predicates.append(TextMatch(fields=MATCH_FIELDS, text=match.strip()))

    predicates.extend(_category_predicates("roles", roles, role_options, "roleOptions"))
    predicates.extend(
        _category_predicates("portal_usages", data_uses, usage_options, "usageOptions")
    )

    return UserSearchQuery(
        predicates=tuple(predicates),
        limit=page_size,
        offset=page_index * page_size,
        sort=tuple(sort),
    )
