"""Unit tests for translating search predicates into PostgreSQL conditions."""

import pytest
from sqlalchemy.dialects import postgresql

from domain.entities.user_query import ContainsAll, FieldEquals, NotContainedIn, TextMatch
from infrastructure.database.repositories.sqlalchemy_user_repo import (
    _like_pattern,
    to_condition,
)


def _compile(predicate):
    return to_condition(predicate).compile(dialect=postgresql.dialect())


class TestToCondition:
    def test_field_equals(self):
        compiled = _compile(FieldEquals(field="deleted", value=False))

        assert str(compiled).startswith("users.deleted =")

    def test_text_match_is_case_insensitive_or(self):
        compiled = _compile(TextMatch(fields=("first_name", "last_name"), text="smi"))
        sql = str(compiled)

        assert "users.first_name ILIKE" in sql
        assert "users.last_name ILIKE" in sql
        assert " OR " in sql
        assert set(compiled.params.values()) == {"%smi%"}

    def test_contains_all_uses_containment(self):
        compiled = _compile(ContainsAll(field="roles", values=("researcher", "developer")))

        assert "users.roles @> " in str(compiled)
        assert list(compiled.params.values()) == [["researcher", "developer"]]

    def test_not_contained_in_negates_contained_by(self):
        compiled = _compile(NotContainedIn(field="portal_usages", universe=("a", "b")))
        sql = str(compiled)

        assert "NOT" in sql
        assert "users.portal_usages <@ " in sql
        assert list(compiled.params.values()) == [["a", "b"]]

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            to_condition(FieldEquals(field="password", value="x"))


class TestLikePattern:
    def test_wraps_text(self):
        assert _like_pattern("ada") == "%ada%"

    def test_escapes_wildcards(self):
        assert _like_pattern("50%_off\\") == "%50\\%\\_off\\\\%"
