"""Tests for the expression model: ordering, matching, text and serialization."""

from __future__ import annotations

import pytest

from versionspec.core.expression import (
    ANY,
    LATEST,
    AndExpression,
    OrExpression,
    Range,
    RelationalExpression,
    RelationalOp,
    UrlExpression,
    Version,
    parse,
)
from versionspec.exceptions import InvalidRange, UnsupportedComparison

URL = "git+https://example.com/repo.git"


class TestVersionOrdering:
    """Total order over concrete versions."""

    def test_numeric_components_in_order(self) -> None:
        ordered = [
            Version(0, 9, 9),
            Version(1, 0, 0),
            Version(1, 0, 1),
            Version(1, 2, 0),
            Version(2, 0, 0),
            Version(10, 0, 0),
        ]
        assert sorted(reversed(ordered)) == ordered

    def test_unset_components_order_as_zero(self) -> None:
        assert Version(1).compare_to(Version(1, 0, 0)) == 0
        assert Version(1, 2) == Version(1, 2, 0)
        assert hash(Version(1, 2)) == hash(Version(1, 2, 0))

    def test_build_orders_numerically(self) -> None:
        assert Version(1, 0, 0, build=2) < Version(1, 0, 0, build=10)
        assert Version(1, 0, 0) < Version(1, 0, 0, build=1)

    def test_tagged_sorts_before_untagged(self) -> None:
        assert Version(1, 0, 0, tag="-beta") < Version(1, 0, 0)
        assert Version(1, 0, 0, tag="-rc.1") < Version(1, 0, 0)

    def test_tags_compare_lexicographically(self) -> None:
        assert Version(1, 0, 0, tag="-alpha") < Version(1, 0, 0, tag="-beta")

    def test_tag_is_only_a_tie_break(self) -> None:
        assert Version(1, 0, 0) < Version(1, 0, 1, tag="-alpha")

    def test_sorting_release_line(self, release_line: list[Version]) -> None:
        assert [v.text() for v in sorted(release_line)] == [
            "1.0.0",
            "1.2.0",
            "1.2.3",
            "1.10.0",
            "2.0.0-beta",
            "2.0.0",
        ]

    def test_floor_sorts_below_prereleases(self) -> None:
        floor = Version(1, 3, 0, floor=True)
        assert floor < Version(1, 3, 0, tag="-alpha")
        assert floor < Version(1, 3, 0)
        assert floor > Version(1, 2, 99)
        assert floor != Version(1, 3, 0)

    def test_compare_to_signs(self) -> None:
        assert Version(1, 0, 0).compare_to(Version(2, 0, 0)) == -1
        assert Version(2, 0, 0).compare_to(Version(1, 0, 0)) == 1
        assert Version(2, 0, 0).compare_to(Version(2, 0, 0)) == 0


class TestUnsupportedComparison:
    """Only versions are orderable."""

    def test_url_compare_to_raises(self) -> None:
        with pytest.raises(UnsupportedComparison):
            UrlExpression(URL).compare_to(Version(1, 0, 0))

    def test_version_against_url_raises(self) -> None:
        with pytest.raises(UnsupportedComparison):
            Version(1, 0, 0).compare_to(UrlExpression(URL))

    def test_rich_comparison_raises_type_error(self) -> None:
        with pytest.raises(TypeError):
            _ = Version(1, 0, 0) < UrlExpression(URL)

    def test_compound_expressions_are_not_orderable(self) -> None:
        with pytest.raises(UnsupportedComparison):
            parse(">=1.0.0 <2.0.0").compare_to(Version(1, 0, 0))
        with pytest.raises(UnsupportedComparison):
            ANY.compare_to(Version(1, 0, 0))


class TestVersionMatches:
    """Component-wise matching on specified components."""

    def test_exact_version(self) -> None:
        assert Version(1, 2, 3).matches(Version(1, 2, 3)) is True
        assert Version(1, 2, 3).matches(Version(1, 2, 4)) is False

    def test_partial_major(self) -> None:
        assert Version(1).matches(Version(1, 7, 3)) is True
        assert Version(1).matches(Version(2, 0, 0)) is False

    def test_partial_minor(self) -> None:
        assert Version(1, 2).matches(Version(1, 2, 9)) is True
        assert Version(1, 2).matches(Version(1, 3, 0)) is False

    def test_full_version_requires_same_qualifiers(self) -> None:
        assert Version(1, 2, 3).matches(Version(1, 2, 3, tag="-beta")) is False
        assert Version(1, 2, 3).matches(Version(1, 2, 3, build=1)) is False
        assert Version(1, 2, 3, build=0).matches(Version(1, 2, 3)) is True

    def test_non_version_candidate(self) -> None:
        assert Version(1, 0, 0).matches(UrlExpression(URL)) is False

    def test_eq_relational_agrees_with_bare_version(self) -> None:
        bound = RelationalExpression(RelationalOp.EQ, Version(1, 2))
        assert bound.matches(Version(1, 2, 5)) is True
        assert bound.matches(Version(1, 3, 0)) is False


class TestOtherMatches:
    """Matching on the remaining node kinds."""

    def test_range_respects_inclusivity(self) -> None:
        half_open = Range(Version(1, 0, 0), Version(2, 0, 0), False, False)
        assert half_open.matches(Version(1, 0, 0)) is False
        assert half_open.matches(Version(1, 0, 1)) is True
        assert half_open.matches(Version(2, 0, 0)) is False

    def test_range_with_url_candidate(self) -> None:
        span = Range(Version(1, 0, 0), Version(2, 0, 0))
        assert span.matches(UrlExpression(URL)) is False

    def test_relational_with_url_candidate(self) -> None:
        bound = RelationalExpression(RelationalOp.GTE, Version(1, 0, 0))
        assert bound.matches(UrlExpression(URL)) is False

    def test_any_matches_url_candidate(self) -> None:
        assert ANY.matches(UrlExpression(URL)) is True

    def test_latest_matches_nothing(self) -> None:
        assert LATEST.matches(Version(1, 0, 0)) is False
        assert LATEST.matches(UrlExpression(URL)) is False

    def test_and_or(self) -> None:
        low = RelationalExpression(RelationalOp.GTE, Version(1, 0, 0))
        high = RelationalExpression(RelationalOp.LT, Version(2, 0, 0))
        assert AndExpression(low, high).matches(Version(1, 5, 0)) is True
        assert AndExpression(low, high).matches(Version(2, 5, 0)) is False
        assert OrExpression(high, Version(3, 0, 0)).matches(Version(3, 0, 0)) is True
        assert OrExpression(high, Version(3, 0, 0)).matches(Version(2, 5, 0)) is False


class TestRangeConstruction:
    """Range invariants."""

    def test_inverted_range_rejected(self) -> None:
        with pytest.raises(InvalidRange):
            Range(Version(2, 0, 0), Version(1, 0, 0))

    def test_degenerate_range_allowed(self) -> None:
        span = Range(Version(1, 0, 0), Version(1, 0, 0))
        assert span.matches(Version(1, 0, 0)) is True

    def test_raw_text_ignored_by_equality(self) -> None:
        a = Range(Version(1, 2, 0), Version(1, 3, 0), True, False, raw_text="1.2.x")
        b = Range(Version(1, 2, 0), Version(1, 3, 0), True, False)
        assert a == b


class TestText:
    """Canonical text of every node kind."""

    def test_sentinels(self) -> None:
        assert ANY.text() == "*"
        assert LATEST.text() == "latest"

    def test_canonical_version_text(self) -> None:
        assert Version(1, 2, 3).text() == "1.2.3"
        assert Version(1, 2).text() == "1.2"
        assert Version(1, 2, 3, build=4, tag="beta").text() == "1.2.3-4beta"
        assert Version(1, 2, 3, tag="-rc.1").text() == "1.2.3-rc.1"

    def test_raw_text_takes_precedence(self) -> None:
        version = Version(1, 2, 3, raw_text="v1.2.3")
        assert version.text() == "v1.2.3"
        assert version.canonical_text() == "1.2.3"

    def test_closed_range_text(self) -> None:
        assert Range(Version(1, 0, 0), Version(2, 0, 0)).text() == "1.0.0 - 2.0.0"

    def test_half_open_range_text(self) -> None:
        span = Range(Version(1, 0, 0), Version(2, 0, 0), True, False)
        assert span.text() == ">=1.0.0 <2.0.0"

    def test_relational_text(self) -> None:
        bound = RelationalExpression(RelationalOp.LTE, Version(1, 0, 0))
        assert bound.text() == "<=1.0.0"

    def test_compound_text(self) -> None:
        assert parse(">=1.0.0 <2.0.0").text() == ">=1.0.0 <2.0.0"
        assert parse("1.0.0||2.0.0").text() == "1.0.0 || 2.0.0"

    def test_url_text(self) -> None:
        assert UrlExpression(URL).text() == URL

    def test_str_is_text(self) -> None:
        assert str(parse("~1.2.3")) == "~1.2.3"

    @pytest.mark.parametrize(
        "text",
        [
            "1.2.3",
            "1.0.0 - 2.0.0",
            ">=1.2.x <2.0.0 || ~1.0",
            "1.2.x",
            ">1.2.x",
            "~1.2.3-beta",
            "1.0.0 || 2.0.0 || 3.0.0",
            "git+https://example.com/repo.git || *",
        ],
    )
    def test_text_round_trip(self, text: str) -> None:
        expr = parse(text)
        assert parse(expr.text()) == expr


class TestToDict:
    """JSON-safe descriptions."""

    def test_version_dict(self) -> None:
        assert Version(1, 2, 3, tag="-beta").to_dict() == {
            "kind": "version",
            "text": "1.2.3-beta",
            "major": 1,
            "minor": 2,
            "incremental": 3,
            "build": None,
            "tag": "-beta",
        }

    def test_nested_dict(self) -> None:
        data = parse(">=1.0.0 <2.0.0").to_dict()
        assert data["kind"] == "and"
        assert data["left"]["kind"] == "relational"
        assert data["left"]["op"] == ">="
        assert data["right"]["version"]["major"] == 2

    def test_range_dict(self) -> None:
        data = parse("1.2.x").to_dict()
        assert data["kind"] == "range"
        assert data["text"] == "1.2.x"
        assert data["lower_inclusive"] is True
        assert data["upper_inclusive"] is False
        assert data["upper"]["text"] == "1.3.0"
