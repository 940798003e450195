"""Expression tree for version constraints.

A parsed constraint is an immutable tree of ``Semver`` nodes. Every node
answers two questions:

- ``matches(candidate)`` -- does a concrete candidate satisfy the constraint?
- ``text()`` -- a canonical string that parses back to an equivalent tree.

Only concrete ``Version`` nodes are ordered. The total order compares
``major``, ``minor``, ``incremental`` and ``build`` numerically (an unset
component orders as ``0``), then breaks ties on the tag: an untagged version
sorts after any tagged version with the same numbers, and tags compare
lexicographically. A floor version (``floor=True``) sorts below every
tagged version with its numbers; expanded ranges use floors as bounds so
that ``1.2.x`` and ``~1.2.3`` never admit ``1.3.0-alpha``.

Node kinds:

- ``AnyExpression`` (``*`` or the empty string): matches every version.
- ``LatestExpression`` (``latest``): matches nothing by itself; resolvers
  interpret it as "the highest known version".
- ``Version``: a concrete, possibly partial, version.
- ``Range``: an interval with per-endpoint inclusivity.
- ``RelationalExpression``: a single-sided bound such as ``>=1.2.0``.
- ``AndExpression`` / ``OrExpression``: conjunction and disjunction.
- ``UrlExpression``: a VCS/HTTP locator matched by exact text.
"""

from __future__ import annotations

import re
import string
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlsplit

from versionspec.exceptions import InvalidRange, InvalidUri, UnsupportedComparison


# ---------------------------------------------------------------------------
# Semver: common interface of every tree node
# ---------------------------------------------------------------------------


class Semver(ABC):
    """Base class of every node in a parsed constraint tree."""

    @abstractmethod
    def matches(self, candidate: Semver) -> bool:
        """Return True if *candidate* satisfies this expression."""

    @abstractmethod
    def text(self) -> str:
        """Return the canonical textual form of this expression."""

    @abstractmethod
    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable description of this expression."""

    def compare_to(self, other: Semver) -> int:
        """Order this expression against *other*.

        Raises:
            UnsupportedComparison: Always, unless overridden by a node kind
                that has a position in the version order.
        """
        raise UnsupportedComparison(f"Cannot order {self.text()!r}")

    def __str__(self) -> str:
        return self.text()


# ---------------------------------------------------------------------------
# Sentinels
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnyExpression(Semver):
    """Matches every candidate."""

    def matches(self, candidate: Semver) -> bool:
        return True

    def text(self) -> str:
        return "*"

    def to_dict(self) -> dict[str, object]:
        return {"kind": "any", "text": self.text()}


@dataclass(frozen=True)
class LatestExpression(Semver):
    """The ``latest`` keyword. Resolved externally to the highest version."""

    def matches(self, candidate: Semver) -> bool:
        return False

    def text(self) -> str:
        return "latest"

    def to_dict(self) -> dict[str, object]:
        return {"kind": "latest", "text": self.text()}


ANY = AnyExpression()
LATEST = LatestExpression()


# ---------------------------------------------------------------------------
# Version: a concrete (possibly partial) version
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class Version(Semver):
    """A concrete version such as ``1.2.3``, ``1.2.3-4`` or ``1.2.3-beta``.

    ``minor``, ``incremental`` and ``build`` are None when the input did not
    specify them. ``tag`` holds the qualifier exactly as written (including
    a leading ``-`` or ``.`` separator). ``raw_text`` is the input span the
    version was parsed from and takes precedence in ``text()``.

    Equality, hashing and ordering all use the normalized sort key, so
    ``Version(1, 2)`` equals ``Version(1, 2, 0)``.

    Attributes:
        major: Major component, always set.
        minor: Minor component or None.
        incremental: Incremental (patch) component or None.
        build: Numeric build qualifier or None.
        tag: Free-form tag qualifier or None.
        raw_text: Input span this version was parsed from.
        floor: Marks the lowest possible version with these numbers, below
            all of its tagged pre-releases. Only range expansion sets it.
    """

    major: int
    minor: int | None = None
    incremental: int | None = None
    build: int | None = None
    tag: str | None = None
    raw_text: str = ""
    floor: bool = False

    @property
    def sort_key(self) -> tuple[int, int, int, int, int, str]:
        """Key implementing the total order over versions."""
        if self.floor:
            rank = 0
        elif self.tag is not None:
            rank = 1
        else:
            rank = 2
        return (
            self.major,
            self.minor or 0,
            self.incremental or 0,
            self.build or 0,
            rank,
            self.tag or "",
        )

    def compare_to(self, other: Semver) -> int:
        """Return -1, 0 or 1 as this version sorts before, with or after *other*.

        Raises:
            UnsupportedComparison: If *other* is not a ``Version``.
        """
        if not isinstance(other, Version):
            raise UnsupportedComparison(
                f"Cannot order {self.text()!r} against {other.text()!r}"
            )
        mine, theirs = self.sort_key, other.sort_key
        return (mine > theirs) - (mine < theirs)

    def matches(self, candidate: Semver) -> bool:
        """Component-wise match on the components this version specifies.

        An unset minor or incremental matches any value in that position.
        Once the incremental is set, build and tag must match as well.
        """
        if not isinstance(candidate, Version):
            return False
        if candidate.major != self.major:
            return False
        if self.minor is None:
            return True
        if (candidate.minor or 0) != self.minor:
            return False
        if self.incremental is None:
            return True
        return candidate.sort_key[2:] == self.sort_key[2:]

    def canonical_text(self) -> str:
        """Render the version from its components, ignoring ``raw_text``."""
        parts = [str(self.major)]
        if self.minor is not None:
            parts.append(f".{self.minor}")
            if self.incremental is not None:
                parts.append(f".{self.incremental}")
        if self.build is not None:
            parts.append(f"-{self.build}")
        if self.tag:
            parts.append(self.tag)
        return "".join(parts)

    def text(self) -> str:
        return self.raw_text or self.canonical_text()

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": "version",
            "text": self.text(),
            "major": self.major,
            "minor": self.minor,
            "incremental": self.incremental,
            "build": self.build,
            "tag": self.tag,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.sort_key == other.sort_key

    def __hash__(self) -> int:
        return hash(self.sort_key)

    def __lt__(self, other: Semver) -> bool:
        return self.compare_to(other) < 0

    def __le__(self, other: Semver) -> bool:
        return self.compare_to(other) <= 0

    def __gt__(self, other: Semver) -> bool:
        return self.compare_to(other) > 0

    def __ge__(self, other: Semver) -> bool:
        return self.compare_to(other) >= 0


# ---------------------------------------------------------------------------
# Range: an interval of versions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Range(Semver):
    """An interval of acceptable versions.

    Attributes:
        lower: Lower endpoint.
        upper: Upper endpoint, never ordered below ``lower``.
        lower_inclusive: Whether ``lower`` itself is accepted.
        upper_inclusive: Whether ``upper`` itself is accepted.
        raw_text: Input span this range was expanded from (``1.2.x``,
            ``~1.2.3``), empty for ranges built from two endpoints.

    Raises:
        InvalidRange: If ``lower`` orders above ``upper``.
    """

    lower: Version
    upper: Version
    lower_inclusive: bool = True
    upper_inclusive: bool = True
    raw_text: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if self.lower > self.upper:
            raise InvalidRange(
                f"Range lower bound {self.lower.text()!r} is above "
                f"upper bound {self.upper.text()!r}"
            )

    def matches(self, candidate: Semver) -> bool:
        if not isinstance(candidate, Version):
            return False
        low = candidate.compare_to(self.lower)
        if low < 0 or (low == 0 and not self.lower_inclusive):
            return False
        high = candidate.compare_to(self.upper)
        return high < 0 or (high == 0 and self.upper_inclusive)

    def text(self) -> str:
        if self.raw_text:
            return self.raw_text
        if self.lower_inclusive and self.upper_inclusive:
            return f"{self.lower.text()} - {self.upper.text()}"
        low_op = ">=" if self.lower_inclusive else ">"
        high_op = "<=" if self.upper_inclusive else "<"
        return f"{low_op}{self.lower.text()} {high_op}{self.upper.text()}"

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": "range",
            "text": self.text(),
            "lower": self.lower.to_dict(),
            "upper": self.upper.to_dict(),
            "lower_inclusive": self.lower_inclusive,
            "upper_inclusive": self.upper_inclusive,
        }


# ---------------------------------------------------------------------------
# RelationalExpression: a single-sided bound
# ---------------------------------------------------------------------------


class RelationalOp(Enum):
    """Relational prefix operators. The value is the operator's symbol.

    ``EQ`` matches the way a bare version does: ``=1.2`` accepts ``1.2.5``
    just like ``1.2``. The ordering operators compare with unset components
    read as ``0``, so ``<1.2`` is ``<1.2.0``.
    """

    EQ = "="
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="

    def accepts(self, sign: int) -> bool:
        """Check the sign of ``compare(candidate, bound)`` against this operator."""
        if self is RelationalOp.EQ:
            return sign == 0
        if self is RelationalOp.GT:
            return sign > 0
        if self is RelationalOp.GTE:
            return sign >= 0
        if self is RelationalOp.LT:
            return sign < 0
        return sign <= 0


@dataclass(frozen=True)
class RelationalExpression(Semver):
    """A bound such as ``>=1.2.0`` or ``<2.0.0``.

    ``raw_text`` keeps the spelling of a bound derived from an X-range
    (``>1.2.x``) and does not take part in equality.
    """

    op: RelationalOp
    version: Version
    raw_text: str = field(default="", compare=False)

    def matches(self, candidate: Semver) -> bool:
        if not isinstance(candidate, Version):
            return False
        if self.op is RelationalOp.EQ:
            return self.version.matches(candidate)
        return self.op.accepts(candidate.compare_to(self.version))

    def text(self) -> str:
        return self.raw_text or f"{self.op.value}{self.version.text()}"

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": "relational",
            "text": self.text(),
            "op": self.op.value,
            "version": self.version.to_dict(),
        }


# ---------------------------------------------------------------------------
# Boolean combinators
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AndExpression(Semver):
    """Both sides must match."""

    left: Semver
    right: Semver

    def matches(self, candidate: Semver) -> bool:
        return self.left.matches(candidate) and self.right.matches(candidate)

    def text(self) -> str:
        return f"{self.left.text()} {self.right.text()}"

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": "and",
            "text": self.text(),
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
        }


@dataclass(frozen=True)
class OrExpression(Semver):
    """Either side must match."""

    left: Semver
    right: Semver

    def matches(self, candidate: Semver) -> bool:
        return self.left.matches(candidate) or self.right.matches(candidate)

    def text(self) -> str:
        return f"{self.left.text()} || {self.right.text()}"

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": "or",
            "text": self.text(),
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
        }


# ---------------------------------------------------------------------------
# UrlExpression: a VCS/HTTP dependency locator
# ---------------------------------------------------------------------------

_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")

# RFC 3986: unreserved, reserved and the escape character.
_URI_CHARS: frozenset[str] = frozenset(
    string.ascii_letters + string.digits + "-._~" + ":/?#[]@" + "!$&'()*+,;=" + "%"
)


def _check_uri(uri: str) -> None:
    """Syntactic URI validation.

    Raises:
        InvalidUri: With ``position`` pointing into *uri* where possible.
    """
    scheme, sep, rest = uri.partition("://")
    if not scheme or not sep or not rest:
        raise InvalidUri(f"Invalid URI {uri!r}: missing scheme or authority")
    for index, char in enumerate(uri):
        if char not in _URI_CHARS:
            raise InvalidUri(
                f"Invalid URI {uri!r}: illegal character {char!r}",
                expression=uri,
                position=index,
            )
    try:
        parts = urlsplit(uri)
    except ValueError as exc:
        raise InvalidUri(f"Invalid URI {uri!r}: {exc}", expression=uri) from exc
    if not parts.netloc:
        raise InvalidUri(
            f"Invalid URI {uri!r}: empty authority",
            expression=uri,
            position=len(scheme) + len(sep),
        )
    bad = _BAD_ESCAPE_RE.search(uri)
    if bad:
        raise InvalidUri(
            f"Invalid URI {uri!r}: malformed escape",
            expression=uri,
            position=bad.start(),
        )
    fragment_at = uri.find("#")
    if fragment_at != -1 and "#" in uri[fragment_at + 1:]:
        raise InvalidUri(
            f"Invalid URI {uri!r}: more than one fragment",
            expression=uri,
            position=uri.index("#", fragment_at + 1),
        )


@dataclass(frozen=True)
class UrlExpression(Semver):
    """A locator-based dependency (``git+https://...``).

    Matches only a candidate whose text is the same URI. URL expressions
    have no place in the version order.

    Raises:
        InvalidUri: If ``uri`` is not a well-formed URI.
    """

    uri: str

    def __post_init__(self) -> None:
        _check_uri(self.uri)

    def matches(self, candidate: Semver) -> bool:
        return candidate.text() == self.uri

    def text(self) -> str:
        return self.uri

    def to_dict(self) -> dict[str, object]:
        return {"kind": "url", "text": self.uri}
