"""Recursive-descent parser for version-constraint expressions.

Grammar, from loosest to tightest binding::

    expression := factor (WS '||' WS factor)* WS EOI
    factor     := range | term
    range      := term WS '-'? WS term
    term       := version | uri | '*'
    version    := operator? WS 'v'? major ('.' minor ('.' incremental tail?)?)?
    tail       := '-' digits tag? | tag
    uri        := protocol '://' uripart+

Alternatives are tried in order and the first one that matches wins, with
the input position restored after a failed alternative. A ``range`` whose
two terms are both plain versions becomes an inclusive ``Range``; any other
pair of terms (``>=1.0.0 <2.0.0``) becomes an ``AndExpression``.

Wildcards (``x``/``X``) are accepted for minor and incremental and expand
the version into an X-range. A wildcard major is rejected.

Failures are reported once, at the furthest position the parser reached,
together with the set of tokens that would have let it continue.

Usage::

    expr = parse(">=1.2.x <2.0.0 || ~1.0")
    expr.matches(parse_version("1.0.7"))   # True
"""

from __future__ import annotations

import dataclasses
import logging
import string
from dataclasses import dataclass

from versionspec.core.expression.model import (
    ANY,
    LATEST,
    AndExpression,
    OrExpression,
    RelationalExpression,
    RelationalOp,
    Semver,
    UrlExpression,
    Version,
)
from versionspec.core.expression.ranges import (
    closed_range,
    relational_over_range,
    tilde_range,
    x_range,
)
from versionspec.exceptions import (
    InvalidMajorWildcard,
    InvalidRange,
    InvalidUri,
    MalformedExpression,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Lexical constants
# ---------------------------------------------------------------------------

WHITESPACE: frozenset[str] = frozenset(" \t")

WILDCARD_TOKENS: frozenset[str] = frozenset("xX")

# Longest alternative first: "git+https" must be tried before "git".
URI_PROTOCOLS: tuple[str, ...] = (
    "git+https",
    "git+http",
    "git+ssh",
    "https",
    "http",
    "git",
)

URI_PART_CHARS: frozenset[str] = frozenset(
    string.ascii_letters + string.digits + "-+&@/%#?=~_|!:,.;"
)

TAG_CHARS: frozenset[str] = frozenset(string.ascii_letters + string.digits + ".-")

_PREFIX_OPERATORS: tuple[str, ...] = (">=", "<=", ">", "<", "=", "~")

_TILDE = "~"

_DIGITS: frozenset[str] = frozenset(string.digits)


# ---------------------------------------------------------------------------
# Version builder
# ---------------------------------------------------------------------------


@dataclass
class _VersionBuilder:
    """Components collected while the ``version`` production runs."""

    major: int = 0
    minor: int | None = None
    incremental: int | None = None
    build: int | None = None
    tag: str | None = None
    wildcard: bool = False

    def component(self, token: str) -> int | None:
        """Convert a numeric token, flagging the builder on a wildcard."""
        if token in WILDCARD_TOKENS:
            self.wildcard = True
            return None
        return int(token)

    def to_version(self, raw_text: str) -> Version:
        return Version(
            major=self.major,
            minor=self.minor,
            incremental=self.incremental,
            build=self.build,
            tag=self.tag,
            raw_text=raw_text,
        )


# ---------------------------------------------------------------------------
# ExpressionParser
# ---------------------------------------------------------------------------


class ExpressionParser:
    """Single-use parser over one constraint string.

    Args:
        text: The constraint expression to parse.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self._fail_pos = 0
        self._expected: set[str] = set()

    def parse(self) -> Semver:
        """Parse the whole input.

        Raises:
            MalformedExpression: If the input is not a valid expression.
            InvalidMajorWildcard: If a version has a wildcard major.
            InvalidUri: If a URI term is not a well-formed URI.
            InvalidRange: If an explicit range has inverted endpoints.
        """
        self._skip_ws()
        expr = self._factor()
        if expr is None:
            raise self._error()
        while True:
            mark = self._pos
            self._skip_ws()
            if not self._literal("||"):
                self._pos = mark
                break
            self._skip_ws()
            right = self._factor()
            if right is None:
                self._pos = mark
                break
            expr = OrExpression(expr, right)
        self._skip_ws()
        if self._pos < len(self._text):
            self._fail("'||'")
            self._fail("end of input")
            raise self._error()
        return expr

    # -- error reporting ----------------------------------------------------

    def _fail(self, label: str) -> None:
        if self._pos > self._fail_pos:
            self._fail_pos = self._pos
            self._expected = {label}
        elif self._pos == self._fail_pos:
            self._expected.add(label)

    def _error(self) -> MalformedExpression:
        pos = self._fail_pos
        expected = sorted(self._expected)
        if pos < len(self._text):
            problem = f"Invalid input {self._text[pos]!r}"
        else:
            problem = "Unexpected end of input"
        return MalformedExpression(
            f"{problem}, expected {', '.join(expected)}",
            expression=self._text,
            position=pos,
            expected=expected,
        )

    # -- primitives ---------------------------------------------------------

    def _literal(self, token: str) -> bool:
        if self._text.startswith(token, self._pos):
            self._pos += len(token)
            return True
        self._fail(repr(token))
        return False

    def _skip_ws(self) -> None:
        while self._pos < len(self._text) and self._text[self._pos] in WHITESPACE:
            self._pos += 1

    def _span(self, allowed: frozenset[str]) -> str:
        start = self._pos
        while self._pos < len(self._text) and self._text[self._pos] in allowed:
            self._pos += 1
        return self._text[start:self._pos]

    def _digits(self) -> str | None:
        digits = self._span(_DIGITS)
        if not digits:
            self._fail("digit")
            return None
        return digits

    def _number(self) -> str | None:
        """Match a digit run or a single wildcard token."""
        if self._pos < len(self._text) and self._text[self._pos] in WILDCARD_TOKENS:
            self._pos += 1
            return self._text[self._pos - 1]
        return self._digits()

    # -- productions --------------------------------------------------------

    def _factor(self) -> Semver | None:
        start = self._pos
        expr = self._range()
        if expr is not None:
            return expr
        self._pos = start
        return self._term()

    def _range(self) -> Semver | None:
        start = self._pos
        left = self._term()
        if left is None:
            return None
        self._skip_ws()
        self._literal("-")
        self._skip_ws()
        right = self._term()
        if right is None:
            self._pos = start
            return None
        if isinstance(left, Version) and isinstance(right, Version):
            if left > right:
                raise InvalidRange(
                    f"Range lower bound {left.text()!r} is above "
                    f"upper bound {right.text()!r}",
                    expression=self._text,
                    position=start,
                )
            return closed_range(left, right)
        logger.debug(
            "Range %r %r has a compound side; using conjunction",
            left.text(),
            right.text(),
        )
        return AndExpression(left, right)

    def _term(self) -> Semver | None:
        start = self._pos
        for production in (self._version, self._uri, self._any):
            expr = production()
            if expr is not None:
                return expr
            self._pos = start
        return None

    def _any(self) -> Semver | None:
        return ANY if self._literal("*") else None

    def _operator(self) -> str | None:
        for symbol in _PREFIX_OPERATORS:
            if self._text.startswith(symbol, self._pos):
                self._pos += len(symbol)
                return symbol
        self._fail("operator")
        return None

    def _version(self) -> Semver | None:
        operator = self._operator()
        self._skip_ws()
        raw_start = self._pos
        self._literal("v")
        builder = _VersionBuilder()

        major_at = self._pos
        major = self._number()
        if major is None:
            return None
        if major in WILDCARD_TOKENS:
            raise InvalidMajorWildcard(
                f"[{major}] is not allowed for major",
                expression=self._text,
                position=major_at,
            )
        builder.major = int(major)
        self._minor(builder)

        raw_text = self._text[raw_start:self._pos]
        version = builder.to_version(raw_text)
        expr: Semver = x_range(version) if builder.wildcard else version
        if operator is None:
            return expr
        if operator == _TILDE:
            if isinstance(expr, Version):
                return tilde_range(expr)
            return dataclasses.replace(expr, raw_text=f"{_TILDE}{raw_text}")
        op = RelationalOp(operator)
        if isinstance(expr, Version):
            return RelationalExpression(op, expr)
        return relational_over_range(op, expr)

    def _minor(self, builder: _VersionBuilder) -> None:
        mark = self._pos
        if not self._literal("."):
            return
        token = self._number()
        if token is None:
            self._pos = mark
            return
        builder.minor = builder.component(token)
        self._incremental(builder)

    def _incremental(self, builder: _VersionBuilder) -> None:
        mark = self._pos
        if not self._literal("."):
            return
        token = self._number()
        if token is None:
            self._pos = mark
            return
        builder.incremental = builder.component(token)
        if not self._build(builder):
            self._tag(builder)

    def _build(self, builder: _VersionBuilder) -> bool:
        mark = self._pos
        if not self._literal("-"):
            return False
        digits = self._digits()
        if digits is None:
            self._pos = mark
            return False
        builder.build = int(digits)
        self._tag(builder)
        return True

    def _tag(self, builder: _VersionBuilder) -> bool:
        tag = self._span(TAG_CHARS)
        if not tag:
            self._fail("tag")
            return False
        builder.tag = tag
        return True

    def _uri(self) -> Semver | None:
        start = self._pos
        for protocol in URI_PROTOCOLS:
            if self._text.startswith(protocol, self._pos):
                self._pos += len(protocol)
                break
        else:
            self._fail("protocol")
            return None
        if not self._literal("://"):
            return None
        if not self._span(URI_PART_CHARS):
            self._fail("URI character")
            return None
        uri = self._text[start:self._pos]
        try:
            return UrlExpression(uri)
        except InvalidUri as exc:
            raise InvalidUri(
                exc.reason,
                expression=self._text,
                position=start + (exc.position or 0),
                expected=exc.expected,
            ) from exc


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def parse(text: str) -> Semver:
    """Parse a version-constraint expression into an expression tree.

    The empty string parses to ``ANY`` and the literal ``latest`` to
    ``LATEST`` without running the grammar.

    Args:
        text: A constraint such as ``">=1.2.x <2.0.0 || ~1.0"``.

    Returns:
        The root ``Semver`` node of the parsed tree.

    Raises:
        MalformedExpression: If *text* is not a valid expression (including
            the ``InvalidMajorWildcard``, ``InvalidUri`` and ``InvalidRange``
            subclasses).
    """
    if text == "":
        logger.debug("Empty expression parsed as %r", ANY.text())
        return ANY
    if text == LATEST.text():
        return LATEST
    return ExpressionParser(text).parse()


def parse_version(text: str) -> Version:
    """Parse a single concrete version such as ``1.2.3`` or ``v2.0.0-beta``.

    Raises:
        MalformedExpression: If *text* is anything other than a plain version
            (an operator, wildcard, range, URI or combination).
    """
    expr = parse(text)
    if not isinstance(expr, Version):
        raise MalformedExpression(
            f"{text!r} is not a concrete version",
            expression=text,
            position=0,
            expected=("version",),
        )
    return expr
