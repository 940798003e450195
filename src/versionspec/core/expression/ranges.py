"""Range-expansion helpers.

Turns the shorthand forms of the constraint grammar into plain ``Range`` and
``RelationalExpression`` nodes:

- ``closed_range`` -- ``1.0.0 - 2.0.0``, both endpoints inclusive.
- ``x_range`` -- ``1.2.x`` / ``1.x``, every version sharing the given prefix.
- ``tilde_range`` -- ``~1.2.3``, patch-level increases only.
- ``relational_over_range`` -- a relational operator applied to an X-range.

Expanded endpoints are zero-filled floor versions, so ``1.2.x`` becomes
``>=1.2.0 <1.3.0`` where both bounds sit below every pre-release of their
numbers: ``1.2.0-alpha`` is inside the range and ``1.3.0-alpha`` is not.
"""

from __future__ import annotations

from versionspec.core.expression.model import (
    Range,
    RelationalExpression,
    RelationalOp,
    Semver,
    Version,
)


def closed_range(lower: Version, upper: Version) -> Range:
    """Build the inclusive range ``lower - upper``.

    Raises:
        InvalidRange: If *lower* orders above *upper*.
    """
    return Range(lower, upper, lower_inclusive=True, upper_inclusive=True)


def _next_major(version: Version) -> Version:
    return Version(version.major + 1, 0, 0, floor=True)


def _next_minor(version: Version) -> Version:
    return Version(version.major, (version.minor or 0) + 1, 0, floor=True)


def x_range(version: Version) -> Range:
    """Expand a wildcard version into the range of versions it stands for.

    The first unset component marks the wildcard position: an unset minor
    spans the whole major line, an unset incremental spans the minor line.

    Args:
        version: The version as parsed, with wildcard components unset and
            ``raw_text`` holding the original spelling (e.g. ``"1.2.x"``).

    Returns:
        A range inclusive at the floor of the prefix and exclusive at the
        floor of the next prefix.
    """
    if version.minor is None:
        lower = Version(version.major, 0, 0, floor=True)
        upper = _next_major(version)
    else:
        lower = Version(version.major, version.minor, 0, floor=True)
        upper = _next_minor(version)
    return Range(
        lower,
        upper,
        lower_inclusive=True,
        upper_inclusive=False,
        raw_text=version.text(),
    )


def tilde_range(version: Version) -> Range:
    """Expand ``~version``: the given version up to the next minor, exclusive.

    ``~1.2.3`` accepts ``1.2.3 <= v < 1.3.0``. Without a minor component
    (``~1``) the upper bound is the next major instead.
    """
    upper = _next_major(version) if version.minor is None else _next_minor(version)
    return Range(
        version,
        upper,
        lower_inclusive=True,
        upper_inclusive=False,
        raw_text=f"~{version.text()}",
    )


def relational_over_range(op: RelationalOp, span: Range) -> Semver:
    """Apply a relational operator to an X-range.

    ``>1.2.x`` means above every 1.2 version and ``<=1.2.x`` means up to and
    including every 1.2 version, so the bound is taken from whichever
    endpoint of *span* the operator faces. ``=1.2.x`` is the range itself.
    The result keeps the operator and the range spelling as its text.
    """
    if op is RelationalOp.EQ:
        return span
    raw_text = f"{op.value}{span.raw_text}" if span.raw_text else ""
    if op is RelationalOp.GT:
        return RelationalExpression(RelationalOp.GTE, span.upper, raw_text)
    if op is RelationalOp.GTE:
        return RelationalExpression(RelationalOp.GTE, span.lower, raw_text)
    if op is RelationalOp.LT:
        return RelationalExpression(RelationalOp.LT, span.lower, raw_text)
    return RelationalExpression(RelationalOp.LT, span.upper, raw_text)
