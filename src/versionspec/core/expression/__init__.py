"""Version-constraint expressions: the expression tree and its parser.

All public names are re-exported here, so callers can write
``from versionspec.core.expression import parse, Version``.

Example
-------
>>> expr = parse("1.0.0 - 2.0.0 || 3.x")
>>> expr.matches(parse_version("3.4.1"))
True
"""

from versionspec.core.expression.model import (
    ANY,
    LATEST,
    AndExpression,
    AnyExpression,
    LatestExpression,
    OrExpression,
    Range,
    RelationalExpression,
    RelationalOp,
    Semver,
    UrlExpression,
    Version,
)
from versionspec.core.expression.parser import (
    ExpressionParser,
    parse,
    parse_version,
)
from versionspec.core.expression.ranges import (
    closed_range,
    relational_over_range,
    tilde_range,
    x_range,
)

__all__ = [
    "ANY",
    "LATEST",
    "AndExpression",
    "AnyExpression",
    "LatestExpression",
    "OrExpression",
    "Range",
    "RelationalExpression",
    "RelationalOp",
    "Semver",
    "UrlExpression",
    "Version",
    "ExpressionParser",
    "parse",
    "parse_version",
    "closed_range",
    "relational_over_range",
    "tilde_range",
    "x_range",
]
