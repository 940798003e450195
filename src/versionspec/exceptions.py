"""versionspec exception hierarchy.

All public exceptions inherit from VersionSpecError, giving callers a single
base class to catch when they want to handle any versionspec-specific failure
without swallowing unrelated errors.
"""

from __future__ import annotations

from collections.abc import Iterable


class VersionSpecError(Exception):
    """Base exception for all versionspec errors."""


class MalformedExpression(VersionSpecError, ValueError):
    """Raised when a constraint expression cannot be parsed.

    Attributes:
        expression: The full input that failed to parse.
        position: 0-based index of the first failure point, or None when the
            failure is not tied to a location (e.g. a value built directly).
        expected: Labels of the tokens that would have let parsing continue.
    """

    def __init__(
        self,
        message: str,
        *,
        expression: str = "",
        position: int | None = None,
        expected: Iterable[str] = (),
    ) -> None:
        self.reason = message
        self.expression = expression
        self.position = position
        self.expected = tuple(expected)
        super().__init__(self._render())

    def _render(self) -> str:
        if self.position is None:
            return self.reason
        return (
            f"{self.reason} (pos {self.position + 1}):\n"
            f"{self.expression}\n"
            f"{' ' * self.position}^"
        )


class InvalidMajorWildcard(MalformedExpression):
    """Raised when the major component of a version is a wildcard.

    The major component decides compatibility and cannot be elided, so
    ``x.2.3`` is rejected even though ``1.x`` is accepted.
    """


class InvalidUri(MalformedExpression):
    """Raised when a captured URI span is not a well-formed URI."""


class InvalidRange(MalformedExpression):
    """Raised when an explicit range has its lower endpoint above its upper."""


class UnsupportedComparison(VersionSpecError, TypeError):
    """Raised when ordering is requested for an unorderable expression.

    Only concrete versions are ordered. URL locators and compound
    expressions have no position in the version order.
    """


class ResolutionError(VersionSpecError):
    """Raised when a requested constraint cannot be resolved to a version."""


class PackageNotFoundError(ResolutionError):
    """Raised when no available version of a package satisfies a constraint.

    Attributes:
        package: The requested package identifier.
        constraint: The constraint string as requested.
        available: Candidate versions that were considered.
    """

    def __init__(
        self,
        package: str,
        constraint: str = "",
        available: Iterable[str] = (),
    ) -> None:
        self.package = package
        self.constraint = constraint
        self.available = tuple(available)
        if not self.available:
            message = f"Package {package!r} is not available"
        else:
            message = (
                f"No version of {package!r} satisfies constraint "
                f"{constraint!r} (available: {', '.join(self.available)})"
            )
        super().__init__(message)
