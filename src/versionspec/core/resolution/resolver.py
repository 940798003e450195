"""Resolve requested constraints against the versions a registry offers.

Given a constraint string and the candidate versions available for a
package, the resolver parses the constraint once, tests every candidate with
``matches``, and picks the highest match. ``latest`` picks the highest
numeric candidate. URL constraints pick the candidate with the same URL.

When nothing qualifies, ``PackageNotFoundError`` is raised carrying the
requested package identifier.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from versionspec.core.expression import (
    LatestExpression,
    Semver,
    UrlExpression,
    Version,
    parse,
    parse_version,
)
from versionspec.exceptions import MalformedExpression, PackageNotFoundError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Candidate handling
# ---------------------------------------------------------------------------


def parse_candidate(text: str) -> Version | UrlExpression:
    """Parse an available artifact: a concrete version or a URL locator.

    Raises:
        MalformedExpression: If *text* is neither.
    """
    expr = parse(text)
    if isinstance(expr, UrlExpression):
        return expr
    return parse_version(text)


def _candidates(texts: Iterable[str]) -> list[tuple[str, Version | UrlExpression]]:
    """Parse candidate strings, skipping (with a warning) any that are invalid."""
    parsed: list[tuple[str, Version | UrlExpression]] = []
    for text in texts:
        try:
            parsed.append((text, parse_candidate(text)))
        except MalformedExpression as exc:
            logger.warning("Skipping candidate %r: %s", text, exc.reason)
    return parsed


def _highest_first(
    candidates: list[tuple[str, Version | UrlExpression]],
) -> list[tuple[str, Version | UrlExpression]]:
    """Order numeric candidates highest first, then URL candidates as given."""
    versions = [c for c in candidates if isinstance(c[1], Version)]
    urls = [c for c in candidates if not isinstance(c[1], Version)]
    versions.sort(key=lambda c: c[1].sort_key, reverse=True)
    return versions + urls


def matching_candidates(constraint: Semver, candidates: Iterable[str]) -> list[str]:
    """Return every candidate satisfying *constraint*, highest first.

    ``LATEST`` matches nothing by comparison; it yields the single highest
    numeric candidate instead.
    """
    ordered = _highest_first(_candidates(candidates))
    if isinstance(constraint, LatestExpression):
        return [text for text, value in ordered if isinstance(value, Version)][:1]
    return [text for text, value in ordered if constraint.matches(value)]


def best_match(constraint: str | Semver, candidates: Iterable[str]) -> str | None:
    """Return the highest candidate satisfying *constraint*, or None.

    Args:
        constraint: A constraint string or an already-parsed tree.
        candidates: Available version (or URL) strings.

    Raises:
        MalformedExpression: If *constraint* is a string that does not parse.
    """
    expr = parse(constraint) if isinstance(constraint, str) else constraint
    matching = matching_candidates(expr, candidates)
    return matching[0] if matching else None


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


@dataclass
class Resolution:
    """Outcome of resolving one package constraint.

    Attributes:
        package: The requested package identifier.
        constraint: The constraint string as requested.
        version: The selected candidate (highest match).
        matching: Every candidate that satisfied the constraint, highest first.
    """

    package: str
    constraint: str
    version: str
    matching: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "package": self.package,
            "constraint": self.constraint,
            "version": self.version,
            "matching": list(self.matching),
        }


class VersionResolver:
    """Resolve package constraints against a table of available versions.

    Args:
        available: Mapping of package identifier to its available version
            (or URL) strings, in any order.
    """

    def __init__(self, available: Mapping[str, Iterable[str]]) -> None:
        self._available: dict[str, list[str]] = {
            name: list(versions) for name, versions in available.items()
        }

    @property
    def packages(self) -> list[str]:
        """Return the known package identifiers, sorted."""
        return sorted(self._available)

    def versions(self, package: str) -> list[str]:
        """Return the available versions of *package* (empty if unknown)."""
        return list(self._available.get(package, []))

    def resolve(self, package: str, constraint: str) -> Resolution:
        """Select the highest available version of *package* matching *constraint*.

        Raises:
            MalformedExpression: If *constraint* does not parse.
            PackageNotFoundError: If the package is unknown or no available
                version satisfies the constraint.
        """
        expr = parse(constraint)
        available = self.versions(package)
        matching = matching_candidates(expr, available)
        if not matching:
            raise PackageNotFoundError(package, constraint, available)
        logger.debug("Resolved %s %r to %s", package, constraint, matching[0])
        return Resolution(
            package=package,
            constraint=constraint,
            version=matching[0],
            matching=matching,
        )

    def resolve_all(self, requirements: Mapping[str, str]) -> dict[str, Resolution]:
        """Resolve every ``package -> constraint`` pair in *requirements*.

        Raises:
            PackageNotFoundError: For the first requirement that cannot be met.
        """
        return {
            package: self.resolve(package, constraint)
            for package, constraint in requirements.items()
        }

    def diagnose(self, requirements: Mapping[str, str]) -> list[str]:
        """Describe every requirement that cannot be met, without raising.

        Returns:
            Human-readable problem descriptions. Empty if all resolve.
        """
        msgs: list[str] = []
        for package, constraint in requirements.items():
            try:
                self.resolve(package, constraint)
            except PackageNotFoundError as exc:
                msgs.append(str(exc))
            except MalformedExpression as exc:
                msgs.append(f"{package}: {exc.reason}")
        return msgs
