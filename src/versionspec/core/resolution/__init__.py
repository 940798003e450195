"""Package resolution on top of the constraint expression tree.

A higher-level package manager hands over the requested constraint and the
versions a registry offers; this package picks the winning version or raises
``PackageNotFoundError``.
"""

from versionspec.core.resolution.resolver import (
    Resolution,
    VersionResolver,
    best_match,
    matching_candidates,
    parse_candidate,
)

__all__ = [
    "Resolution",
    "VersionResolver",
    "best_match",
    "matching_candidates",
    "parse_candidate",
]
