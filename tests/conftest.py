"""Shared fixtures for versionspec tests."""

import pytest

from versionspec.core.expression import Version, parse_version


@pytest.fixture
def release_line() -> list[Version]:
    """A small, unordered set of releases across two major lines."""
    return [
        parse_version(text)
        for text in ("1.2.0", "1.0.0", "2.0.0-beta", "1.2.3", "2.0.0", "1.10.0")
    ]
