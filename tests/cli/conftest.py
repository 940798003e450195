"""Shared fixtures for CLI tests.

Provides a Click runner and helpers that write YAML dependency manifests
(satisfiable, unsatisfiable, malformed) into temporary directories.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def good_manifest(tmp_path: Path) -> Path:
    """A manifest whose every dependency resolves."""
    manifest = tmp_path / "deps.yaml"
    manifest.write_text(
        "dependencies:\n"
        "  left-pad: \">=1.0.0 <2.0.0\"\n"
        "  request: \"~2.88\"\n"
        "available:\n"
        "  left-pad: [1.0.0, 1.3.0, 2.0.0]\n"
        "  request: [2.87.0, 2.88.0, 2.88.2]\n"
    )
    return manifest


@pytest.fixture
def unsatisfiable_manifest(tmp_path: Path) -> Path:
    """A manifest with one dependency that no available version meets."""
    manifest = tmp_path / "deps.yaml"
    manifest.write_text(
        "dependencies:\n"
        "  left-pad: \"1.x\"\n"
        "  request: \">=3.0.0\"\n"
        "available:\n"
        "  left-pad: [1.0.0, 1.3.0]\n"
        "  request: [2.88.2]\n"
    )
    return manifest


@pytest.fixture
def malformed_expression_manifest(tmp_path: Path) -> Path:
    """A manifest containing a constraint that does not parse."""
    manifest = tmp_path / "deps.yaml"
    manifest.write_text(
        "dependencies:\n"
        "  left-pad: \"x.1.0\"\n"
        "available:\n"
        "  left-pad: [1.0.0]\n"
    )
    return manifest


@pytest.fixture
def unreadable_manifest(tmp_path: Path) -> Path:
    """A file that is not a YAML mapping."""
    manifest = tmp_path / "deps.yaml"
    manifest.write_text("- just\n- a\n- list\n")
    return manifest
