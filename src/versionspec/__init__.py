"""versionspec: Parse and evaluate package version-constraint expressions."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
