"""versionspec CLI -- Parse and evaluate version-constraint expressions.

Entry point for the ``versionspec`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    parse    -- Show the expression tree for a constraint.
    match    -- Check candidate versions against a constraint.
    resolve  -- Resolve a YAML dependency manifest.

Usage::

    versionspec parse ">=1.2.x <2.0.0 || ~1.0"
    versionspec match "1.2.x" 1.2.0 1.3.0 1.2.999
    versionspec resolve ./deps.yaml --format json
"""

from __future__ import annotations

import click

from versionspec import __version__
from versionspec.cli.match_cmd import match_command
from versionspec.cli.parse_cmd import parse_command
from versionspec.cli.resolve_cmd import resolve_command


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """versionspec: Parse and evaluate package version constraints.

    Understands ranges (1.0.0 - 2.0.0), relational bounds (>=1.2.0),
    X-ranges (1.2.x), tilde ranges (~1.2.3), disjunctions (||), VCS/HTTP
    URLs and the keywords * and latest.
    """


cli.add_command(parse_command)
cli.add_command(match_command)
cli.add_command(resolve_command)
