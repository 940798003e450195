"""``versionspec resolve <manifest>`` -- Resolve a dependency manifest.

The manifest is a YAML document listing requested constraints and the
versions available for each package::

    dependencies:
      left-pad: ">=1.0.0 <2.0.0"
      request: "~2.88"
    available:
      left-pad: [1.0.0, 1.3.0, 2.0.0]
      request: [2.87.0, 2.88.0, 2.88.2]

Exit Codes:
    0 -- Every dependency resolved.
    1 -- At least one dependency has no satisfying version.
    2 -- Manifest or an expression in it is malformed.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
import yaml

from versionspec.core.resolution import Resolution, VersionResolver
from versionspec.exceptions import MalformedExpression, PackageNotFoundError


def _load_manifest(path: Path) -> tuple[dict[str, str], dict[str, list[str]]] | None:
    """Read and validate a manifest file.

    Returns:
        ``(dependencies, available)`` or None if the file is not a usable
        manifest.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    deps = data.get("dependencies") or {}
    available = data.get("available") or {}
    if not isinstance(deps, dict) or not isinstance(available, dict):
        return None
    if not all(isinstance(v, (list, tuple)) for v in available.values()):
        return None
    # YAML reads unquoted "1.0" as a float; constraints are always strings.
    return (
        {str(name): "" if c is None else str(c) for name, c in deps.items()},
        {str(name): [str(v) for v in vs] for name, vs in available.items()},
    )


@click.command("resolve")
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def resolve_command(manifest: str, output_format: str) -> None:
    """Resolve every dependency in MANIFEST to its highest matching version.

    Exit code 0 on success, 1 if any dependency cannot be satisfied, 2 if
    the manifest or one of its expressions is malformed.
    """
    loaded = _load_manifest(Path(manifest))
    if loaded is None:
        click.echo(f"Error: Could not read manifest: {manifest}")
        sys.exit(2)
    dependencies, available = loaded

    resolver = VersionResolver(available)
    resolutions: list[Resolution] = []
    problems: list[str] = []
    for package, constraint in dependencies.items():
        try:
            resolutions.append(resolver.resolve(package, constraint))
        except PackageNotFoundError as exc:
            problems.append(str(exc))
        except MalformedExpression as exc:
            click.echo(f"Error: {package}: {exc}")
            sys.exit(2)

    if output_format == "json":
        click.echo(json.dumps({
            "success": not problems,
            "resolved": {r.package: r.to_dict() for r in resolutions},
            "problems": problems,
        }, indent=2, sort_keys=True))
    else:
        from versionspec.cli.output import print_resolution_summary
        print_resolution_summary(resolutions, problems)

    sys.exit(1 if problems else 0)
