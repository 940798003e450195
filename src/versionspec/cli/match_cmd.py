"""``versionspec match <expression> <version>...`` -- Test candidates.

Parses the expression once and checks every candidate version (or URL)
against it.

Exit Codes:
    0 -- At least one candidate matches.
    1 -- No candidate matches.
    2 -- Expression is malformed.
"""

from __future__ import annotations

import json
import sys

import click

from versionspec.core.expression import parse
from versionspec.core.resolution import parse_candidate
from versionspec.exceptions import MalformedExpression


@click.command("match")
@click.argument("expression")
@click.argument("candidates", nargs=-1, required=True)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def match_command(expression: str, candidates: tuple[str, ...], output_format: str) -> None:
    """Check which CANDIDATES satisfy EXPRESSION.

    Candidates that are not valid versions are reported as invalid and
    never match. Exit code 0 if any candidate matches, 1 if none does,
    2 if the expression is malformed.
    """
    try:
        expr = parse(expression)
    except MalformedExpression as exc:
        click.echo(f"Error: {exc}")
        sys.exit(2)

    verdicts: list[tuple[str, bool | None]] = []
    for text in candidates:
        try:
            verdicts.append((text, expr.matches(parse_candidate(text))))
        except MalformedExpression:
            verdicts.append((text, None))

    if output_format == "json":
        click.echo(json.dumps({
            "expression": expr.text(),
            "results": [
                {"candidate": text, "matches": matched}
                for text, matched in verdicts
            ],
        }, indent=2))
    else:
        from versionspec.cli.output import print_match_table
        print_match_table(expression, verdicts)

    sys.exit(0 if any(matched for _, matched in verdicts) else 1)
