"""``versionspec parse <expression>`` -- Show the parsed expression tree.

Exit Codes:
    0 -- Expression parsed.
    2 -- Expression is malformed.
"""

from __future__ import annotations

import json
import sys

import click

from versionspec.core.expression import parse
from versionspec.exceptions import MalformedExpression


@click.command("parse")
@click.argument("expression")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def parse_command(expression: str, output_format: str) -> None:
    """Parse EXPRESSION and print the resulting expression tree.

    Exit code 0 on success, 2 if the expression is malformed.
    """
    try:
        expr = parse(expression)
    except MalformedExpression as exc:
        if output_format == "json":
            click.echo(json.dumps({
                "error": exc.reason,
                "position": exc.position,
                "expected": list(exc.expected),
            }))
        else:
            click.echo(f"Error: {exc}")
        sys.exit(2)

    if output_format == "json":
        click.echo(json.dumps(expr.to_dict(), indent=2))
    else:
        from versionspec.cli.output import print_expression_tree
        print_expression_tree(expr)
    sys.exit(0)
