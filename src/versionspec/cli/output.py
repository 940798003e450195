"""Rich output formatting helpers for the versionspec CLI.

Provides consistent terminal output for expression trees, candidate match
tables and resolution summaries.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from versionspec.core.expression import Semver
from versionspec.core.resolution import Resolution

_KIND_STYLES: dict[str, str] = {
    "any": "bold green",
    "latest": "bold magenta",
    "version": "cyan",
    "range": "yellow",
    "relational": "yellow",
    "and": "bold",
    "or": "bold",
    "url": "blue",
}

console = Console()


def _label(node: dict[str, object]) -> Text:
    kind = str(node["kind"])
    return Text.assemble(
        (kind.upper(), _KIND_STYLES.get(kind, "white")),
        ("  ", ""),
        (str(node["text"]), ""),
    )


def _add_children(tree: Tree, node: dict[str, object]) -> None:
    for key in ("left", "right", "lower", "upper", "version"):
        child = node.get(key)
        if isinstance(child, dict):
            branch = tree.add(Text.assemble((f"{key}: ", "dim"), _label(child)))
            _add_children(branch, child)


def print_expression_tree(expr: Semver) -> None:
    """Print the parsed expression as an indented tree.

    Args:
        expr: Root of the parsed expression tree.
    """
    node = expr.to_dict()
    tree = Tree(_label(node))
    _add_children(tree, node)
    console.print(Panel(tree, title="Expression"))


def print_match_table(expression: str, verdicts: list[tuple[str, bool | None]]) -> None:
    """Print a table of candidates and whether each satisfies *expression*.

    Args:
        expression: The constraint as typed by the user.
        verdicts: ``(candidate, matched)`` pairs; ``None`` marks a candidate
            that is not a valid version.
    """
    table = Table(title=f"Candidates for {escape(repr(expression))}", show_header=True, header_style="bold")
    table.add_column("Candidate", style="bold")
    table.add_column("Result", justify="center")
    for candidate, matched in verdicts:
        if matched is None:
            result = Text("INVALID", style="dim")
        elif matched:
            result = Text("MATCH", style="bold green")
        else:
            result = Text("NO MATCH", style="red")
        table.add_row(escape(candidate), result)
    console.print(table)
    hits = sum(1 for _, matched in verdicts if matched)
    console.print(f"[bold]{hits}[/bold] of {len(verdicts)} candidates match")


def print_resolution_summary(
    resolutions: list[Resolution],
    problems: list[str],
) -> None:
    """Print package resolution results.

    Args:
        resolutions: Successful resolutions.
        problems: Descriptions of requirements that could not be met.
    """
    if not problems:
        console.print(
            Panel("[bold green]Resolution successful[/bold green]",
                  title="Package Resolution")
        )
    else:
        console.print(
            Panel("[bold red]Resolution failed[/bold red]",
                  title="Package Resolution")
        )
    if resolutions:
        table = Table(show_header=True)
        table.add_column("Package", style="bold")
        table.add_column("Constraint")
        table.add_column("Resolved Version")
        for res in sorted(resolutions, key=lambda r: r.package):
            table.add_row(escape(res.package), escape(res.constraint), escape(res.version))
        console.print(table)
    for problem in problems:
        console.print(f"  [red]- {escape(problem)}[/red]")
