"""Rich output formatting helpers for the parinstall CLI."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from parinstall.core.dependency.graph import DependencyGraph, PackageNode
from parinstall.core.dependency.resolver import ResolutionStats
from parinstall.core.scheduler.models import RunReport

console = Console()


def _node_label(node: PackageNode) -> Text:
    label = Text(node.name, style="bold")
    if node.version_constraint:
        label.append(f" {node.version_constraint}", style="cyan")
    return label


def build_dependency_tree(graph: DependencyGraph, title: str = "Dependencies") -> Tree:
    """Render *graph* as a ``rich.tree.Tree``.

    A package reached a second time is shown once more by name, marked as
    already listed, without repeating its subtree.
    """
    tree = Tree(Text(title, style="bold"))
    shown: set[str] = set()

    def _add(parent: Tree, node: PackageNode) -> None:
        if node.name in shown:
            parent.add(_node_label(node).append(" (listed above)", style="dim"))
            return
        shown.add(node.name)
        branch = parent.add(_node_label(node))
        for name in sorted(node.dependencies):
            _add(branch, node.dependencies[name])

    for name in sorted(graph.roots):
        _add(tree, graph.roots[name])
    return tree


def print_dependency_tree(graph: DependencyGraph) -> None:
    if not graph.roots:
        console.print("[dim]Nothing to install.[/dim]")
        return
    console.print(build_dependency_tree(graph))


def print_resolution_summary(graph: DependencyGraph, stats: ResolutionStats) -> None:
    """Print a one-line summary of a resolution run, then any failures."""
    parts = [
        f"[bold]{graph.node_count}[/bold] packages resolved",
        f"{len(stats.looked_up)} lookups",
        f"[dim]{len(stats.skipped_builtin)} built-in skipped[/dim]",
    ]
    if stats.failed:
        parts.append(f"[yellow]{len(stats.failed)} not found[/yellow]")
    console.print(" | ".join(parts))
    for name in sorted(stats.failed):
        console.print(f"  [yellow]- {name}: {stats.failed[name]}[/yellow]")
    for cycle in graph.detect_cycles():
        console.print(f"  [dim]cycle: {' -> '.join(cycle)}[/dim]")


def print_run_report(report: RunReport, graph: DependencyGraph | None = None) -> None:
    """Print a table of install results followed by a summary line.

    With *graph*, each failed package is listed with the packages that
    depend on it directly.
    """
    if not report.dispatch_order:
        console.print("[dim]No packages were installed.[/dim]")
        return

    table = Table(title="Install Results", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Package", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Time", justify="right")
    table.add_column("Error", style="dim")

    for position, name in enumerate(report.dispatch_order, start=1):
        result = report.result_for(name)
        if result is None:
            status, seconds, error = Text("?", style="yellow"), "-", ""
        elif result.success:
            status, seconds, error = Text("OK", style="bold green"), f"{result.duration:.1f}s", ""
        else:
            status = Text("FAILED", style="bold red")
            seconds = f"{result.duration:.1f}s"
            error = result.error.splitlines()[0][:80] if result.error else result.error_type
        table.add_row(str(position), name, status, seconds, error)

    console.print(table)

    if graph is not None:
        for result in report.failures:
            dependents = graph.reverse_dependencies(result.name)
            if dependents:
                console.print(
                    f"  [yellow]{result.name}[/yellow] is required by {', '.join(dependents)}"
                )

    failed = len(report.failures)
    verdict = "[bold green]All packages installed[/bold green]" if not failed else (
        f"[bold red]{failed} of {len(report.results)} packages failed[/bold red]"
    )
    console.print(Panel(
        f"{verdict}\n"
        f"Peak concurrency: {report.peak_in_flight} | "
        f"Elapsed: {report.duration:.1f}s",
        title="Install Summary",
    ))


def graph_to_dict(graph: DependencyGraph) -> dict[str, Any]:
    """Serialize *graph* as roots plus a flat node table."""
    return {
        "roots": sorted(graph.roots),
        "packages": {
            name: {
                "version_constraint": node.version_constraint,
                "download_url": node.download_url,
                "dependencies": sorted(node.dependencies),
            }
            for name, node in sorted(graph.nodes.items())
        },
    }


def print_json(data: Any) -> None:
    console.print_json(json.dumps(data, default=str))
