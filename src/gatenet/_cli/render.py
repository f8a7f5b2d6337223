"""Rich rendering utilities for gate graphs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table
from rich.tree import Tree

from gatenet._kind import GateKind

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from rich.console import Console

    from gatenet._eval_engine import ConsistencyReport
    from gatenet._gate import Gate


def format_value(value: bool | None) -> str:  # noqa: FBT001
    """Format a tri-state value as ``true``, ``false`` or ``undecided``."""
    if value is None:
        return "undecided"
    return str(value).lower()


def _get_kind_style(kind: GateKind) -> str:
    """Get Rich style for a gate kind."""
    match kind:
        case GateKind.VARIABLE:
            return "blue"
        case GateKind.CONSTANT:
            return "magenta"
        case _:
            return "yellow"


def _styled_value(value: bool | None) -> str:  # noqa: FBT001
    if value is None:
        return "[dim]unset[/dim]"
    return "[green]true[/green]" if value else "[red]false[/red]"


def render_gate_table(
    gates: Iterable[Gate],
    console: Console,
    values: Mapping[Gate, bool] | None = None,
) -> None:
    """Render gates as a Rich table.

    Args:
        gates: Gates to list, in display order.
        console: Rich Console to output to.
        values: Derived values to show next to the assigned ones.

    """
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", justify="right")
    table.add_column("Kind")
    table.add_column("Name", style="bold")
    table.add_column("Var", justify="right")
    table.add_column("Inputs", style="dim")
    table.add_column("Value")
    if values is not None:
        table.add_column("Derived")

    for gate in gates:
        kind_style = _get_kind_style(gate.kind)
        row = [
            str(gate.id),
            f"[{kind_style}]{gate.kind.label}[/{kind_style}]",
            gate.name,
            "" if gate.variable_index is None else str(gate.variable_index),
            ",".join(str(handle) for handle in gate.input_ids),
            _styled_value(gate.value),
        ]
        if values is not None:
            row.append(_styled_value(values.get(gate)))
        table.add_row(*row)

    console.print(table)


def render_tree(root: Gate, console: Console) -> None:
    """Render the input structure of a gate as a Rich tree."""
    console.print(build_tree(root))


def _tree_label(gate: Gate) -> str:
    kind_style = _get_kind_style(gate.kind)
    return f"[{kind_style}]{gate.kind.label}[/{kind_style}] [bold]{gate.name}[/bold] #{gate.id}"


def build_tree(root: Gate) -> Tree:
    """Build a Rich Tree of the inputs of a gate.

    Gates shared by several consumers are expanded at their first occurrence
    (depth-first, inputs in operand order) and referenced by id afterwards.
    """
    rich_tree = Tree(_tree_label(root))
    seen = {root}
    stack = [(rich_tree, operand) for operand in reversed(root.inputs)]
    while stack:
        parent, gate = stack.pop()
        if gate in seen:
            parent.add(f"[dim]#{gate.id} {gate.name} (shared)[/dim]")
            continue
        seen.add(gate)
        branch = parent.add(_tree_label(gate))
        stack.extend((branch, operand) for operand in reversed(gate.inputs))
    return rich_tree


def render_check_table(report: ConsistencyReport, console: Console) -> None:
    """Render per-gate check outcomes as a Rich table."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", justify="right")
    table.add_column("Kind")
    table.add_column("Name", style="bold")
    table.add_column("Value")
    table.add_column("Check")

    for gate, result in report.results.items():
        kind_style = _get_kind_style(gate.kind)
        if result is None:
            outcome = "[dim]undecided[/dim]"
        elif result:
            outcome = "[green]✓ consistent[/green]"
        else:
            outcome = "[red]✗ inconsistent[/red]"
        table.add_row(
            str(gate.id),
            f"[{kind_style}]{gate.kind.label}[/{kind_style}]",
            gate.name,
            _styled_value(gate.value),
            outcome,
        )

    console.print(table)
