import logging
from typing import Annotated, NoReturn

import typer
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from gatenet._errors import InvalidGateError
from gatenet._eval_engine import EvaluationStrategy, check_closure, evaluate, propagate
from gatenet._expr import ExpressionError, parse_expression
from gatenet._gate import Gate
from gatenet._graph import expand, sorted_by_id

from .config import ConfigError, GatenetConfig, get_config
from .render import format_value, render_check_table, render_gate_table, render_tree

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()

_BOOL = TypeAdapter(bool)
_UNSET_WORDS = frozenset({"unset", "none"})

ExpressionArg = Annotated[
    str | None,
    typer.Argument(help="Boolean expression, e.g. '!(A ^ B ^ C)'. Defaults to [tool.gatenet].expression"),
]
AssignmentOpt = Annotated[
    list[str] | None,
    typer.Option("--set", "-s", help="Assignment NAME=VALUE, or #ID=VALUE for any gate. Repeatable"),
]


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Gatenet CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]✗ {escape(message)}[/red]")
    raise typer.Exit(code=2)


def _parse_bool(raw: str, target: str) -> bool | None:
    if raw.strip().lower() in _UNSET_WORDS:
        return None
    try:
        return _BOOL.validate_python(raw.strip())
    except ValidationError:
        _fail(f"Invalid value '{raw}' for '{target}'")


def _parse_assignments(assignments: list[str] | None) -> dict[str, bool | None]:
    """Parse NAME=VALUE options into a mapping."""
    parsed: dict[str, bool | None] = {}
    for assignment in assignments or []:
        target, sep, raw = assignment.partition("=")
        target = target.strip()
        if not sep or not target:
            _fail(f"Expected NAME=VALUE, got '{assignment}'")
        parsed[target] = _parse_bool(raw, target)
    return parsed


def _load_config() -> GatenetConfig:
    try:
        return get_config()
    except ConfigError as e:
        _fail(str(e))


def _resolve_target(root: Gate, target: str) -> Gate:
    """Find the gate named by a variable name or a ``#ID`` handle."""
    circuit = root.circuit
    if target.startswith("#"):
        try:
            handle = int(target[1:])
        except ValueError:
            _fail(f"Invalid gate id '{target[1:]}'")
        if not 0 <= handle < len(circuit):
            _fail(f"No gate with id {handle}")
        return circuit[handle]
    gate = circuit.find_variable(target)
    if gate is None:
        _fail(f"No variable named '{target}' in the expression")
    return gate


def _assign(root: Gate, values: dict[Gate, bool | None]) -> None:
    try:
        root.circuit.assign(values)
    except InvalidGateError as e:
        _fail(str(e))


def _build(
    expression: str | None,
    assignments: list[str] | None,
    config: GatenetConfig,
) -> Gate:
    """Parse the expression and apply configured and command-line assignments."""
    text = expression if expression is not None else config.expression
    if text is None:
        _fail("No expression given and none configured in [tool.gatenet]")

    try:
        root = parse_expression(text)
    except ExpressionError as e:
        _fail(f"Invalid expression: {e}")

    values: dict[Gate, bool | None] = {}
    for name, value in config.inputs.items():
        gate = root.circuit.find_variable(name)
        if gate is None:
            logger.debug("Ignoring configured input '%s' (not in expression)", name)
            continue
        values[gate] = value

    # Command-line assignments override configured ones
    for target, value in _parse_assignments(assignments).items():
        values[_resolve_target(root, target)] = value

    _assign(root, values)
    return root


@app.command("expand")
def expand_command(
    expression: ExpressionArg = None,
    *,
    tree: Annotated[
        bool,
        typer.Option("--tree", help="Also render the input structure as a tree"),
    ] = False,
) -> None:
    """List every gate the output gate depends on."""
    config = _load_config()
    root = _build(expression, None, config)

    closure = sorted_by_id(expand(root))
    render_gate_table(closure, out_console)
    out_console.print(f"Output gate can be expanded into: {len(closure)} gates")

    if tree:
        out_console.print()
        render_tree(root, out_console)


@app.command("eval")
def eval_command(
    expression: ExpressionArg = None,
    *,
    assignments: AssignmentOpt = None,
    strategy: Annotated[
        EvaluationStrategy | None,
        typer.Option("--strategy", help="Propagation scheduling. Defaults to [tool.gatenet].strategy"),
    ] = None,
    all_values: Annotated[
        bool,
        typer.Option("--all", help="Show every value derivable in the closure"),
    ] = False,
) -> None:
    """Evaluate the output gate from the assigned variables."""
    config = _load_config()
    root = _build(expression, assignments, config)
    chosen = strategy if strategy is not None else config.strategy

    if all_values:
        result = propagate(root, strategy=chosen)
        render_gate_table(sorted_by_id(expand(root)), out_console, values=result.values)
        value = result.root_value
    else:
        value = evaluate(root, strategy=chosen)

    if value is None:
        err_console.print("[yellow]Some inputs are unassigned; the result is undecided[/yellow]")
    out_console.print(format_value(value))


@app.command("check")
def check_command(
    expression: ExpressionArg = None,
    *,
    assignments: AssignmentOpt = None,
    claim: Annotated[
        str | None,
        typer.Option("--claim", help="Value claimed for the output gate"),
    ] = None,
) -> None:
    """Check assigned values against each gate's operation."""
    config = _load_config()
    root = _build(expression, assignments, config)
    if claim is not None:
        _assign(root, {root: _parse_bool(claim, "--claim")})

    report = check_closure(root)
    render_check_table(report, out_console)

    if not report.is_consistent():
        ids = ", ".join(f"#{gate.id}" for gate in report.inconsistent)
        err_console.print(f"[red]✗ Inconsistent gates: {ids}[/red]")
        raise typer.Exit(code=1)

    if report.undecided:
        err_console.print(f"[yellow]{len(report.undecided)} gate(s) could not be checked[/yellow]")
    err_console.print("[green]✓ Assigned values are consistent[/green]")


def main() -> None:
    app()
