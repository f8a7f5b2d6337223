"""Value propagation over gate closures."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from gatenet._graph import expand, sorted_by_id, topological_sort
from gatenet._kind import apply_operation

if TYPE_CHECKING:
    from collections.abc import Collection

    from gatenet._gate import Gate

logger = logging.getLogger(__name__)


class EvaluationStrategy(StrEnum):
    """How derivable values are scheduled during propagation.

    Both strategies resolve a gate only after all of its inputs, so they
    always agree on the result.
    """

    FIXED_POINT = "fixed-point"
    TOPOLOGICAL = "topological"


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    """Result of propagating values through the closure of a root gate.

    Attributes:
        root: The gate the closure was taken from.
        values: Mapping from gate to its assigned or derived value, for every
            gate of the closure whose value could be determined.
        unresolved: Gates of the closure whose value could not be determined.

    """

    root: Gate
    values: dict[Gate, bool] = field(default_factory=dict)
    unresolved: frozenset[Gate] = field(default_factory=frozenset)

    @property
    def root_value(self) -> bool | None:
        """The value of the root, or None when it is undecidable."""
        return self.values.get(self.root)

    @property
    def success(self) -> bool:
        """Check if the root's value could be determined."""
        return self.root in self.values

    def get_value(self, gate: Gate) -> bool:
        """Get a determined value by gate.

        Raises:
            KeyError: If the gate's value was not determined.

        """
        return self.values[gate]


def _seed(closure: Collection[Gate]) -> dict[Gate, bool]:
    """Start from the values already assigned in the closure."""
    return {gate: gate.value for gate in sorted_by_id(closure) if gate.value is not None}


def _resolve(gate: Gate, values: dict[Gate, bool]) -> bool:
    """Try to compute `gate` from known input values, storing the result."""
    operands = gate.inputs
    if not all(operand in values for operand in operands):
        return False
    values[gate] = apply_operation(gate.kind, [values[operand] for operand in operands])
    logger.debug("Derived %s #%d = %r", gate.name, gate.id, values[gate])
    return True


def _run_fixed_point(
    closure: Collection[Gate],
    values: dict[Gate, bool],
    target: Gate | None = None,
) -> None:
    """Rescan unresolved gates until the target is known or nothing changes.

    Without a target, runs until no further gate can be resolved.
    """
    pending = [gate for gate in sorted_by_id(closure) if gate.is_composite and gate not in values]
    rounds = 0
    while pending and (target is None or target not in values):
        remaining = [gate for gate in pending if not _resolve(gate, values)]
        rounds += 1
        logger.debug("Round %d resolved %d gate(s)", rounds, len(pending) - len(remaining))
        if len(remaining) == len(pending):
            break
        pending = remaining


def _run_topological(closure: Collection[Gate], values: dict[Gate, bool]) -> None:
    """Resolve the closure in a single inputs-first pass."""
    for gate in topological_sort(closure):
        if gate.is_composite and gate not in values:
            _resolve(gate, values)


def _propagate(
    root: Gate,
    strategy: EvaluationStrategy,
    *,
    stop_at_root: bool,
) -> tuple[frozenset[Gate], dict[Gate, bool]]:
    closure = expand(root)
    values = _seed(closure)
    logger.debug("Propagating over %d gate(s), %d already assigned", len(closure), len(values))

    match strategy:
        case EvaluationStrategy.FIXED_POINT:
            _run_fixed_point(closure, values, target=root if stop_at_root else None)
        case EvaluationStrategy.TOPOLOGICAL:
            _run_topological(closure, values)

    return closure, values


def evaluate(root: Gate, *, strategy: EvaluationStrategy = EvaluationStrategy.FIXED_POINT) -> bool | None:
    """Derive the value of a gate from the values assigned in its closure.

    Gates that already have a value (constants, assigned variables, and any
    composite gate given a value directly) are taken as given. Every other
    composite gate is computed once all of its inputs are known.

    Args:
        root: The gate to evaluate.
        strategy: How to schedule the propagation. Does not affect the result.

    Returns:
        The root's value, or None when it depends on an unassigned gate.

    Example:
        >>> from gatenet import Circuit
        >>> circuit = Circuit()
        >>> a, b = circuit.variable("A"), circuit.variable("B")
        >>> q = circuit.xor(a, b)
        >>> circuit.assign({"A": True, "B": False})
        >>> evaluate(q)
        True

    """
    _, values = _propagate(root, strategy, stop_at_root=True)
    result = values.get(root)
    logger.debug("Evaluated %s #%d = %r", root.name, root.id, result)
    return result


def propagate(
    root: Gate,
    *,
    strategy: EvaluationStrategy = EvaluationStrategy.FIXED_POINT,
) -> EvaluationResult:
    """Determine every derivable value in the closure of a gate.

    Args:
        root: The gate whose closure is propagated.
        strategy: How to schedule the propagation. Does not affect the result.

    Returns:
        EvaluationResult with the determined values and the unresolved gates.

    """
    closure, values = _propagate(root, strategy, stop_at_root=False)
    return EvaluationResult(
        root=root,
        values=values,
        unresolved=frozenset(gate for gate in closure if gate not in values),
    )
