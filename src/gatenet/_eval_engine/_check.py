"""Local consistency checks of assigned gate values."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gatenet._graph import expand, sorted_by_id
from gatenet._kind import apply_operation

if TYPE_CHECKING:
    from gatenet._gate import Gate

logger = logging.getLogger(__name__)


def check(gate: Gate) -> bool | None:
    """Check a gate's assigned value against its operation and direct inputs.

    This looks one level down only; the inputs' own values are not checked.

    Args:
        gate: The gate to check.

    Returns:
        None if the gate or any of its direct inputs is unassigned.
        True if the gate is a variable or constant, or its operation applied
        to the inputs' values gives its assigned value. False otherwise.

    """
    if gate.value is None:
        return None
    operand_values = [operand.value for operand in gate.inputs]
    if any(value is None for value in operand_values):
        return None
    if not gate.is_composite:
        return True
    expected = apply_operation(gate.kind, operand_values)
    if expected != gate.value:
        logger.debug("Gate %s #%d holds %r but its inputs give %r", gate.name, gate.id, gate.value, expected)
        return False
    return True


@dataclass(frozen=True, slots=True)
class ConsistencyReport:
    """Outcome of checking every gate in the closure of a root.

    Attributes:
        root: The gate the closure was taken from.
        results: Mapping from gate to its `check` outcome, in id order.

    """

    root: Gate
    results: dict[Gate, bool | None] = field(default_factory=dict)

    @property
    def inconsistent(self) -> list[Gate]:
        """Gates whose value contradicts their inputs."""
        return [gate for gate, result in self.results.items() if result is False]

    @property
    def undecided(self) -> list[Gate]:
        """Gates that could not be checked because of unassigned values."""
        return [gate for gate, result in self.results.items() if result is None]

    def is_consistent(self, *, allow_undecided: bool = True) -> bool:
        """Check if the whole closure is consistent.

        Args:
            allow_undecided: Whether gates that could not be checked are
                tolerated.

        Returns:
            False if any gate is inconsistent, or if any gate is undecided and
            `allow_undecided` is False. True otherwise.

        """
        if self.inconsistent:
            return False
        return allow_undecided or not self.undecided


def check_closure(root: Gate) -> ConsistencyReport:
    """Apply `check` to every gate reachable from `root`."""
    results = {gate: check(gate) for gate in sorted_by_id(expand(root))}
    return ConsistencyReport(root=root, results=results)
