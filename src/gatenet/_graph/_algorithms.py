"""Graph algorithms over gate closures."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gatenet._gate import Gate


def expand(root: Gate) -> frozenset[Gate]:
    """Collect every gate reachable from `root` through input edges.

    The root itself is included. Each gate is visited once, however many
    downstream gates share it, using a visited array indexed by handle.

    Args:
        root: The gate to expand.

    Returns:
        The closure of the root. Sort with `sorted_by_id` for a stable order.

    Example:
        >>> from gatenet import Circuit
        >>> circuit = Circuit()
        >>> a = circuit.variable("A")
        >>> len(expand(circuit.and_(circuit.not_(a), a)))
        3

    """
    circuit = root.circuit
    visited = [False] * len(circuit)
    closure: list[Gate] = []
    stack = [root.id]
    while stack:
        handle = stack.pop()
        if visited[handle]:
            continue
        visited[handle] = True
        gate = circuit[handle]
        closure.append(gate)
        stack.extend(gate.input_ids)
    return frozenset(closure)


def sorted_by_id(gates: Iterable[Gate]) -> list[Gate]:
    """Return gates ordered by id (construction order)."""
    return sorted(gates, key=lambda gate: gate.id)


def successor_map(gates: Iterable[Gate]) -> dict[Gate, list[Gate]]:
    """Map each gate to the gates among `gates` that take it as an input.

    Gates are keyed in id order. A gate used twice by the same downstream
    gate appears twice in that list.
    """
    successors: dict[Gate, list[Gate]] = {gate: [] for gate in sorted_by_id(gates)}
    for gate in successors:
        for operand in gate.inputs:
            if operand in successors:
                successors[operand].append(gate)
    return successors


def topological_sort(gates: Iterable[Gate]) -> list[Gate]:
    """Order gates so that every gate comes after all of its inputs.

    Kahn ordering over `successor_map`: a gate becomes ready once each of its
    inputs inside `gates` has been emitted (an input used twice counts
    twice). Inputs outside `gates` are treated as already known. Gates ready
    at the same time keep id order.

    Args:
        gates: The gates to order, typically a closure from `expand`.

    Returns:
        The gates, inputs first.

    Example:
        >>> from gatenet import Circuit
        >>> circuit = Circuit()
        >>> a = circuit.variable("A")
        >>> q = circuit.not_(circuit.and_(a, circuit.variable("B")))
        >>> [gate.id for gate in topological_sort(expand(q))]
        [0, 1, 2, 3]

    """
    successors = successor_map(gates)
    waiting = {gate: sum(operand in successors for operand in gate.inputs) for gate in successors}
    ready = deque(gate for gate, count in waiting.items() if count == 0)

    order: list[Gate] = []
    while ready:
        gate = ready.popleft()
        order.append(gate)
        for consumer in successors[gate]:
            waiting[consumer] -= 1
            if waiting[consumer] == 0:
                ready.append(consumer)
    return order
