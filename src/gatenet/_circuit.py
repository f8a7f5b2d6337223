"""Circuit: the arena and builder owning a graph of gates."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ._errors import InvalidGateError
from ._gate import Gate
from ._kind import GateKind

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

logger = logging.getLogger(__name__)


def _default_name(kind: GateKind, variable_index: int | None) -> str:
    if kind == GateKind.VARIABLE:
        return f"Var{variable_index}"
    if kind == GateKind.CONSTANT:
        return "Const"
    return kind.label


@dataclass(slots=True, eq=False)
class Circuit:
    """A graph builder holding gates in an arena.

    The circuit owns the id counter (ids start at 0 and double as arena
    handles) and the variable-index counter (starting at 1). Independent
    circuits never share counters, so their id spaces are separate.

    Gates must be built bottom-up: every input passed to a factory has to be
    an existing gate of the same circuit. Acyclicity follows from that and is
    not checked further.

    Example:
        >>> circuit = Circuit()
        >>> a = circuit.variable("A")
        >>> b = circuit.variable("B")
        >>> q = circuit.not_(circuit.xor(a, b))
        >>> [gate.id for gate in q.inputs]
        [2]

    """

    name: str = "circuit"
    _gates: list[Gate] = field(default_factory=list, repr=False)
    _next_variable_index: int = field(default=1, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def add_gate(
        self,
        kind: GateKind,
        inputs: Iterable[Gate] = (),
        *,
        name: str | None = None,
        value: bool | None = None,
    ) -> Gate:
        """Create a gate of any kind.

        Args:
            kind: The kind of the new gate.
            inputs: Input gates in operand order. Must match the kind's arity.
            name: Display name. Defaults to a name derived from the kind.
            value: Initial value. Required for constants.

        Returns:
            The new gate, with a freshly allocated id.

        Raises:
            InvalidGateError: If the inputs do not match the kind's arity, an
                input is not a gate of this circuit, or a constant has no
                bool value.
            TypeError: If the value is neither bool nor None.

        """
        operands = tuple(inputs)
        if len(operands) != kind.arity:
            msg = f"{kind.label} gates take {kind.arity} input(s), got {len(operands)}"
            raise InvalidGateError(msg)
        for operand in operands:
            if not isinstance(operand, Gate):
                msg = f"{kind.label} gate input must be a Gate, got {type(operand).__name__}"
                raise InvalidGateError(msg)
            if operand.circuit is not self:
                msg = f"Input gate #{operand.id} belongs to a different circuit"
                raise InvalidGateError(msg)
        if kind == GateKind.CONSTANT and not isinstance(value, bool):
            msg = "Constant gates require a bool value"
            raise InvalidGateError(msg)
        if value is not None and not isinstance(value, bool):
            msg = f"Gate values must be bool or None, got {type(value).__name__}"
            raise TypeError(msg)

        with self._lock:
            variable_index = None
            if kind == GateKind.VARIABLE:
                variable_index = self._next_variable_index
                self._next_variable_index += 1
            gate = Gate(
                circuit=self,
                id=len(self._gates),
                kind=kind,
                name=name if name is not None else _default_name(kind, variable_index),
                input_ids=tuple(operand.id for operand in operands),
                variable_index=variable_index,
                _value=value,
            )
            self._gates.append(gate)

        logger.debug("Created %s", gate)
        return gate

    def constant(self, value: bool) -> Gate:  # noqa: FBT001
        """Create a constant gate holding `value`."""
        return self.add_gate(GateKind.CONSTANT, value=value)

    def variable(self, name: str | None = None) -> Gate:
        """Create an unassigned variable gate.

        Unnamed variables are labelled ``Var<index>``.
        """
        return self.add_gate(GateKind.VARIABLE, name=name)

    def and_(self, a: Gate, b: Gate) -> Gate:
        """Create a conjunction gate."""
        return self.add_gate(GateKind.AND, (a, b))

    def or_(self, a: Gate, b: Gate) -> Gate:
        """Create a disjunction gate."""
        return self.add_gate(GateKind.OR, (a, b))

    def xor(self, a: Gate, b: Gate) -> Gate:
        """Create an exclusive-or gate."""
        return self.add_gate(GateKind.XOR, (a, b))

    def not_(self, a: Gate) -> Gate:
        """Create a negation gate."""
        return self.add_gate(GateKind.NOT, (a,))

    def variables(self) -> list[Gate]:
        """Get all variable gates, ordered by variable index."""
        return [gate for gate in self._gates if gate.kind == GateKind.VARIABLE]

    def find_variable(self, name: str) -> Gate | None:
        """Get the first variable gate with the given name, or None."""
        for gate in self._gates:
            if gate.kind == GateKind.VARIABLE and gate.name == name:
                return gate
        return None

    def assign(self, values: Mapping[str | Gate, bool | None]) -> None:
        """Assign values to several gates at once.

        Args:
            values: Mapping from a variable name or a gate of this circuit to
                the value to assign (None clears the value).

        Every entry is checked before any value is written, so a failing
        call leaves the circuit unchanged.

        Raises:
            KeyError: If a name matches no variable of this circuit.
            InvalidGateError: If a gate belongs to a different circuit, or a
                constant would be unset.
            TypeError: If a value is neither bool nor None.

        """
        resolved: list[tuple[Gate, bool | None]] = []
        for target, value in values.items():
            gate = self._resolve_target(target)
            gate.validate_value(value)
            resolved.append((gate, value))

        for gate, value in resolved:
            gate.value = value
            logger.debug("Assigned %s = %r", gate.name, value)

    def _resolve_target(self, target: str | Gate) -> Gate:
        if isinstance(target, Gate):
            if target.circuit is not self:
                msg = f"Gate #{target.id} belongs to a different circuit"
                raise InvalidGateError(msg)
            return target
        found = self.find_variable(target)
        if found is None:
            msg = f"No variable named '{target}'"
            raise KeyError(msg)
        return found

    def clear_values(self) -> None:
        """Unset the value of every gate except constants."""
        for gate in self._gates:
            if gate.kind != GateKind.CONSTANT:
                gate.value = None

    def __getitem__(self, handle: int) -> Gate:
        """Get a gate by its handle (id)."""
        return self._gates[handle]

    def __iter__(self) -> Iterator[Gate]:
        """Iterate over gates in id order."""
        return iter(self._gates)

    def __len__(self) -> int:
        """Return the number of gates in the circuit."""
        return len(self._gates)

    def __contains__(self, gate: object) -> bool:
        """Check if a gate belongs to this circuit."""
        return isinstance(gate, Gate) and gate.circuit is self
