"""The gate node of a logic graph."""

from __future__ import annotations

from dataclasses import FrozenInstanceError, dataclass, field
from typing import TYPE_CHECKING

from ._errors import InvalidGateError
from ._kind import GateKind

if TYPE_CHECKING:
    from ._circuit import Circuit

_STRUCTURAL_FIELDS = frozenset({"circuit", "id", "kind", "input_ids", "variable_index"})


@dataclass(slots=True, eq=False)
class Gate:
    """A vertex in a combinational logic graph.

    Gates are created through the factories of a `Circuit` and refer to
    their inputs by handle (the input's id in the same circuit). Only
    `name` and `value` may change after construction; assigning any other
    field raises `FrozenInstanceError`.

    Equality and hashing use the gate's identity (its id within its
    circuit), so gates can be used as set members and mapping keys while
    their values change.

    Attributes:
        circuit: The circuit owning this gate.
        id: Unique id within the circuit, also its handle in the arena.
        kind: The operation of the gate.
        name: Display label. Never affects semantics.
        input_ids: Handles of the input gates, in operand order.
        variable_index: Index among the circuit's variables, or None for
            gates that are not variables.

    """

    circuit: Circuit = field(repr=False)
    id: int
    kind: GateKind
    name: str
    input_ids: tuple[int, ...] = ()
    variable_index: int | None = None
    _value: bool | None = field(default=None, repr=False)

    @property
    def value(self) -> bool | None:
        """The assigned value, or None when unset."""
        return self._value

    @value.setter
    def value(self, value: bool | None) -> None:
        self.validate_value(value)
        self._value = value

    def validate_value(self, value: object) -> None:
        """Check that `value` could be assigned to this gate, without assigning it.

        Raises:
            TypeError: If the value is neither bool nor None.
            InvalidGateError: If the value is None and the gate is a constant.

        """
        if value is not None and not isinstance(value, bool):
            msg = f"Gate values must be bool or None, got {type(value).__name__}"
            raise TypeError(msg)
        if value is None and self.kind == GateKind.CONSTANT:
            msg = f"Cannot unset the value of constant gate #{self.id}"
            raise InvalidGateError(msg)

    def __setattr__(self, name: str, value: object) -> None:
        # Structural fields are written once, by __init__
        if name in _STRUCTURAL_FIELDS and hasattr(self, name):
            msg = f"Cannot change '{name}' of gate #{self.id}"
            raise FrozenInstanceError(msg)
        object.__setattr__(self, name, value)

    @property
    def inputs(self) -> tuple[Gate, ...]:
        """The input gates, in operand order."""
        return tuple(self.circuit[handle] for handle in self.input_ids)

    @property
    def is_composite(self) -> bool:
        """Check if this gate computes its value from inputs."""
        return self.kind.is_composite

    def _operand(self, other: object) -> Gate | None:
        if isinstance(other, Gate):
            return other
        if isinstance(other, bool):
            return self.circuit.constant(other)
        return None

    def __and__(self, other: Gate | bool) -> Gate:
        operand = self._operand(other)
        if operand is None:
            return NotImplemented
        return self.circuit.and_(self, operand)

    def __rand__(self, other: bool) -> Gate:
        operand = self._operand(other)
        if operand is None:
            return NotImplemented
        return self.circuit.and_(operand, self)

    def __or__(self, other: Gate | bool) -> Gate:
        operand = self._operand(other)
        if operand is None:
            return NotImplemented
        return self.circuit.or_(self, operand)

    def __ror__(self, other: bool) -> Gate:
        operand = self._operand(other)
        if operand is None:
            return NotImplemented
        return self.circuit.or_(operand, self)

    def __xor__(self, other: Gate | bool) -> Gate:
        operand = self._operand(other)
        if operand is None:
            return NotImplemented
        return self.circuit.xor(self, operand)

    def __rxor__(self, other: bool) -> Gate:
        operand = self._operand(other)
        if operand is None:
            return NotImplemented
        return self.circuit.xor(operand, self)

    def __invert__(self) -> Gate:
        return self.circuit.not_(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Gate):
            return NotImplemented
        return self.id == other.id and self.circuit is other.circuit

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        value = "unset" if self._value is None else str(self._value).lower()
        inputs = ""
        if self.input_ids:
            inputs = ", Inputs IDs: " + ",".join(str(handle) for handle in self.input_ids)
        if self.variable_index is not None:
            return (
                f"{self.kind.label} GateID:{self.id} VarID:{self.variable_index} "
                f"Value:{value} Name: {self.name}{inputs}"
            )
        return f"{self.kind.label} GateID:{self.id} Value:{value} Name: {self.name}{inputs}"
