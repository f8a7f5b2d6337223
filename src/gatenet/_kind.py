"""Gate kinds and their boolean semantics."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Self

from ._errors import InvalidGateError

if TYPE_CHECKING:
    from collections.abc import Sequence


class GateKind(StrEnum):
    """The closed set of gate kinds.

    Each member carries the number of inputs a gate of that kind takes
    and a docstring describing its behaviour.
    """

    def __new__(cls, value: str, arity: int, doc: str = "") -> Self:
        """Create a new enum member with an arity and a docstring."""
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.arity = arity
        obj.__doc__ = doc
        return obj

    arity: int

    VARIABLE = "variable", 0, "Variable. Has no inputs; its value is assigned by the caller."
    CONSTANT = "constant", 0, "Constant. Has no inputs and a fixed value assigned at construction."
    AND = "and", 2, "Conjunction of two inputs."
    OR = "or", 2, "Disjunction of two inputs."
    XOR = "xor", 2, "Exclusive or of two inputs."
    NOT = "not", 1, "Negation of a single input."

    @property
    def label(self) -> str:
        """Display label, e.g. ``Xor`` for ``GateKind.XOR``."""
        return self.name.capitalize()

    @property
    def is_composite(self) -> bool:
        """Check if gates of this kind compute their value from inputs."""
        return self.arity > 0


def apply_operation(kind: GateKind, operands: Sequence[bool]) -> bool:
    """Apply the operation of a composite gate kind to its operand values.

    Args:
        kind: A composite gate kind (AND, OR, XOR or NOT).
        operands: The input values, one per input of the kind.

    Returns:
        The value the gate computes.

    Raises:
        InvalidGateError: If the kind is not composite or the operand count
            does not match its arity.

    Example:
        >>> apply_operation(GateKind.XOR, (True, False))
        True

    """
    if len(operands) != kind.arity:
        msg = f"{kind.label} takes {kind.arity} operand(s), got {len(operands)}"
        raise InvalidGateError(msg)

    match kind:
        case GateKind.AND:
            a, b = operands
            return a and b
        case GateKind.OR:
            a, b = operands
            return a or b
        case GateKind.XOR:
            a, b = operands
            return a != b
        case GateKind.NOT:
            (a,) = operands
            return not a
        case GateKind.VARIABLE | GateKind.CONSTANT:
            msg = f"{kind.label} gates have no operation"
            raise InvalidGateError(msg)
