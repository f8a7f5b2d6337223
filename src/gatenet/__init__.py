"""Combinational logic graphs: construction, evaluation and consistency checks."""

__all__ = [
    "Circuit",
    "ConsistencyReport",
    "EvaluationResult",
    "EvaluationStrategy",
    "ExpressionError",
    "Gate",
    "GateKind",
    "InvalidGateError",
    "apply_operation",
    "check",
    "check_closure",
    "evaluate",
    "expand",
    "parse_expression",
    "propagate",
    "sorted_by_id",
    "topological_sort",
]

from ._circuit import Circuit
from ._errors import InvalidGateError
from ._eval_engine import (
    ConsistencyReport,
    EvaluationResult,
    EvaluationStrategy,
    check,
    check_closure,
    evaluate,
    propagate,
)
from ._expr import ExpressionError, parse_expression
from ._gate import Gate
from ._graph import expand, sorted_by_id, topological_sort
from ._kind import GateKind, apply_operation
