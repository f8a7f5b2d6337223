"""Evaluation engine module for gatenet.

This module provides pure functions over gate graphs. They read assigned
values and never write to gates.

Key types:
- EvaluationStrategy: Scheduling of value propagation
- EvaluationResult: Every value determined in a closure
- ConsistencyReport: Per-gate outcome of checking a closure
- evaluate / propagate: Derive values from assigned inputs
- check / check_closure: Verify assigned values against gate operations
"""

from ._check import ConsistencyReport, check, check_closure
from ._engine import EvaluationResult, EvaluationStrategy, evaluate, propagate

__all__ = [
    "ConsistencyReport",
    "EvaluationResult",
    "EvaluationStrategy",
    "check",
    "check_closure",
    "evaluate",
    "propagate",
]
