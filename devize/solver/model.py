"""Core data structures for the constraint solver."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

import numpy as np

DEFAULT_EPSILON = 1e-6


class ConstraintKind(Enum):
    EQUAL = "equal"
    LESS_EQUAL = "less_equal"
    GREATER_EQUAL = "greater_equal"
    FIXED = "fixed"
    MINIMIZE = "minimize"
    MAXIMIZE = "maximize"


OBJECTIVE_KINDS = frozenset({ConstraintKind.MINIMIZE, ConstraintKind.MAXIMIZE})


@dataclass(eq=False)
class Variable:
    """Numeric unknown bounded to ``[min, max]``."""

    id: str
    value: float = 0.0
    min: float = -math.inf
    max: float = math.inf

    def __post_init__(self) -> None:
        self.value = float(self.value)
        self.min = float(self.min)
        self.max = float(self.max)
        if self.min > self.max:
            raise ValueError(f"Variable '{self.id}' has min {self.min} greater than max {self.max}")

    def clamp(self, value: float) -> float:
        return min(self.max, max(self.min, value))


@dataclass(eq=False)
class Constraint:
    """Linear relation ``sum(coefficients * variables) <kind> constant``."""

    kind: ConstraintKind
    variables: List[Variable]
    coefficients: List[float]
    constant: float = 0.0
    strength: float = 1.0

    def __post_init__(self) -> None:
        self.variables = list(self.variables)
        self.coefficients = [float(c) for c in self.coefficients]
        if len(self.variables) != len(self.coefficients):
            raise ValueError("Number of variables must match number of coefficients")
        if not 0.0 <= self.strength <= 1.0:
            raise ValueError(f"Constraint strength must be within [0, 1], got {self.strength}")
        if self.kind is ConstraintKind.FIXED and len(self.variables) != 1:
            raise ValueError("FIXED constraints take exactly one variable")
        self.constant = float(self.constant)
        self.strength = float(self.strength)

    @property
    def is_objective(self) -> bool:
        return self.kind in OBJECTIVE_KINDS

    def evaluate(self) -> float:
        if not self.variables:
            return 0.0
        values = np.fromiter((var.value for var in self.variables), dtype=float, count=len(self.variables))
        return float(np.dot(values, np.asarray(self.coefficients, dtype=float)))

    def violation(self, epsilon: float = DEFAULT_EPSILON) -> float:
        """Return how far the constraint is from holding; ``0.0`` when satisfied."""

        if self.is_objective:
            return 0.0
        if self.kind is ConstraintKind.FIXED:
            gap = abs(self.variables[0].value - self.constant)
            return 0.0 if gap < epsilon else gap
        value = self.evaluate()
        if self.kind is ConstraintKind.EQUAL:
            gap = abs(value - self.constant)
            return 0.0 if gap < epsilon else gap
        if self.kind is ConstraintKind.LESS_EQUAL:
            return max(0.0, value - self.constant)
        return max(0.0, self.constant - value)

    def is_satisfied(self, epsilon: float = DEFAULT_EPSILON) -> bool:
        return self.violation(epsilon) == 0.0

    def describe(self) -> str:
        terms = " + ".join(f"{coeff:g}*{var.id}" for var, coeff in zip(self.variables, self.coefficients))
        ops = {
            ConstraintKind.EQUAL: "==",
            ConstraintKind.LESS_EQUAL: "<=",
            ConstraintKind.GREATER_EQUAL: ">=",
            ConstraintKind.FIXED: "==",
        }
        if self.is_objective:
            return f"{self.kind.value} {terms or '0'}"
        return f"{terms or '0'} {ops[self.kind]} {self.constant:g} (strength={self.strength:g})"


@dataclass
class SolveOptions:
    """Per-solver overrides; ``None`` falls back to :class:`devize.config.EngineConfig`."""

    max_iterations: Optional[int] = None
    epsilon: Optional[float] = None
    refine_tol: float = 1e-9
    refine_max_nfev: Optional[int] = None


@dataclass
class SolveReport:
    success: bool
    iterations: int
    max_violation: float
    violations: List[Dict[str, object]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    method: str = "relaxation"


def violation_breakdown(constraints: Sequence[Constraint], epsilon: float) -> List[Dict[str, object]]:
    breakdown: List[Dict[str, object]] = []
    for constraint in constraints:
        amount = constraint.violation(epsilon)
        if amount:
            breakdown.append(
                {
                    "constraint": constraint.describe(),
                    "kind": constraint.kind.value,
                    "strength": constraint.strength,
                    "violation": amount,
                }
            )
    return breakdown


__all__ = [
    "DEFAULT_EPSILON",
    "Constraint",
    "ConstraintKind",
    "OBJECTIVE_KINDS",
    "SolveOptions",
    "SolveReport",
    "Variable",
    "violation_breakdown",
]
