from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Sequence

import numpy as np
from scipy.optimize import least_squares

from ..config import get_engine_config
from ..logging_utils import apply_debug_logging
from .model import (
    Constraint,
    ConstraintKind,
    OBJECTIVE_KINDS,
    SolveOptions,
    SolveReport,
    Variable,
    violation_breakdown,
)

logger = logging.getLogger(__name__)


class ConstraintSolver:
    """Priority-ordered relaxation over linear constraints.

    Constraints are visited strongest first; every pass nudges the variables of
    each unsatisfied constraint towards feasibility, clamped to their bounds.
    This is a best-effort heuristic: :meth:`solve` may return ``False`` and the
    variables then hold the values of the last pass.
    """

    def __init__(self, options: Optional[SolveOptions] = None):
        self.options = options or SolveOptions()
        self.variables: Dict[str, Variable] = {}
        self.constraints: List[Constraint] = []
        self.last_report: Optional[SolveReport] = None

    # -- variables -----------------------------------------------------

    def add_variable(self, variable: Variable) -> Variable:
        self.variables[variable.id] = variable
        return variable

    def create_variable(
        self, id: str, value: float = 0.0, min: float = -math.inf, max: float = math.inf
    ) -> Variable:
        return self.add_variable(Variable(id, value, min, max))

    def get_variable(self, id: str) -> Optional[Variable]:
        return self.variables.get(id)

    def get_variable_value(self, id: str) -> Optional[float]:
        variable = self.variables.get(id)
        return None if variable is None else variable.value

    def values(self) -> Dict[str, float]:
        return {name: var.value for name, var in self.variables.items()}

    # -- constraints ---------------------------------------------------

    def add_constraint(self, constraint: Constraint) -> Constraint:
        for variable in constraint.variables:
            self.variables.setdefault(variable.id, variable)
        self.constraints.append(constraint)
        return constraint

    def create_equal_constraint(
        self, variables: Sequence[Variable], coefficients: Sequence[float], constant: float, strength: float = 1.0
    ) -> Constraint:
        return self.add_constraint(
            Constraint(ConstraintKind.EQUAL, list(variables), list(coefficients), constant, strength)
        )

    def create_less_equal_constraint(
        self, variables: Sequence[Variable], coefficients: Sequence[float], constant: float, strength: float = 1.0
    ) -> Constraint:
        return self.add_constraint(
            Constraint(ConstraintKind.LESS_EQUAL, list(variables), list(coefficients), constant, strength)
        )

    def create_greater_equal_constraint(
        self, variables: Sequence[Variable], coefficients: Sequence[float], constant: float, strength: float = 1.0
    ) -> Constraint:
        return self.add_constraint(
            Constraint(ConstraintKind.GREATER_EQUAL, list(variables), list(coefficients), constant, strength)
        )

    def create_fixed_constraint(self, variable: Variable, constant: float, strength: float = 1.0) -> Constraint:
        return self.add_constraint(Constraint(ConstraintKind.FIXED, [variable], [1.0], constant, strength))

    def create_objective(
        self, kind: ConstraintKind, variables: Sequence[Variable], coefficients: Sequence[float], strength: float = 1.0
    ) -> Constraint:
        if kind not in OBJECTIVE_KINDS:
            raise ValueError(f"{kind} is not an objective kind")
        return self.add_constraint(Constraint(kind, list(variables), list(coefficients), 0.0, strength))

    # -- solving -------------------------------------------------------

    def _settings(self):
        cfg = get_engine_config()
        iterations = self.options.max_iterations if self.options.max_iterations is not None else cfg.solver_max_iterations
        epsilon = self.options.epsilon if self.options.epsilon is not None else cfg.solver_epsilon
        return max(0, int(iterations)), float(epsilon), cfg.refine_on_failure

    def solve(self) -> bool:
        max_iterations, epsilon, refine_on_failure = self._settings()
        ordered = sorted(self.constraints, key=lambda c: c.strength, reverse=True)

        iterations = 0
        satisfied = not any(c.violation(epsilon) for c in ordered)
        while not satisfied and iterations < max_iterations:
            satisfied = True
            for constraint in ordered:
                if not constraint.is_satisfied(epsilon):
                    satisfied = False
                    _adjust(constraint, epsilon)
            iterations += 1

        breakdown = violation_breakdown(ordered, epsilon)
        max_violation = max((float(entry["violation"]) for entry in breakdown), default=0.0)
        report = SolveReport(
            success=satisfied,
            iterations=iterations,
            max_violation=max_violation,
            violations=breakdown,
        )
        self.last_report = report

        if not satisfied:
            message = (
                f"relaxation did not converge within {max_iterations} passes; "
                f"max violation {max_violation:.3e}; keeping last-pass values"
            )
            report.warnings.append(message)
            logger.warning("%s (%d constraint(s) unsatisfied)", message, len(breakdown))
            if refine_on_failure:
                return self.refine()
        else:
            logger.debug("Relaxation converged after %d pass(es)", iterations)
        return satisfied

    def refine(self) -> bool:
        """Run a bounded, strength-weighted least-squares pass from the current values."""

        _, epsilon, _ = self._settings()
        free = [var for var in self.variables.values() if var.min < var.max]
        active = [c for c in self.constraints if not c.is_objective and c.strength > 0.0]
        warnings: List[str] = list(self.last_report.warnings) if self.last_report else []

        if free and active:
            position = {var.id: idx for idx, var in enumerate(free)}
            lower = np.array([var.min for var in free], dtype=float)
            upper = np.array([var.max for var in free], dtype=float)
            x0 = np.clip(np.array([var.value for var in free], dtype=float), lower, upper)
            weights = np.sqrt(np.array([c.strength for c in active], dtype=float))

            def fun(x: np.ndarray) -> np.ndarray:
                out = np.empty(len(active), dtype=float)
                for row, constraint in enumerate(active):
                    total = 0.0
                    for var, coeff in zip(constraint.variables, constraint.coefficients):
                        idx = position.get(var.id)
                        total += coeff * (x[idx] if idx is not None else var.value)
                    if constraint.kind is ConstraintKind.LESS_EQUAL:
                        out[row] = max(0.0, total - constraint.constant)
                    elif constraint.kind is ConstraintKind.GREATER_EQUAL:
                        out[row] = max(0.0, constraint.constant - total)
                    else:
                        out[row] = total - constraint.constant
                return weights * out

            result = least_squares(
                fun,
                x0,
                bounds=(lower, upper),
                method="trf",
                ftol=self.options.refine_tol,
                xtol=self.options.refine_tol,
                gtol=self.options.refine_tol,
                max_nfev=self.options.refine_max_nfev,
            )
            for var, value in zip(free, result.x):
                var.value = var.clamp(float(value))
            logger.debug("Refinement finished status=%s nfev=%s", result.status, result.nfev)

        breakdown = violation_breakdown(self.constraints, epsilon)
        success = not breakdown
        max_violation = max((float(entry["violation"]) for entry in breakdown), default=0.0)
        if not success:
            warnings.append(f"refinement left max violation {max_violation:.3e}")
        self.last_report = SolveReport(
            success=success,
            iterations=self.last_report.iterations if self.last_report else 0,
            max_violation=max_violation,
            violations=breakdown,
            warnings=warnings,
            method="refine",
        )
        return success

    def reset(self) -> None:
        for variable in self.variables.values():
            variable.value = variable.clamp(0.0)
        self.last_report = None

    def clear(self) -> None:
        self.constraints = []
        self.variables.clear()
        self.last_report = None


def _needs_increase(coefficient: float, difference: float) -> bool:
    return (coefficient > 0) == (difference > 0)


def _can_move(variable: Variable, increase: bool) -> bool:
    return variable.value < variable.max if increase else variable.value > variable.min


def _distribute(constraint: Constraint, difference: float, candidates: List[int]) -> None:
    if not candidates:
        return
    share = difference / len(candidates)
    for idx in candidates:
        variable = constraint.variables[idx]
        variable.value = variable.clamp(variable.value + share / constraint.coefficients[idx])


def _adjust(constraint: Constraint, epsilon: float) -> None:
    kind = constraint.kind
    if kind is ConstraintKind.FIXED:
        variable = constraint.variables[0]
        variable.value = variable.clamp(constraint.constant)
        return
    if kind in OBJECTIVE_KINDS:
        return

    current = constraint.evaluate()
    if kind is ConstraintKind.EQUAL:
        difference = constraint.constant - current
        if abs(difference) < epsilon:
            return
    elif kind is ConstraintKind.LESS_EQUAL:
        if current <= constraint.constant:
            return
        difference = constraint.constant - current
    else:
        if current >= constraint.constant:
            return
        difference = constraint.constant - current

    candidates = [
        idx
        for idx, (variable, coeff) in enumerate(zip(constraint.variables, constraint.coefficients))
        if coeff != 0 and _can_move(variable, _needs_increase(coeff, difference))
    ]
    _distribute(constraint, difference, candidates)


apply_debug_logging(globals(), logger=logger, skip={"_needs_increase", "_can_move"})


__all__ = ["ConstraintSolver"]
