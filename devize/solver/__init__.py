"""Constraint solver façade used for layout and container-fit sizing."""

from __future__ import annotations

import logging

from .layout import (
    ConstraintSpec,
    LayoutResult,
    PRIORITY_STRENGTHS,
    apply_constraint_specs,
    box_layout_constraints,
    container_size,
    solve_layout,
)
from .model import (
    Constraint,
    ConstraintKind,
    SolveOptions,
    SolveReport,
    Variable,
)
from .solver_core import ConstraintSolver

logger = logging.getLogger(__name__)

if not logging.getLogger().handlers:  # pragma: no cover - depends on host application
    logging.basicConfig(level=logging.INFO)


__all__ = [
    "Constraint",
    "ConstraintKind",
    "ConstraintSolver",
    "ConstraintSpec",
    "LayoutResult",
    "PRIORITY_STRENGTHS",
    "SolveOptions",
    "SolveReport",
    "Variable",
    "apply_constraint_specs",
    "box_layout_constraints",
    "container_size",
    "solve_layout",
]
