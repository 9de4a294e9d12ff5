"""Translate declarative constraint specs into solver constraints."""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..config import get_engine_config
from .model import ConstraintKind, SolveOptions, SolveReport, Variable
from .solver_core import ConstraintSolver

logger = logging.getLogger(__name__)

ConstraintSpec = Mapping[str, Any]

PRIORITY_STRENGTHS: Dict[str, float] = {"low": 0.25, "medium": 0.5, "high": 1.0}

_LINEAR_KINDS: Dict[str, ConstraintKind] = {
    "equal": ConstraintKind.EQUAL,
    "lessEqual": ConstraintKind.LESS_EQUAL,
    "greaterEqual": ConstraintKind.GREATER_EQUAL,
    "fixed": ConstraintKind.FIXED,
    "minimize": ConstraintKind.MINIMIZE,
    "maximize": ConstraintKind.MAXIMIZE,
}


def _number(value: object) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("px"):
            text = text[:-2]
        try:
            return float(text)
        except ValueError:
            return None
    return None


def _read_dimension(container: object, *names: str) -> Optional[float]:
    for name in names:
        if isinstance(container, Mapping):
            raw = container.get(name)
        else:
            raw = getattr(container, name, None)
        number = _number(raw)
        if number is not None and number > 0:
            return number
    # ElementTree elements keep sizes as attributes
    attrib = getattr(container, "attrib", None)
    if isinstance(attrib, Mapping):
        for name in names:
            number = _number(attrib.get(name))
            if number is not None and number > 0:
                return number
    return None


def container_size(container: object = None) -> Tuple[float, float]:
    """Return ``(width, height)`` of ``container`` or the configured default size."""

    cfg = get_engine_config()
    width = height = None
    if container is not None:
        width = _read_dimension(container, "client_width", "clientWidth", "width")
        height = _read_dimension(container, "client_height", "clientHeight", "height")
    return (
        width if width is not None else float(cfg.default_container_width),
        height if height is not None else float(cfg.default_container_height),
    )


def _strength(spec: ConstraintSpec) -> float:
    if "strength" in spec:
        return float(spec["strength"])
    priority = spec.get("priority", "high")
    try:
        return PRIORITY_STRENGTHS[priority]
    except KeyError as exc:
        raise ValueError(f"unknown constraint priority '{priority}'") from exc


def _variables_for(solver: ConstraintSolver, names: Sequence[object]) -> List[Variable]:
    variables: List[Variable] = []
    for name in names:
        if isinstance(name, Variable):
            variables.append(solver.variables.setdefault(name.id, name))
            continue
        variable = solver.get_variable(str(name))
        if variable is None:
            variable = solver.create_variable(str(name))
        variables.append(variable)
    return variables


def apply_constraint_specs(
    solver: ConstraintSolver, specs: Sequence[ConstraintSpec], container: object = None
) -> ConstraintSolver:
    """Install ``specs`` into ``solver``.

    ``fitToContainer`` is interpreted natively: ``width``/``height`` variables
    are pinned to the container's client size. The linear forms name their
    variables by id; unknown ids are created on first use.
    """

    for spec in specs:
        kind = spec.get("type")
        if kind == "fitToContainer":
            width, height = container_size(spec.get("container", container))
            strength = _strength(spec)
            width_var, height_var = _variables_for(solver, ["width", "height"])
            solver.create_fixed_constraint(width_var, width, strength)
            solver.create_fixed_constraint(height_var, height, strength)
        elif kind == "variable":
            if "id" not in spec:
                raise ValueError("variable constraint spec requires an 'id'")
            existing = solver.get_variable(str(spec["id"]))
            if existing is not None:
                solver.variables.pop(existing.id)
            solver.create_variable(
                str(spec["id"]),
                spec.get("value", 0.0),
                spec.get("min", float("-inf")),
                spec.get("max", float("inf")),
            )
        elif kind in _LINEAR_KINDS:
            constraint_kind = _LINEAR_KINDS[kind]
            names = list(spec.get("variables", []))
            coefficients = list(spec.get("coefficients", [1.0] * len(names)))
            variables = _variables_for(solver, names)
            strength = _strength(spec)
            constant = float(spec.get("constant", 0.0))
            if constraint_kind is ConstraintKind.FIXED:
                if len(variables) != 1:
                    raise ValueError("fixed constraint spec takes exactly one variable")
                solver.create_fixed_constraint(variables[0], constant, strength)
            elif constraint_kind is ConstraintKind.EQUAL:
                solver.create_equal_constraint(variables, coefficients, constant, strength)
            elif constraint_kind is ConstraintKind.LESS_EQUAL:
                solver.create_less_equal_constraint(variables, coefficients, constant, strength)
            elif constraint_kind is ConstraintKind.GREATER_EQUAL:
                solver.create_greater_equal_constraint(variables, coefficients, constant, strength)
            else:
                solver.create_objective(constraint_kind, variables, coefficients, strength)
        else:
            raise ValueError(f"unsupported constraint spec type {kind!r}")
    return solver


@dataclass
class LayoutResult:
    values: Dict[str, float]
    report: SolveReport


def solve_layout(
    specs: Sequence[ConstraintSpec], container: object = None, options: Optional[SolveOptions] = None
) -> LayoutResult:
    solver = ConstraintSolver(options)
    apply_constraint_specs(solver, specs, container)
    solver.solve()
    report = solver.last_report
    assert report is not None
    logger.info(
        "Solved layout with %d variable(s), %d constraint(s): success=%s iterations=%d",
        len(solver.variables),
        len(solver.constraints),
        report.success,
        report.iterations,
    )
    return LayoutResult(values=solver.values(), report=report)


Padding = Union[float, Mapping[str, float]]


def _padding(padding: Padding) -> Dict[str, float]:
    if isinstance(padding, Mapping):
        return {side: float(padding.get(side, 0.0)) for side in ("top", "right", "bottom", "left")}
    value = float(padding)
    return {"top": value, "right": value, "bottom": value, "left": value}


def box_layout_constraints(
    solver: ConstraintSolver,
    items: Sequence[Mapping[str, Any]],
    *,
    direction: str = "horizontal",
    spacing: float = 0.0,
    padding: Padding = 0.0,
    align: str = "start",
    container_width: Optional[float] = None,
    container_height: Optional[float] = None,
) -> Dict[str, Dict[str, Variable]]:
    """Create flow-layout variables and constraints for ``items``.

    Each item is ``{"id", "width", "height"}``. Items are placed one after the
    other along the main axis, separated by ``spacing``; ``align`` positions
    them on the cross axis (``start``, ``center``, ``end`` or ``stretch``).
    Returns ``{id: {"x", "y", "width", "height"}}``.
    """

    if direction not in ("horizontal", "vertical"):
        raise ValueError(f"direction must be horizontal|vertical (got {direction!r})")
    if align not in ("start", "center", "end", "stretch"):
        raise ValueError(f"align must be start|center|end|stretch (got {align!r})")

    pad = _padding(padding)
    horizontal = direction == "horizontal"
    main_pos, cross_pos = ("x", "y") if horizontal else ("y", "x")
    main_size, cross_size = ("width", "height") if horizontal else ("height", "width")
    main_start = pad["left"] if horizontal else pad["top"]
    cross_start = pad["top"] if horizontal else pad["left"]
    cross_end = pad["bottom"] if horizontal else pad["right"]
    cross_extent = container_height if horizontal else container_width

    result: Dict[str, Dict[str, Variable]] = {}
    previous: Optional[Dict[str, Variable]] = None
    for item in items:
        item_id = str(item["id"])
        entry = {
            "x": solver.create_variable(f"{item_id}_x", 0.0),
            "y": solver.create_variable(f"{item_id}_y", 0.0),
            "width": solver.create_variable(f"{item_id}_width", float(item.get("width", 0.0)), 0.0),
            "height": solver.create_variable(f"{item_id}_height", float(item.get("height", 0.0)), 0.0),
        }
        stretched = align == "stretch" and cross_extent is not None
        for size in ("width", "height"):
            if stretched and size == cross_size:
                continue
            solver.create_fixed_constraint(entry[size], float(item.get(size, 0.0)), 0.5)

        if previous is None:
            solver.create_fixed_constraint(entry[main_pos], main_start)
        else:
            # previous.pos + previous.size - pos == -spacing
            solver.create_equal_constraint(
                [previous[main_pos], previous[main_size], entry[main_pos]],
                [1.0, 1.0, -1.0],
                -float(spacing),
            )

        if align == "start" or cross_extent is None:
            solver.create_fixed_constraint(entry[cross_pos], cross_start)
        elif align == "end":
            solver.create_equal_constraint(
                [entry[cross_pos], entry[cross_size]], [1.0, 1.0], float(cross_extent) - cross_end
            )
        elif align == "center":
            available = float(cross_extent) - cross_start - cross_end
            solver.create_equal_constraint(
                [entry[cross_pos], entry[cross_size]], [2.0, 1.0], available + 2.0 * cross_start
            )
        else:
            solver.create_fixed_constraint(entry[cross_pos], cross_start)
            solver.create_equal_constraint(
                [entry[cross_size]], [1.0], float(cross_extent) - cross_start - cross_end
            )

        result[item_id] = entry
        previous = entry

    logger.debug("Created box layout for %d item(s) direction=%s align=%s", len(result), direction, align)
    return result


__all__ = [
    "ConstraintSpec",
    "LayoutResult",
    "PRIORITY_STRENGTHS",
    "apply_constraint_specs",
    "box_layout_constraints",
    "container_size",
    "solve_layout",
]
