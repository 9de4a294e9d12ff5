"""Spec resolution: defaults, validation, layout and recursive decomposition."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from .config import get_engine_config
from .context import EngineContext, get_context
from .errors import (
    ImplementationContractError,
    PropertyValidationError,
    RecursionGuardError,
    SpecShapeError,
    UnknownTypeError,
)
from .renderable import EmptyRenderable, Renderable, Visualization, check_renderable_contract
from .solver import solve_layout
from .types import TypeDefinition
from .validate import apply_defaults, evaluate_properties, validate_properties

logger = logging.getLogger(__name__)

DATA_REF_PREFIX = "@"


def _check_shape(spec: Any) -> str:
    if spec is None:
        raise SpecShapeError("Visualization specification cannot be None")
    if not isinstance(spec, Mapping):
        raise SpecShapeError(
            f"Visualization specification must be a mapping or a renderable, got {type(spec).__name__}"
        )
    type_name = spec.get("type")
    if not isinstance(type_name, str) or not type_name:
        raise SpecShapeError("Visualization specification must have a type")
    return type_name


def _resolve_data_ref(props: Dict[str, Any], context: EngineContext, type_name: str) -> None:
    data = props.get("data")
    if not (isinstance(data, str) and data.startswith(DATA_REF_PREFIX)):
        return
    name = data[len(DATA_REF_PREFIX):]
    if name not in context.data:
        raise PropertyValidationError(
            f"Data '{name}' referenced by visualization type '{type_name}' is not registered",
            type_name=type_name,
            prop="data",
        )
    props["data"] = context.data[name]


def prepare_properties(
    spec: Mapping[str, Any], definition: TypeDefinition, context: EngineContext
) -> Dict[str, Any]:
    """Defaults, value evaluation, data references and validation, in that order."""

    props = apply_defaults(spec, definition)
    props = evaluate_properties(props, definition.name)
    _resolve_data_ref(props, context, definition.name)
    validate_properties(props, definition)
    return props


def _solve_layout(
    props: Dict[str, Any], definition: TypeDefinition, container: Any
) -> None:
    if definition.generate_constraints is None or "layout" in props:
        return
    specs = definition.generate_constraints(props, {"container": container, "type": definition.name})
    if not specs:
        return
    result = solve_layout(specs, container)
    if not result.report.success:
        logger.warning(
            "Layout for '%s' did not converge (max violation %.3e); using last-pass values",
            definition.name,
            result.report.max_violation,
        )
    props["layout"] = result.values


def _bootstrap_define(spec: Mapping[str, Any], context: EngineContext) -> Renderable:
    from .define import build_type_definition

    definition = build_type_definition(spec, context.registry)
    context.registry.register(definition)
    logger.info("Bootstrapped the 'define' type")
    return EmptyRenderable(context=context)


def _resolve(
    spec: Any, context: EngineContext, container: Any, chain: Tuple[str, ...], start: int = 0
) -> Renderable:
    # chain[:start] belongs to enclosing containers; only chain[start:] can cycle
    type_name = _check_shape(spec)
    definition = context.registry.get(type_name)
    if definition is None:
        if type_name == "define" and spec.get("name") == "define":
            return _bootstrap_define(spec, context)
        raise UnknownTypeError(type_name)

    max_depth = get_engine_config().max_depth
    if len(chain) >= max_depth:
        raise RecursionGuardError(
            f"Decomposition of '{chain[0]}' exceeded the maximum depth of {max_depth}",
            chain + (type_name,),
        )

    props = prepare_properties(spec, definition, context)
    _solve_layout(props, definition, container)

    logger.debug("Decomposing '%s' (depth %d)", type_name, len(chain))
    context.resolution_stack.append((chain + (type_name,), container))
    try:
        result = definition.implementation(props)
    finally:
        context.resolution_stack.pop()

    if isinstance(result, Renderable):
        check_renderable_contract(result)
        leaf = result
    elif isinstance(result, Mapping) and isinstance(result.get("type"), str):
        next_type = result["type"]
        if next_type == type_name:
            raise RecursionGuardError(
                f"Implementation of '{type_name}' returned a spec of its own type; "
                f"resolving it would be an infinite loop",
                chain + (type_name, next_type),
            )
        segment = chain[start:]
        if next_type in segment:
            cycle = segment[segment.index(next_type):] + (type_name, next_type)
            raise RecursionGuardError(
                f"Decomposition cycle detected (infinite loop): {' -> '.join(cycle)}",
                chain + (type_name, next_type),
            )
        leaf = _resolve(result, context, container, chain + (type_name,), start)
    else:
        raise ImplementationContractError(
            f"Implementation of '{type_name}' returned {type(result).__name__}; "
            f"expected a spec with a 'type' or a renderable"
        )

    return Visualization(spec, props, leaf, context)


def resolve(
    spec: Any, *, container: Any = None, context: Optional[EngineContext] = None
) -> Renderable:
    """Resolve ``spec`` into a renderable; renderables are returned unchanged."""

    if isinstance(spec, Renderable):
        return spec
    return _resolve(spec, context or get_context(), container, ())


build_viz = resolve


def resolve_child(spec: Any, *, context: EngineContext) -> Renderable:
    """Resolve a nested spec from inside an implementation.

    The child continues the decomposition chain, so ``max_depth`` bounds
    nesting through children, and it sees the render container of the
    implementation currently running in ``context``. A child may repeat an
    ancestor's type (a group inside a group).
    """

    if isinstance(spec, Renderable):
        return spec
    if not context.resolution_stack:
        return _resolve(spec, context, None, ())
    chain, container = context.resolution_stack[-1]
    return _resolve(spec, context, container, chain, len(chain))


def update_viz(renderable: Renderable, partial: Mapping[str, Any]) -> Renderable:
    return renderable.update(partial)
