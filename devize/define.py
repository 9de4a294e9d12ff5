"""The ``define`` meta-type: declaring and extending visualization types."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from .errors import ExtensionError, ImplementationContractError, PropertyValidationError
from .registry import Registry
from .renderable import EmptyRenderable, Renderable
from .types import Computed, PropertySchema, Static, TypeDefinition

logger = logging.getLogger(__name__)


def _evaluate_template(template: Any, props: Mapping[str, Any]) -> Any:
    if isinstance(template, Computed):
        return template.fn(props)
    if isinstance(template, Static):
        return template.value
    if isinstance(template, Mapping):
        return {key: _evaluate_template(value, props) for key, value in template.items()}
    if isinstance(template, list):
        return [_evaluate_template(value, props) for value in template]
    return template


def _as_function(name: str, implementation: Any) -> Callable[..., Any]:
    """Turn a template mapping into an implementation function."""

    if callable(implementation):
        return implementation
    if isinstance(implementation, Mapping):
        template = dict(implementation)

        def from_template(props: Mapping[str, Any], base: Any = None) -> Any:
            spec = _evaluate_template(template, props)
            if isinstance(base, Mapping):
                return {**base, **spec}
            return spec

        from_template.__name__ = f"{name}_template"
        return from_template
    raise PropertyValidationError(
        f"implementation of '{name}' must be callable or a template mapping",
        type_name="define",
        prop="implementation",
    )


def merge_schema(
    own: Mapping[str, Any], parent: Optional[TypeDefinition]
) -> Dict[str, PropertySchema]:
    merged: Dict[str, PropertySchema] = dict(parent.properties) if parent is not None else {}
    for name, schema in own.items():
        merged[name] = PropertySchema.coerce(name, schema)
    return merged


def compose_implementation(
    implementation: Callable[..., Any], parent: Optional[TypeDefinition]
) -> Callable[[Dict[str, Any]], Any]:
    """Chain ``implementation`` after its parent's.

    The parent runs first on the fully defaulted properties; the child then
    receives ``(props, base_result)`` and its return value is the result.
    """

    if parent is None:
        return implementation
    parent_implementation = parent.implementation

    def composed(props: Dict[str, Any]) -> Any:
        base = parent_implementation(props)
        return implementation(props, base)

    composed.__name__ = getattr(implementation, "__name__", "composed")
    return composed


def build_type_definition(spec: Mapping[str, Any], registry: Registry) -> TypeDefinition:
    name = spec.get("name")
    if not isinstance(name, str) or not name:
        raise PropertyValidationError("define requires a non-empty string 'name'", type_name="define", prop="name")
    if "implementation" not in spec:
        raise PropertyValidationError(
            "Required property 'implementation' is missing for visualization type 'define'",
            type_name="define",
            prop="implementation",
        )

    parent: Optional[TypeDefinition] = None
    extend = spec.get("extend")
    if extend is not None:
        parent = registry.get(extend)
        if parent is None:
            raise ExtensionError(extend, name)

    try:
        properties = merge_schema(spec.get("properties") or {}, parent)
    except ValueError as exc:
        raise PropertyValidationError(str(exc), type_name="define", prop="properties") from exc

    implementation = compose_implementation(_as_function(name, spec["implementation"]), parent)
    validate = spec.get("validate") or (parent.validate if parent else None)
    generate_constraints = spec.get("generate_constraints") or (parent.generate_constraints if parent else None)

    definition = TypeDefinition(
        name=name,
        properties=properties,
        implementation=implementation,
        extend=extend,
        validate=validate,
        generate_constraints=generate_constraints,
    )
    logger.info(
        "Defined type '%s'%s with required=%s optional=%s",
        name,
        f" extending '{extend}'" if extend else "",
        list(definition.required_props),
        sorted(definition.optional_props),
    )
    return definition


def _is_implementation(value: Any) -> bool:
    return callable(value) or isinstance(value, Mapping)


def define_type_spec(registry: Registry) -> Dict[str, Any]:
    """Return the define-spec that declares ``define`` itself, bound to ``registry``."""

    def define(props: Dict[str, Any]) -> Renderable:
        registry.register(build_type_definition(props, registry))
        return EmptyRenderable()

    return {
        "type": "define",
        "name": "define",
        "properties": {
            "name": {"required": True, "type": "string"},
            "properties": {"type": "object", "default": {}},
            "implementation": {"required": True, "validate": _is_implementation},
            "extend": {"type": "string"},
            "validate": {"type": "function"},
            "generate_constraints": {"type": "function"},
        },
        "implementation": define,
    }


def bootstrap_define(context) -> None:
    """Register ``define`` in ``context`` by resolving its own define-spec."""

    from .builder import resolve

    if context.registry.has("define"):
        return
    resolve(define_type_spec(context.registry), context=context)
    if not context.registry.has("define"):  # pragma: no cover - guarded by the builder
        raise ImplementationContractError("bootstrapping 'define' did not register it")


def define(spec: Mapping[str, Any], *, context=None) -> Renderable:
    """Declare a type: ``define({"name": ..., "properties": ..., "implementation": ...})``."""

    from .builder import resolve

    return resolve({**spec, "type": "define"}, context=context)
