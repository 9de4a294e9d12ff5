from __future__ import annotations

import copy
import numbers
from collections.abc import Mapping as MappingABC
from types import MappingProxyType
from typing import Any, Dict, Mapping

from .errors import DevizeError, PropertyValidationError
from .types import Computed, Static, TypeDefinition


def matches_type_tag(value: Any, tag: str) -> bool:
    if tag == "number":
        return isinstance(value, numbers.Real) and not isinstance(value, bool)
    if tag == "string":
        return isinstance(value, str)
    if tag == "boolean":
        return isinstance(value, bool)
    if tag == "array":
        return isinstance(value, (list, tuple))
    if tag == "object":
        return isinstance(value, MappingABC)
    if tag == "function":
        return callable(value)
    raise ValueError(f"unknown property type tag {tag!r}")


def apply_defaults(spec: Mapping[str, Any], definition: TypeDefinition) -> Dict[str, Any]:
    """Return a new dict with every missing optional property set to a copy of its default."""

    result = dict(spec)
    for name, default in definition.optional_props.items():
        if name not in result:
            result[name] = copy.deepcopy(default) if isinstance(default, (list, dict, set)) else default
    return result


def evaluate_properties(props: Mapping[str, Any], type_name: str) -> Dict[str, Any]:
    """Unwrap :class:`Static` values and evaluate :class:`Computed` ones in property order."""

    evaluated: Dict[str, Any] = {}
    pending = []
    for name, value in props.items():
        if isinstance(value, Static):
            evaluated[name] = value.value
        elif isinstance(value, Computed):
            pending.append(name)
        else:
            evaluated[name] = value

    for name in pending:
        try:
            evaluated[name] = props[name].fn(MappingProxyType(evaluated))
        except DevizeError:
            raise
        except Exception as exc:
            raise PropertyValidationError(
                f"Computed property '{name}' for visualization type '{type_name}' failed: {exc}",
                type_name=type_name,
                prop=name,
            ) from exc
    return {name: evaluated[name] for name in props}


def validate_properties(props: Mapping[str, Any], definition: TypeDefinition) -> None:
    """Run the validation chain; the first failing check raises."""

    type_name = definition.name
    for name in definition.required_props:
        if name not in props:
            raise PropertyValidationError(
                f"Required property '{name}' is missing for visualization type '{type_name}'",
                type_name=type_name,
                prop=name,
            )

    for name, schema in definition.properties.items():
        if schema.type is None or name not in props:
            continue
        value = props[name]
        if value is None and not schema.required:
            continue
        if not matches_type_tag(value, schema.type):
            raise PropertyValidationError(
                f"Property '{name}' for visualization type '{type_name}' should be of type '{schema.type}'",
                type_name=type_name,
                prop=name,
            )

    for name, schema in definition.properties.items():
        if schema.validate is None or name not in props:
            continue
        try:
            ok = schema.validate(props[name])
        except DevizeError:
            raise
        except Exception as exc:
            raise PropertyValidationError(
                f"Validation error for property '{name}': {exc}", type_name=type_name, prop=name
            ) from exc
        if not ok:
            raise PropertyValidationError(
                f"{name} failed validation for visualization type '{type_name}'",
                type_name=type_name,
                prop=name,
            )

    if definition.validate is not None:
        try:
            outcome = definition.validate(props)
        except DevizeError:
            raise
        except Exception as exc:
            raise PropertyValidationError(
                f"Visualization type '{type_name}' rejected spec: {exc}", type_name=type_name
            ) from exc
        if outcome is False:
            raise PropertyValidationError(f"{type_name} failed validation", type_name=type_name)
