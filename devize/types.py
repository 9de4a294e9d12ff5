"""Data model shared by the registry, ``define`` and the builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

VisualizationSpec = Dict[str, Any]
Implementation = Callable[..., Any]
SpecValidator = Callable[[Mapping[str, Any]], Any]
ConstraintGenerator = Callable[[Mapping[str, Any], Mapping[str, Any]], List[Mapping[str, Any]]]

TYPE_TAGS = ("number", "string", "boolean", "array", "object", "function")


class _Missing:
    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@dataclass(frozen=True)
class Static:
    """A property value used exactly as given."""

    value: Any


@dataclass(frozen=True)
class Computed:
    """A property value computed from the other evaluated properties.

    ``fn`` receives a read-only mapping of the properties evaluated so far.
    """

    fn: Callable[[Mapping[str, Any]], Any]


@dataclass(frozen=True)
class PropertySchema:
    required: bool = False
    default: Any = MISSING
    type: Optional[str] = None
    validate: Optional[Callable[[Any], Any]] = None

    def __post_init__(self) -> None:
        if self.type is not None and self.type not in TYPE_TAGS:
            raise ValueError(f"unknown property type tag {self.type!r}; expected one of {', '.join(TYPE_TAGS)}")

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    @classmethod
    def coerce(cls, name: str, value: Any) -> "PropertySchema":
        if isinstance(value, PropertySchema):
            return value
        if not isinstance(value, Mapping):
            raise ValueError(f"property '{name}' schema must be a mapping, got {type(value).__name__}")
        unknown = set(value) - {"required", "default", "type", "validate"}
        if unknown:
            raise ValueError(f"property '{name}' schema has unknown keys: {', '.join(sorted(unknown))}")
        return cls(
            required=bool(value.get("required", False)),
            default=value.get("default", MISSING),
            type=value.get("type"),
            validate=value.get("validate"),
        )


@dataclass(frozen=True)
class TypeDefinition:
    """A registered visualization type."""

    name: str
    properties: Mapping[str, PropertySchema]
    implementation: Implementation
    extend: Optional[str] = None
    validate: Optional[SpecValidator] = None
    generate_constraints: Optional[ConstraintGenerator] = None
    required_props: Tuple[str, ...] = field(init=False)
    optional_props: Mapping[str, Any] = field(init=False)

    def __post_init__(self) -> None:
        schema = {name: PropertySchema.coerce(name, value) for name, value in self.properties.items()}
        object.__setattr__(self, "properties", MappingProxyType(schema))
        object.__setattr__(
            self, "required_props", tuple(name for name, prop in schema.items() if prop.required)
        )
        object.__setattr__(
            self,
            "optional_props",
            MappingProxyType({name: prop.default for name, prop in schema.items() if prop.has_default}),
        )


__all__ = [
    "Computed",
    "ConstraintGenerator",
    "Implementation",
    "MISSING",
    "PropertySchema",
    "SpecValidator",
    "Static",
    "TYPE_TAGS",
    "TypeDefinition",
    "VisualizationSpec",
]
