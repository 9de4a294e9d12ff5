"""Exception taxonomy raised while resolving visualization specs."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple


class DevizeError(Exception):
    """Base class for every error raised by the composition engine."""


class SpecShapeError(DevizeError, ValueError):
    """Raised for ``None`` input or a spec without a usable ``type``."""


class UnknownTypeError(DevizeError):
    """Raised when a spec names a type that is not registered."""

    def __init__(self, type_name: str):
        super().__init__(f"Unknown visualization type: {type_name}")
        self.type_name = type_name


class PropertyValidationError(DevizeError, ValueError):
    """Raised when a property is missing, mistyped or fails a validator."""

    def __init__(self, message: str, *, type_name: Optional[str] = None, prop: Optional[str] = None):
        super().__init__(message)
        self.type_name = type_name
        self.prop = prop


class ExtensionError(DevizeError):
    """Raised when ``extend`` names a type that does not exist."""

    def __init__(self, parent: str, child: Optional[str] = None):
        super().__init__(f"Type '{parent}' does not exist and cannot be extended")
        self.parent = parent
        self.child = child


class RecursionGuardError(DevizeError, RecursionError):
    """Raised when decomposition would loop forever."""

    def __init__(self, message: str, chain: Sequence[str] = ()):
        super().__init__(message)
        self.chain: Tuple[str, ...] = tuple(chain)


class ImplementationContractError(DevizeError, TypeError):
    """Raised when an implementation or renderable breaks its contract."""


__all__ = [
    "DevizeError",
    "SpecShapeError",
    "UnknownTypeError",
    "PropertyValidationError",
    "ExtensionError",
    "RecursionGuardError",
    "ImplementationContractError",
]
