"""Name -> :class:`TypeDefinition` store."""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional

from .types import TypeDefinition

logger = logging.getLogger(__name__)


class Registry:
    """Holds registered visualization types.

    Registering a name twice replaces the earlier definition and logs a
    warning; the last writer wins.
    """

    def __init__(self) -> None:
        self._types: Dict[str, TypeDefinition] = {}

    def register(self, definition: TypeDefinition) -> None:
        if not isinstance(definition, TypeDefinition):
            raise TypeError(f"expected a TypeDefinition, got {type(definition).__name__}")
        if not definition.name or not isinstance(definition.name, str):
            raise ValueError("type definitions need a non-empty string name")
        if definition.name in self._types:
            logger.warning("Visualization type '%s' is already registered. It will be overwritten.", definition.name)
        self._types[definition.name] = definition
        logger.debug("Registered visualization type '%s' (%d total)", definition.name, len(self._types))

    def has(self, name: str) -> bool:
        return name in self._types

    def get(self, name: str) -> Optional[TypeDefinition]:
        return self._types.get(name)

    def all(self) -> List[TypeDefinition]:
        return list(self._types.values())

    def names(self) -> List[str]:
        return list(self._types)

    def remove(self, name: str) -> bool:
        if name not in self._types:
            return False
        del self._types[name]
        logger.debug("Removed visualization type '%s'", name)
        return True

    def clear(self) -> None:
        """Drop every definition; meant for test isolation only."""

        self._types.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __repr__(self) -> str:
        return f"Registry({', '.join(sorted(self._types))})"
