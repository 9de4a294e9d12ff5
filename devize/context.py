"""Process-wide engine context.

The context owns the type :class:`~devize.registry.Registry` and the named
data store. Lifecycle:

* :func:`get_context` returns the installed context, creating and
  bootstrapping one (``define`` plus the primitives) on first use;
* :func:`set_context` installs a context built elsewhere;
* :func:`reset_context` drops the installed context; tests use it for
  isolation, production code never needs it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .registry import Registry

logger = logging.getLogger(__name__)

# (decomposition chain, render container) of each implementation being run
ResolutionFrame = Tuple[Tuple[str, ...], Any]


@dataclass
class EngineContext:
    registry: Registry = field(default_factory=Registry)
    data: Dict[str, Any] = field(default_factory=dict)
    resolution_stack: List[ResolutionFrame] = field(default_factory=list, repr=False)

    def register_data(self, name: str, data: Any) -> None:
        if name in self.data:
            logger.info("Replacing registered data '%s'", name)
        self.data[name] = data

    def get_data(self, name: str) -> Any:
        return self.data.get(name)


_CONTEXT: Optional[EngineContext] = None


def create_context(*, primitives: bool = True) -> EngineContext:
    """Build a fresh context with ``define`` (and optionally the primitives) registered."""

    from .define import bootstrap_define
    from .primitives import register_primitives

    context = EngineContext()
    bootstrap_define(context)
    if primitives:
        register_primitives(context)
    logger.info("Created engine context with %d type(s)", len(context.registry))
    return context


def get_context() -> EngineContext:
    global _CONTEXT
    if _CONTEXT is None:
        _CONTEXT = create_context()
    return _CONTEXT


def set_context(context: EngineContext) -> None:
    global _CONTEXT
    _CONTEXT = context


def reset_context() -> None:
    global _CONTEXT
    _CONTEXT = None


def get_registry() -> Registry:
    return get_context().registry


def register_data(name: str, data: Any) -> None:
    get_context().register_data(name, data)


def get_data(name: str) -> Any:
    return get_context().get_data(name)
