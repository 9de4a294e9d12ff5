"""Built-in primitive types registered into every default context."""

from __future__ import annotations

import logging

from .containers import GroupLeaf, LayerLeaf, container_specs
from .shapes import (
    CircleShape,
    LineShape,
    PathShape,
    RectShape,
    Shape,
    TextShape,
    parse_path,
    shape_specs,
)

logger = logging.getLogger(__name__)


def register_primitives(context) -> None:
    """Define the shapes and containers in ``context`` through ``define``."""

    from ..define import define

    # layer extends group, so group must be defined first
    specs = shape_specs(context) + container_specs(context)
    for spec in specs:
        define(spec, context=context)
    logger.debug("Registered %d primitive type(s)", len(specs))


__all__ = [
    "CircleShape",
    "GroupLeaf",
    "LayerLeaf",
    "LineShape",
    "PathShape",
    "RectShape",
    "Shape",
    "TextShape",
    "parse_path",
    "register_primitives",
]
