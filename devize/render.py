"""Render dispatcher: binds a resolved visualization to an SVG or Canvas target."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Any, Mapping, Optional

from .builder import resolve
from .canvas import canvas_context
from .context import EngineContext
from .errors import ImplementationContractError
from .renderable import Renderable, RenderedResult, check_renderable_contract
from .solver import container_size
from .svg import ensure_svg, is_svg_root

logger = logging.getLogger(__name__)


def is_canvas(target: Any) -> bool:
    return canvas_context(target) is not None


def _next_spec(viz: Renderable, partial: Mapping[str, Any]) -> dict:
    if not isinstance(viz.spec.get("type"), str):
        raise ImplementationContractError(f"{type(viz).__name__} has no spec to rebuild from")
    return {**viz.spec, **dict(partial)}


def _render_svg(viz: Renderable, svg: ET.Element, host: Any, context: Optional[EngineContext]) -> RenderedResult:
    element = viz.render_to_svg(svg)

    def cleanup() -> None:
        if element is not None and element in list(svg):
            svg.remove(element)

    def update(partial: Mapping[str, Any]) -> RenderedResult:
        spec = _next_spec(viz, partial)
        children = list(svg)
        index = children.index(element) if element in children else len(children)
        cleanup()
        result = render_viz(spec, host, context=context)
        new_element = result.element
        if new_element is not None and new_element in list(svg):
            svg.remove(new_element)
            svg.insert(index, new_element)
        return result

    return RenderedResult(element=element, update=update, cleanup=cleanup)


def _render_canvas(viz: Renderable, host: Any, context: Optional[EngineContext]) -> RenderedResult:
    ctx = canvas_context(host)
    width, height = container_size(host)

    def clear() -> None:
        ctx.clear_rect(0, 0, width, height)

    clear()
    if not viz.render_to_canvas(ctx):
        logger.warning("Renderable '%s' reported a failed canvas draw", viz.renderable_type)

    def update(partial: Mapping[str, Any]) -> RenderedResult:
        spec = _next_spec(viz, partial)
        return render_viz(spec, host, context=context)

    return RenderedResult(element=host, update=update, cleanup=clear)


def render_viz(viz: Any, container: Any, *, context: Optional[EngineContext] = None) -> RenderedResult:
    """Resolve ``viz`` and draw it into ``container``.

    ``container`` is an SVG root element, a canvas (or its 2D context), or any
    other element, in which case a full-size ``<svg>`` child is used.
    """

    resolved = resolve(viz, container=container, context=context)
    check_renderable_contract(resolved)
    context = context or resolved.context

    if is_svg_root(container):
        logger.debug("Rendering '%s' to SVG", resolved.renderable_type)
        return _render_svg(resolved, container, container, context)
    if is_canvas(container):
        logger.debug("Rendering '%s' to canvas", resolved.renderable_type)
        return _render_canvas(resolved, container, context)
    if isinstance(container, ET.Element):
        logger.debug("Rendering '%s' into an <svg> inside <%s>", resolved.renderable_type, container.tag)
        return _render_svg(resolved, ensure_svg(container), container, context)
    raise TypeError(f"Unsupported render target: {type(container).__name__}")


__all__ = ["is_canvas", "render_viz"]
