"""Renderable base classes and the resolved-visualization wrapper."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Dict, Mapping, Optional

from .errors import ImplementationContractError
from .svg import create_svg_element

if TYPE_CHECKING:  # pragma: no cover
    from .context import EngineContext


@dataclass
class RenderedResult:
    """Handle returned by :func:`devize.render.render_viz`."""

    element: Any
    update: Callable[[Mapping[str, Any]], "RenderedResult"]
    cleanup: Callable[[], None]


class Renderable:
    """Terminal, resolved form of a visualization.

    Subclasses must override :meth:`render_to_svg` and :meth:`render_to_canvas`;
    the base versions raise :class:`ImplementationContractError`.
    """

    kind: ClassVar[str] = "renderable"
    renderable_type: str = "renderable"

    def __init__(self, spec: Optional[Mapping[str, Any]] = None, context: Optional["EngineContext"] = None):
        self.spec: Dict[str, Any] = dict(spec or {})
        self.context = context

    def render(self, container: Any) -> RenderedResult:
        from .render import render_viz

        return render_viz(self, container, context=self.context)

    def render_to_svg(self, svg: Any) -> Any:
        raise ImplementationContractError(f"{type(self).__name__} does not implement render_to_svg")

    def render_to_canvas(self, ctx: Any) -> bool:
        raise ImplementationContractError(f"{type(self).__name__} does not implement render_to_canvas")

    def update(self, partial: Mapping[str, Any]) -> "Renderable":
        if not isinstance(self.spec.get("type"), str):
            raise ImplementationContractError(f"{type(self).__name__} has no spec to rebuild from")
        from .builder import resolve

        return resolve({**self.spec, **dict(partial)}, context=self.context)

    def get_property(self, name: str) -> Any:
        return self.spec.get(name)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.renderable_type}>"


def _overrides(obj: Any, method: str) -> bool:
    impl = getattr(type(obj), method, None)
    if impl is None or not callable(impl):
        return False
    return impl is not getattr(Renderable, method)


def check_renderable_contract(renderable: Any) -> None:
    """Raise unless ``renderable`` can draw to both the SVG and the Canvas backend."""

    target = renderable
    while isinstance(target, Visualization):
        target = target.leaf
    missing = [name for name in ("render_to_svg", "render_to_canvas") if not _overrides(target, name)]
    if missing:
        raise ImplementationContractError(
            f"renderable '{getattr(target, 'renderable_type', type(target).__name__)}' "
            f"does not implement {' and '.join(missing)}"
        )


class EmptyRenderable(Renderable):
    """Renders nothing visible; what ``define`` returns."""

    renderable_type = "empty"

    def render_to_svg(self, svg: Any) -> Any:
        return create_svg_element("g", parent=svg)

    def render_to_canvas(self, ctx: Any) -> bool:
        return True


class Visualization(Renderable):
    """Result of resolving a spec.

    Keeps the caller's spec (for :meth:`update`), the evaluated properties of
    the requested type and the terminal ``leaf`` it decomposed into.
    """

    def __init__(
        self,
        spec: Mapping[str, Any],
        props: Mapping[str, Any],
        leaf: Renderable,
        context: Optional["EngineContext"] = None,
    ):
        super().__init__(spec, context)
        self.props: Dict[str, Any] = dict(props)
        self.leaf = leaf
        self.renderable_type = str(self.spec.get("type", leaf.renderable_type))

    def render_to_svg(self, svg: Any) -> Any:
        return self.leaf.render_to_svg(svg)

    def render_to_canvas(self, ctx: Any) -> bool:
        return bool(self.leaf.render_to_canvas(ctx))

    def get_property(self, name: str) -> Any:
        if name in self.props:
            return self.props[name]
        return self.leaf.get_property(name)

    @property
    def terminal(self) -> Renderable:
        node: Renderable = self
        while isinstance(node, Visualization):
            node = node.leaf
        return node


__all__ = [
    "EmptyRenderable",
    "Renderable",
    "RenderedResult",
    "Visualization",
    "check_renderable_contract",
]
