"""Container primitives: ``group`` and ``layer``."""

from __future__ import annotations

import numbers
from typing import Any, Dict, List, Mapping, Optional

from ..renderable import Renderable, check_renderable_contract
from ..svg import create_svg_element, format_value


def _z_index(child: Renderable) -> float:
    value = child.get_property("z_index")
    return float(value) if isinstance(value, numbers.Real) else 0.0


class GroupLeaf(Renderable):
    """Positions its resolved ``children`` at ``(x, y)``."""

    renderable_type = "leafGroup"

    def __init__(self, props: Mapping[str, Any], children: List[Renderable], context=None):
        super().__init__(props, context)
        # stable sort keeps declaration order among equal z-indices
        self.children = sorted(children, key=_z_index)

    def transform(self) -> Optional[str]:
        parts = []
        x, y = self.spec.get("x", 0), self.spec.get("y", 0)
        if x or y:
            parts.append(f"translate({format_value(x)},{format_value(y)})")
        if self.spec.get("transform"):
            parts.append(str(self.spec["transform"]))
        return " ".join(parts) or None

    def render_to_svg(self, svg: Any) -> Any:
        group = create_svg_element("g", {"transform": self.transform()}, parent=svg)
        for child in self.children:
            child.render_to_svg(group)
        return group

    def render_to_canvas(self, ctx: Any) -> bool:
        ctx.save()
        x, y = self.spec.get("x", 0), self.spec.get("y", 0)
        if x or y:
            ctx.translate(x, y)
        ok = all([bool(child.render_to_canvas(ctx)) for child in self.children])
        ctx.restore()
        return ok


class LayerLeaf(Renderable):
    """A group drawn with its own opacity and stacking order."""

    renderable_type = "leafLayer"

    def __init__(self, props: Mapping[str, Any], group: GroupLeaf, context=None):
        super().__init__(props, context)
        self.group = group

    def render_to_svg(self, svg: Any) -> Any:
        element = self.group.render_to_svg(svg)
        opacity = self.spec.get("opacity", 1)
        if opacity < 1:
            element.set("opacity", format_value(opacity))
        element.set("data-z-index", format_value(self.spec.get("z_index", 0)))
        return element

    def render_to_canvas(self, ctx: Any) -> bool:
        ctx.save()
        ctx.global_alpha = ctx.global_alpha * float(self.spec.get("opacity", 1))
        ok = self.group.render_to_canvas(ctx)
        ctx.restore()
        return ok


def _child_spec(child: Any) -> Any:
    if isinstance(child, bool):
        raise ValueError("group children cannot be booleans")
    if isinstance(child, (str, numbers.Real)):
        return {"type": "text", "text": str(child)}
    return child


def _is_unit_interval(value: Any) -> bool:
    return 0 <= value <= 1


def container_specs(context) -> List[Dict[str, Any]]:
    """Define-specs for ``group`` and ``layer``, bound to ``context``."""

    from ..builder import resolve_child

    def group(props: Dict[str, Any]) -> Renderable:
        children = []
        for child in props.get("children") or []:
            resolved = resolve_child(_child_spec(child), context=context)
            check_renderable_contract(resolved)
            children.append(resolved)
        return GroupLeaf(props, children, context)

    def layer(props: Dict[str, Any], base: GroupLeaf) -> Renderable:
        return LayerLeaf(props, base, context)

    return [
        {
            "name": "group",
            "properties": {
                "x": {"type": "number", "default": 0},
                "y": {"type": "number", "default": 0},
                "children": {"type": "array", "default": []},
                "transform": {"type": "string", "default": None},
            },
            "implementation": group,
        },
        {
            "name": "layer",
            "extend": "group",
            "properties": {
                "opacity": {"type": "number", "default": 1, "validate": _is_unit_interval},
                "z_index": {"type": "number", "default": 0},
            },
            "implementation": layer,
        },
    ]


__all__ = ["GroupLeaf", "LayerLeaf", "container_specs"]
