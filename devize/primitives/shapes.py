"""Leaf shapes drawn directly by the SVG and Canvas backends."""

from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..renderable import Renderable
from ..svg import create_svg_element

PathCommand = Tuple[str, Tuple[float, ...]]

_PATH_TOKEN_RE = re.compile(r"[A-Za-z]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_PATH_ARITY = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "Q": 4, "Z": 0}


def parse_path(d: str) -> List[PathCommand]:
    """Parse path data into absolute ``move_to``/``line_to``/curve commands.

    Supports ``M L H V C Q Z`` in absolute and relative form; any other
    command raises :class:`ValueError`.
    """

    tokens = _PATH_TOKEN_RE.findall(d)
    commands: List[PathCommand] = []
    x = y = 0.0
    start = (0.0, 0.0)
    i = 0
    command: Optional[str] = None
    while i < len(tokens):
        token = tokens[i]
        if token.isalpha():
            if token.upper() not in _PATH_ARITY:
                raise ValueError(f"unsupported path command {token!r}")
            command = token
            i += 1
        elif command is None:
            raise ValueError("path data must start with a command")

        upper = command.upper()
        relative = command.islower()
        arity = _PATH_ARITY[upper]
        if upper == "Z":
            commands.append(("close_path", ()))
            x, y = start
            command = None
            continue
        args = tokens[i:i + arity]
        if len(args) < arity or any(arg.isalpha() for arg in args):
            raise ValueError(f"path command {command!r} expects {arity} number(s)")
        values = [float(arg) for arg in args]
        i += arity

        if upper == "H":
            x = x + values[0] if relative else values[0]
            commands.append(("line_to", (x, y)))
            continue
        if upper == "V":
            y = y + values[0] if relative else values[0]
            commands.append(("line_to", (x, y)))
            continue
        if relative:
            values = [v + (x if k % 2 == 0 else y) for k, v in enumerate(values)]
        x, y = values[-2], values[-1]
        if upper == "M":
            start = (x, y)
            commands.append(("move_to", (x, y)))
            # extra coordinate pairs after a move are implicit line segments
            command = "l" if relative else "L"
        elif upper == "L":
            commands.append(("line_to", (x, y)))
        elif upper == "C":
            commands.append(("bezier_curve_to", tuple(values)))
        else:
            commands.append(("quadratic_curve_to", tuple(values)))
    return commands


def is_path_data(d: Any) -> bool:
    if not isinstance(d, str) or not d.strip():
        return False
    try:
        parse_path(d)
    except ValueError:
        return False
    return True


class Shape(Renderable):
    """Base for primitive leaves; ``props`` are the evaluated properties."""

    svg_tag = ""

    def __init__(self, props: Mapping[str, Any], context=None):
        super().__init__(props, context)

    def svg_attributes(self) -> Dict[str, Any]:
        return {
            "fill": self.spec.get("fill"),
            "stroke": self.spec.get("stroke"),
            "stroke_width": self.spec.get("stroke_width") if self.spec.get("stroke") else None,
            "opacity": self.spec.get("opacity"),
        }

    def render_to_svg(self, svg: Any) -> Any:
        return create_svg_element(self.svg_tag, self.svg_attributes(), parent=svg)

    def trace(self, ctx: Any) -> None:
        raise NotImplementedError

    def render_to_canvas(self, ctx: Any) -> bool:
        ctx.save()
        opacity = self.spec.get("opacity")
        if opacity is not None:
            ctx.global_alpha = ctx.global_alpha * float(opacity)
        ctx.begin_path()
        self.trace(ctx)
        fill = self.spec.get("fill")
        if fill and fill != "none":
            ctx.fill_style = fill
            ctx.fill()
        stroke = self.spec.get("stroke")
        if stroke and stroke != "none":
            ctx.stroke_style = stroke
            ctx.line_width = float(self.spec.get("stroke_width") or 1)
            ctx.stroke()
        ctx.restore()
        return True


class RectShape(Shape):
    renderable_type = "leafRect"
    svg_tag = "rect"

    def svg_attributes(self) -> Dict[str, Any]:
        attributes = {key: self.spec.get(key) for key in ("x", "y", "width", "height", "rx", "ry")}
        attributes.update(super().svg_attributes())
        return attributes

    def trace(self, ctx: Any) -> None:
        ctx.rect(self.spec["x"], self.spec["y"], self.spec["width"], self.spec["height"])


class CircleShape(Shape):
    renderable_type = "leafCircle"
    svg_tag = "circle"

    def svg_attributes(self) -> Dict[str, Any]:
        attributes = {key: self.spec.get(key) for key in ("cx", "cy", "r")}
        attributes.update(super().svg_attributes())
        return attributes

    def trace(self, ctx: Any) -> None:
        ctx.arc(self.spec["cx"], self.spec["cy"], self.spec["r"], 0.0, 2 * math.pi)


class LineShape(Shape):
    renderable_type = "leafLine"
    svg_tag = "line"

    def svg_attributes(self) -> Dict[str, Any]:
        attributes = {key: self.spec.get(key) for key in ("x1", "y1", "x2", "y2")}
        attributes.update(super().svg_attributes())
        return attributes

    def trace(self, ctx: Any) -> None:
        ctx.move_to(self.spec["x1"], self.spec["y1"])
        ctx.line_to(self.spec["x2"], self.spec["y2"])


class PathShape(Shape):
    renderable_type = "leafPath"
    svg_tag = "path"

    def svg_attributes(self) -> Dict[str, Any]:
        attributes = {"d": self.spec.get("d")}
        attributes.update(super().svg_attributes())
        return attributes

    def trace(self, ctx: Any) -> None:
        for name, args in parse_path(self.spec["d"]):
            getattr(ctx, name)(*args)


_CANVAS_ALIGN = {"start": "start", "middle": "center", "end": "end"}


class TextShape(Shape):
    renderable_type = "leafText"
    svg_tag = "text"

    def svg_attributes(self) -> Dict[str, Any]:
        return {
            "x": self.spec.get("x"),
            "y": self.spec.get("y"),
            "font_size": self.spec.get("font_size"),
            "font_family": self.spec.get("font_family"),
            "text_anchor": self.spec.get("text_anchor"),
            "fill": self.spec.get("fill"),
        }

    def render_to_svg(self, svg: Any) -> Any:
        element = super().render_to_svg(svg)
        element.text = str(self.spec.get("text", ""))
        return element

    def render_to_canvas(self, ctx: Any) -> bool:
        ctx.save()
        ctx.font = f"{self.spec.get('font_size')}px {self.spec.get('font_family')}"
        ctx.text_align = _CANVAS_ALIGN.get(self.spec.get("text_anchor"), "start")
        ctx.fill_style = self.spec.get("fill") or "black"
        ctx.fill_text(str(self.spec.get("text", "")), self.spec["x"], self.spec["y"])
        ctx.restore()
        return True


def _positive(value: Any) -> bool:
    return value > 0


def _stroke_props() -> Dict[str, Dict[str, Any]]:
    return {
        "stroke": {"type": "string", "default": None},
        "stroke_width": {"type": "number", "default": 1},
    }


def shape_specs(context) -> List[Dict[str, Any]]:
    """Define-specs for the leaf shapes, bound to ``context``."""

    def leaf(cls):
        def implementation(props: Dict[str, Any]) -> Renderable:
            return cls(props, context)

        implementation.__name__ = f"make_{cls.renderable_type}"
        return implementation

    return [
        {
            "name": "rect",
            "properties": {
                "x": {"type": "number", "default": 0},
                "y": {"type": "number", "default": 0},
                "width": {"required": True, "type": "number"},
                "height": {"required": True, "type": "number"},
                "fill": {"type": "string", "default": "black"},
                "rx": {"type": "number", "default": None},
                "ry": {"type": "number", "default": None},
                "opacity": {"type": "number", "default": None},
                **_stroke_props(),
            },
            "implementation": leaf(RectShape),
        },
        {
            "name": "circle",
            "properties": {
                "cx": {"type": "number", "default": 0},
                "cy": {"type": "number", "default": 0},
                "r": {"required": True, "type": "number", "validate": _positive},
                "fill": {"type": "string", "default": "black"},
                **_stroke_props(),
            },
            "implementation": leaf(CircleShape),
        },
        {
            "name": "line",
            "properties": {
                "x1": {"type": "number", "default": 0},
                "y1": {"type": "number", "default": 0},
                "x2": {"type": "number", "default": 0},
                "y2": {"type": "number", "default": 0},
                "stroke": {"type": "string", "default": "black"},
                "stroke_width": {"type": "number", "default": 1},
            },
            "implementation": leaf(LineShape),
        },
        {
            "name": "path",
            "properties": {
                "d": {"required": True, "type": "string", "validate": is_path_data},
                "fill": {"type": "string", "default": "none"},
                "stroke": {"type": "string", "default": "black"},
                "stroke_width": {"type": "number", "default": 1},
            },
            "implementation": leaf(PathShape),
        },
        {
            "name": "text",
            "properties": {
                "x": {"type": "number", "default": 0},
                "y": {"type": "number", "default": 0},
                "text": {"required": True},
                "font_size": {"type": "number", "default": 12},
                "font_family": {"type": "string", "default": "sans-serif"},
                "fill": {"type": "string", "default": "black"},
                "text_anchor": {
                    "type": "string",
                    "default": "start",
                    "validate": lambda anchor: anchor in _CANVAS_ALIGN,
                },
            },
            "implementation": leaf(TextShape),
        },
    ]


__all__ = [
    "CircleShape",
    "LineShape",
    "PathShape",
    "RectShape",
    "Shape",
    "TextShape",
    "is_path_data",
    "parse_path",
    "shape_specs",
]
