"""Canvas backend: a headless 2D context that records drawing operations."""

from __future__ import annotations

from typing import Any, List, Tuple

Operation = Tuple[Any, ...]

_STATE_FIELDS = ("fill_style", "stroke_style", "line_width", "global_alpha", "font", "text_align")


class RecordingContext:
    """Implements the subset of the Canvas 2D API used by the primitives.

    Every call is appended to :attr:`operations`; ``fill``/``stroke`` record
    the style in effect so a display list can be replayed or asserted on.
    """

    def __init__(self) -> None:
        self.operations: List[Operation] = []
        self.fill_style: str = "black"
        self.stroke_style: str = "black"
        self.line_width: float = 1.0
        self.global_alpha: float = 1.0
        self.font: str = "10px sans-serif"
        self.text_align: str = "start"
        self._stack: List[Tuple[Any, ...]] = []

    def _record(self, *op: Any) -> None:
        self.operations.append(op)

    def save(self) -> None:
        self._stack.append(tuple(getattr(self, name) for name in _STATE_FIELDS))
        self._record("save")

    def restore(self) -> None:
        if self._stack:
            for name, value in zip(_STATE_FIELDS, self._stack.pop()):
                setattr(self, name, value)
        self._record("restore")

    def translate(self, x: float, y: float) -> None:
        self._record("translate", x, y)

    def begin_path(self) -> None:
        self._record("begin_path")

    def close_path(self) -> None:
        self._record("close_path")

    def move_to(self, x: float, y: float) -> None:
        self._record("move_to", x, y)

    def line_to(self, x: float, y: float) -> None:
        self._record("line_to", x, y)

    def bezier_curve_to(self, cp1x: float, cp1y: float, cp2x: float, cp2y: float, x: float, y: float) -> None:
        self._record("bezier_curve_to", cp1x, cp1y, cp2x, cp2y, x, y)

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float) -> None:
        self._record("quadratic_curve_to", cpx, cpy, x, y)

    def arc(self, x: float, y: float, radius: float, start: float, end: float) -> None:
        self._record("arc", x, y, radius, start, end)

    def rect(self, x: float, y: float, width: float, height: float) -> None:
        self._record("rect", x, y, width, height)

    def fill(self) -> None:
        self._record("fill", self.fill_style, self.global_alpha)

    def stroke(self) -> None:
        self._record("stroke", self.stroke_style, self.line_width, self.global_alpha)

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        self._record("fill_rect", x, y, width, height, self.fill_style)

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        self._record("clear_rect", x, y, width, height)

    def fill_text(self, text: str, x: float, y: float) -> None:
        self._record("fill_text", text, x, y, self.font, self.text_align, self.fill_style)

    def op_names(self) -> List[str]:
        return [op[0] for op in self.operations]

    def reset(self) -> None:
        self.operations.clear()


class Canvas:
    """A canvas element hosting one :class:`RecordingContext`."""

    def __init__(self, width: float = 300, height: float = 150):
        self.width = width
        self.height = height
        self._context = RecordingContext()

    @property
    def client_width(self) -> float:
        return self.width

    @property
    def client_height(self) -> float:
        return self.height

    def get_context(self, kind: str = "2d") -> RecordingContext:
        if kind != "2d":
            raise ValueError(f"unsupported canvas context {kind!r}")
        return self._context


def canvas_context(target: Any) -> Any:
    """Return the 2D context for a canvas host or context, ``None`` for anything else."""

    get_context = getattr(target, "get_context", None)
    if callable(get_context):
        return get_context("2d")
    if all(callable(getattr(target, name, None)) for name in ("begin_path", "save", "restore")):
        return target
    return None


__all__ = ["Canvas", "RecordingContext", "canvas_context"]
