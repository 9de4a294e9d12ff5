import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from devize import (
    Canvas,
    create_context,
    create_svg_root,
    render_viz,
    to_svg_string,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _load_spec(path: str) -> object:
    with open(path, encoding="utf-8") as fin:
        return json.load(fin)


def _print_display_list(canvas: Canvas) -> None:
    for op in canvas.get_context("2d").operations:
        name, args = op[0], op[1:]
        print(f"{name}({', '.join(repr(arg) for arg in args)})")


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Render declarative visualization specs")
    parser.add_argument("path", help="Path to a JSON visualization spec")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--width",
        type=float,
        default=800,
        help="Target width in pixels (default: 800)",
    )
    parser.add_argument(
        "--height",
        type=float,
        default=400,
        help="Target height in pixels (default: 400)",
    )
    parser.add_argument(
        "--canvas",
        action="store_true",
        help="Render to a recording canvas and print its display list",
    )
    parser.add_argument(
        "--svg-output-path",
        help="Write the rendered SVG document to the given path",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    logger.info("Loading spec from %s", args.path)
    spec = _load_spec(args.path)
    context = create_context()

    if args.canvas:
        canvas = Canvas(args.width, args.height)
        render_viz(spec, canvas, context=context)
        _print_display_list(canvas)
        return

    svg = create_svg_root(args.width, args.height)
    render_viz(spec, svg, context=context)
    document = to_svg_string(svg)

    if args.svg_output_path:
        output_path = Path(args.svg_output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing SVG document to %s", output_path)
        output_path.write_text(document, encoding="utf-8")
        print(f"SVG document written to {output_path}")
    else:
        print(document)


if __name__ == "__main__":
    main(sys.argv[1:])
