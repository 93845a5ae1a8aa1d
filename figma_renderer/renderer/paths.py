"""Translate and re-serialize SVG path data."""
from __future__ import annotations

import re
from typing import Iterator, List, Tuple

from svgpathtools import Arc, CubicBezier, Line, QuadraticBezier, parse_path

from figma_renderer.utils.numbers import DEFAULT_PRECISION, format_number

_MOVE_TO = re.compile(r"(?=[Mm])")


def _point(value: complex, precision: int) -> str:
    return f"{format_number(value.real, precision)} {format_number(value.imag, precision)}"


def _segment(segment, precision: int) -> str:
    if isinstance(segment, Line):
        return "L" + _point(segment.end, precision)
    if isinstance(segment, CubicBezier):
        return "C" + " ".join(
            _point(point, precision) for point in (segment.control1, segment.control2, segment.end)
        )
    if isinstance(segment, QuadraticBezier):
        return "Q" + " ".join(_point(point, precision) for point in (segment.control, segment.end))
    if isinstance(segment, Arc):
        flags = f"{int(bool(segment.large_arc))} {int(bool(segment.sweep))}"
        return (
            f"A{format_number(segment.radius.real, precision)} {format_number(segment.radius.imag, precision)} "
            f"{format_number(segment.rotation, precision)} {flags} {_point(segment.end, precision)}"
        )
    raise TypeError(f"Unsupported path segment: {type(segment).__name__}")


def _subpaths(d: str) -> Iterator[Tuple[str, bool]]:
    """Split ``d`` at move-to commands, reporting whether each part ends with ``Z``."""
    for part in _MOVE_TO.split(d):
        body = part.strip()
        if not body:
            continue
        closed = body[-1] in "Zz"
        yield body.rstrip("Zz \t\r\n,"), closed


def translate_path(d: str, dx: float, dy: float, precision: int = DEFAULT_PRECISION) -> str:
    """Shift every point of ``d`` by ``(dx, dy)`` and round coordinates to ``precision`` decimals.

    The output uses absolute commands only: ``M``, ``L``, ``C``, ``Q``, ``A`` and ``Z``.
    Subpath boundaries and closing commands are kept exactly as written.
    """
    offset = complex(dx, dy)
    current = 0j
    commands: List[str] = []
    for body, closed in _subpaths(d):
        # Relative move-tos continue from where the previous subpath left the pen.
        path = parse_path(body, current_pos=current)
        if len(path) == 0:
            continue
        current = path.start if closed else path.end
        if offset:
            path = path.translated(offset)

        commands.append("M" + _point(path.start, precision))
        pen = path.start
        for segment in path:
            if segment.start != pen:
                commands.append("M" + _point(segment.start, precision))
            commands.append(_segment(segment, precision))
            pen = segment.end
        if closed:
            commands.append("Z")
    return "".join(commands)
