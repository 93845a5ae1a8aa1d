"""Build immutable paint objects from raw paint entries."""
from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence

from figma_renderer.errors import UnknownPaintTypeError
from figma_renderer.model.paints import (
    GRADIENT_TYPES,
    ColorStop,
    GradientPaint,
    ImagePaint,
    Paint,
    PaintType,
    SolidPaint,
)
from figma_renderer.model.variables import VariableAlias, VariableLibrary
from figma_renderer.parser.variables_parser import is_alias, parse_color


def parse_paint(raw: Mapping[str, Any], library: VariableLibrary) -> Paint:
    """Dispatch on the paint ``type`` field."""
    try:
        paint_type = PaintType(raw.get("type"))
    except ValueError as exc:
        raise UnknownPaintTypeError(raw.get("type")) from exc

    visible = bool(raw.get("visible", True))
    opacity = raw.get("opacity")

    if paint_type is PaintType.SOLID:
        bound = (raw.get("boundVariables") or {}).get("color")
        bound_color: Optional[VariableAlias] = None
        if is_alias(bound):
            bound_color = VariableAlias(id=bound["id"], library=library)
        return SolidPaint(
            color=parse_color(raw["color"]),
            opacity=opacity,
            visible=visible,
            blend_mode=raw.get("blendMode"),
            bound_color=bound_color,
        )

    if paint_type in GRADIENT_TYPES:
        return GradientPaint(
            paint_type=paint_type,
            stops=tuple(
                ColorStop(position=float(stop["position"]), color=parse_color(stop["color"]))
                for stop in raw.get("gradientStops", [])
            ),
            handle_positions=tuple(
                (float(handle["x"]), float(handle["y"])) for handle in raw.get("gradientHandlePositions", [])
            ),
            blend_mode=raw.get("blendMode"),
            opacity=opacity,
            visible=visible,
        )

    transform = raw.get("imageTransform")
    return ImagePaint(
        image_ref=raw.get("imageRef"),
        scale_mode=raw.get("scaleMode"),
        image_transform=tuple(tuple(row) for row in transform) if transform else None,
        scaling_factor=raw.get("scalingFactor"),
        rotation=float(raw.get("rotation", 0.0)),
        gif_ref=raw.get("gifRef"),
        opacity=opacity,
        visible=visible,
    )


def parse_paints(raw_paints: Optional[Sequence[Mapping[str, Any]]], library: VariableLibrary) -> List[Paint]:
    if not raw_paints:
        return []
    return [parse_paint(raw, library) for raw in raw_paints]
