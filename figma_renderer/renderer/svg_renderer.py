"""Render a node subtree into an SVG markup tree."""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Union

from figma_renderer.errors import MissingPaintError, UnsupportedPaintError
from figma_renderer.model.elements import FRAME_KINDS, PATH_KINDS, BoundingBox, NodeKind, PathGeometry, VectorPayload
from figma_renderer.model.node_tree import Node
from figma_renderer.model.paints import GradientPaint, Paint, SolidPaint
from figma_renderer.model.variables import Variable
from figma_renderer.renderer.markup import AttributeValue, MarkupElement
from figma_renderer.renderer.paths import translate_path
from figma_renderer.utils.logger import get_logger
from figma_renderer.utils.numbers import DEFAULT_PRECISION, format_number, round_to

LOGGER = get_logger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"

_VARIABLE_NAME_SEPARATORS = re.compile(r"[ /]")
_WINDING_RULES = {"EVENODD": "evenodd", "NONZERO": "nonzero"}
_LINECAPS = {"NONE": "butt", "ROUND": "round", "SQUARE": "square"}
_LINEJOINS = {"MITER": "miter", "BEVEL": "bevel", "ROUND": "round"}


def default_variable_name(variable: Variable) -> str:
    """``"Colors/Brand Primary"`` becomes ``"--Colors--Brand--Primary"``."""
    return "--" + "--".join(_VARIABLE_NAME_SEPARATORS.split(variable.name))


@dataclass(slots=True)
class RenderOptions:
    reference_variables: bool = False
    resolve_variable_name: Callable[[Variable], str] = default_variable_name
    skip_missing_paint: bool = True
    precision: int = DEFAULT_PRECISION


@dataclass(slots=True)
class Bounds:
    """Axis-aligned extent in absolute coordinates; starts out empty."""

    left: float = math.inf
    right: float = -math.inf
    top: float = math.inf
    bottom: float = -math.inf

    @property
    def empty(self) -> bool:
        return self.left > self.right or self.top > self.bottom

    @property
    def width(self) -> float:
        return 0.0 if self.empty else self.right - self.left

    @property
    def height(self) -> float:
        return 0.0 if self.empty else self.bottom - self.top

    def expand(self, box: BoundingBox) -> None:
        self.left = min(self.left, box.x)
        self.right = max(self.right, box.x + box.width)
        self.top = min(self.top, box.y)
        self.bottom = max(self.bottom, box.y + box.height)

    def copy(self) -> "Bounds":
        return Bounds(self.left, self.right, self.top, self.bottom)

    def offset_of(self, box: Optional[BoundingBox]) -> tuple[float, float]:
        """Position of ``box`` relative to this extent's top-left corner."""
        if box is None or self.empty:
            return 0.0, 0.0
        return box.x - self.left, box.y - self.top


class SvgRenderer:
    """Convert a node and its descendants into an ``<svg>`` markup tree.

    Each recursive step receives its parent's bounds, widens a private copy
    by its own bounding box and hands that copy to its children. A separate
    accumulator collects every visited box and sizes the outer viewport.
    """

    def __init__(self, options: Optional[RenderOptions] = None) -> None:
        self._options = options or RenderOptions()

    def render(self, node: Node) -> MarkupElement:
        cumulative = Bounds()
        content = self._render_node(node, Bounds(), cumulative)
        precision = self._options.precision
        width = round_to(cumulative.width, precision)
        height = round_to(cumulative.height, precision)
        LOGGER.debug("Rendered node %s (%s) at %sx%s", node.id, node.kind.value, width, height)
        return MarkupElement(
            "svg",
            {
                "xmlns": SVG_NAMESPACE,
                "width": width,
                "height": height,
                "viewBox": f"0 0 {format_number(width)} {format_number(height)}",
            },
            [content],
        )

    def _render_node(self, node: Node, parent_bounds: Bounds, cumulative: Bounds) -> MarkupElement:
        current = parent_bounds.copy()
        box = _bounding_box(node)
        if box is not None:
            current.expand(box)
            cumulative.expand(box)

        children: List[Union[MarkupElement, str]] = [
            self._render_node(child, current, cumulative) for child in node.children
        ]

        if node.kind is NodeKind.TEXT:
            characters = getattr(node.payload, "characters", "")
            x, y = (0.0, 0.0) if current.empty else (current.left, current.top)
            return MarkupElement("text", self._box_attributes(current, x, y), [characters, *children])

        if node.kind in FRAME_KINDS and getattr(node.payload, "clips_content", False):
            children = self._clip(node, box, current, children)

        if node.kind in PATH_KINDS and isinstance(node.payload, VectorPayload):
            dx, dy = current.offset_of(box)
            payload = node.payload
            children.extend(self._paths(node, payload, payload.fill_geometry, payload.fills, dx, dy))
            children.extend(self._paths(node, payload, payload.stroke_geometry, payload.strokes, dx, dy))

        return MarkupElement(None, {}, children)

    def _clip(
        self,
        node: Node,
        box: Optional[BoundingBox],
        current: Bounds,
        children: List[Union[MarkupElement, str]],
    ) -> List[Union[MarkupElement, str]]:
        clip_id = f"clip{node.id}"
        dx, dy = current.offset_of(box)
        return [
            MarkupElement("g", {"clipPath": f"url(#{clip_id})"}, children),
            MarkupElement("clipPath", {"id": clip_id}, [MarkupElement("rect", self._box_attributes(current, dx, dy))]),
        ]

    def _box_attributes(self, bounds: Bounds, x: float, y: float) -> Dict[str, AttributeValue]:
        precision = self._options.precision
        return {
            "x": round_to(x, precision),
            "y": round_to(y, precision),
            "width": round_to(bounds.width, precision),
            "height": round_to(bounds.height, precision),
        }

    def _paths(
        self,
        node: Node,
        payload: VectorPayload,
        geometry: Sequence[PathGeometry],
        paints: Sequence[Paint],
        dx: float,
        dy: float,
    ) -> List[MarkupElement]:
        elements: List[MarkupElement] = []
        for entry in geometry:
            paint = self._paint_for(node, payload, entry, paints)
            if paint is None:
                continue
            attributes = self._path_attributes(node, payload, entry, dx, dy)
            self._apply_paint(attributes, paint)
            elements.append(MarkupElement("path", attributes))
        return elements

    def _paint_for(
        self,
        node: Node,
        payload: VectorPayload,
        entry: PathGeometry,
        paints: Sequence[Paint],
    ) -> Optional[Paint]:
        if entry.override_id is None:
            return paints[0] if paints else None

        overrides = payload.fill_override_table.get(str(entry.override_id))
        if overrides:
            return overrides[0]
        if not self._options.skip_missing_paint:
            raise MissingPaintError(f"Node {node.id} has no paint for override {entry.override_id}")
        LOGGER.debug("Skipping geometry of node %s: no paint for override %s", node.id, entry.override_id)
        return None

    def _path_attributes(
        self,
        node: Node,
        payload: VectorPayload,
        entry: PathGeometry,
        dx: float,
        dy: float,
    ) -> Dict[str, AttributeValue]:
        attributes: Dict[str, AttributeValue] = {
            "d": translate_path(entry.path, dx, dy, self._options.precision),
        }
        if payload.stroke_weight is not None:
            attributes["strokeWidth"] = payload.stroke_weight
        if payload.stroke_align:
            attributes["strokeAlign"] = payload.stroke_align
        if payload.stroke_cap:
            attributes["strokeLinecap"] = _LINECAPS.get(payload.stroke_cap)
        if payload.stroke_join:
            attributes["strokeLinejoin"] = _LINEJOINS.get(payload.stroke_join)
        winding = _WINDING_RULES.get(entry.winding_rule or "")
        if winding:
            attributes["fillRule"] = winding
            attributes["clipRule"] = winding
        if not node.visible:
            attributes["visibility"] = "hidden"
        if payload.blend_mode:
            attributes["mixBlendMode"] = _blend_mode(payload.blend_mode)
        if payload.opacity is not None:
            attributes["opacity"] = payload.opacity
        if node.id:
            attributes["id"] = node.id
        return attributes

    def _apply_paint(self, attributes: Dict[str, AttributeValue], paint: Paint) -> None:
        if isinstance(paint, GradientPaint):
            raise UnsupportedPaintError(paint.paint_type.value)
        if not isinstance(paint, SolidPaint):
            return

        color = str(paint.color)
        if self._options.reference_variables and paint.bound_color is not None:
            name = self._options.resolve_variable_name(paint.bound_color.resolve_sync())
            attributes["style"] = f"fill: var({name}, {color})"
        else:
            attributes["fill"] = color


def _bounding_box(node: Node) -> Optional[BoundingBox]:
    return getattr(node.payload, "absolute_bounding_box", None)


def _blend_mode(blend_mode: str) -> str:
    if blend_mode == "PASS_THROUGH":
        return "normal"
    return blend_mode.lower().replace("_", "-")
