"""Kind discriminant and kind-specific payload records for document nodes."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from figma_renderer.model.paints import Color, Paint


class NodeKind(Enum):
    """Structural node types known to the tree builder."""

    DOCUMENT = "DOCUMENT"
    CANVAS = "CANVAS"
    FRAME = "FRAME"
    GROUP = "GROUP"
    COMPONENT = "COMPONENT"
    COMPONENT_SET = "COMPONENT_SET"
    INSTANCE = "INSTANCE"
    VECTOR = "VECTOR"
    BOOLEAN = "BOOLEAN"
    BOOLEAN_OPERATION = "BOOLEAN_OPERATION"
    STAR = "STAR"
    LINE = "LINE"
    ELLIPSE = "ELLIPSE"
    REGULAR_POLYGON = "REGULAR_POLYGON"
    RECTANGLE = "RECTANGLE"
    TEXT = "TEXT"
    SLICE = "SLICE"


FRAME_KINDS = frozenset(
    {NodeKind.FRAME, NodeKind.GROUP, NodeKind.COMPONENT, NodeKind.COMPONENT_SET, NodeKind.INSTANCE}
)
PATH_KINDS = frozenset(
    {
        NodeKind.VECTOR,
        NodeKind.BOOLEAN,
        NodeKind.BOOLEAN_OPERATION,
        NodeKind.STAR,
        NodeKind.LINE,
        NodeKind.ELLIPSE,
        NodeKind.REGULAR_POLYGON,
        NodeKind.RECTANGLE,
    }
)


@dataclass(slots=True, frozen=True)
class BoundingBox:
    """Absolute box in canvas coordinates."""

    x: float
    y: float
    width: float
    height: float


@dataclass(slots=True, frozen=True)
class Vector:
    x: float
    y: float


@dataclass(slots=True, frozen=True)
class PathGeometry:
    """One fill or stroke outline of a node."""

    path: str
    winding_rule: Optional[str] = None
    override_id: Optional[int] = None


@dataclass(slots=True)
class DocumentPayload:
    """The document root carries no drawable state."""


@dataclass(slots=True)
class CanvasPayload:
    background_color: Optional[Color] = None
    export_settings: List[Dict[str, object]] = field(default_factory=list)
    prototype_start_node_id: Optional[str] = None


@dataclass(slots=True)
class FramePayload:
    """Shared payload of frames, groups, components, component sets and instances."""

    absolute_bounding_box: Optional[BoundingBox] = None
    fills: List[Paint] = field(default_factory=list)
    strokes: List[Paint] = field(default_factory=list)
    background: List[Paint] = field(default_factory=list)
    background_color: Optional[Color] = None
    fill_geometry: List[PathGeometry] = field(default_factory=list)
    stroke_geometry: List[PathGeometry] = field(default_factory=list)
    stroke_weight: Optional[float] = None
    stroke_align: Optional[str] = None
    corner_radius: Optional[float] = None
    rectangle_corner_radii: Optional[List[float]] = None
    blend_mode: Optional[str] = None
    opacity: Optional[float] = None
    clips_content: bool = False
    locked: bool = False
    is_mask: bool = False
    layout_mode: Optional[str] = None
    layout_positioning: Optional[str] = None
    padding: Dict[str, float] = field(default_factory=dict)
    item_spacing: Optional[float] = None
    effects: List[Dict[str, object]] = field(default_factory=list)
    export_settings: List[Dict[str, object]] = field(default_factory=list)
    constraints: Optional[Dict[str, str]] = None
    size: Optional[Vector] = None
    relative_transform: Optional[List[List[float]]] = None


@dataclass(slots=True)
class VectorPayload:
    """Payload of every path-bearing node."""

    absolute_bounding_box: Optional[BoundingBox] = None
    fills: List[Paint] = field(default_factory=list)
    strokes: List[Paint] = field(default_factory=list)
    fill_geometry: List[PathGeometry] = field(default_factory=list)
    stroke_geometry: List[PathGeometry] = field(default_factory=list)
    fill_override_table: Dict[str, List[Paint]] = field(default_factory=dict)
    stroke_weight: Optional[float] = None
    stroke_align: Optional[str] = None
    stroke_cap: Optional[str] = None
    stroke_join: Optional[str] = None
    stroke_dashes: Optional[List[float]] = None
    stroke_miter_angle: Optional[float] = None
    blend_mode: Optional[str] = None
    opacity: Optional[float] = None
    locked: bool = False
    is_mask: bool = False
    layout_positioning: Optional[str] = None
    effects: List[Dict[str, object]] = field(default_factory=list)
    export_settings: List[Dict[str, object]] = field(default_factory=list)
    constraints: Optional[Dict[str, str]] = None
    styles: Dict[str, str] = field(default_factory=dict)
    size: Optional[Vector] = None
    relative_transform: Optional[List[List[float]]] = None


@dataclass(slots=True)
class BooleanOperationPayload(VectorPayload):
    boolean_operation: Optional[str] = None


@dataclass(slots=True)
class RectanglePayload(VectorPayload):
    corner_radius: Optional[float] = None
    rectangle_corner_radii: Optional[List[float]] = None


@dataclass(slots=True)
class TextPayload(VectorPayload):
    characters: str = ""
    style: Dict[str, object] = field(default_factory=dict)
    character_style_overrides: List[int] = field(default_factory=list)
    style_override_table: Dict[str, Dict[str, object]] = field(default_factory=dict)
    line_types: List[str] = field(default_factory=list)
    line_indentations: List[int] = field(default_factory=list)


@dataclass(slots=True)
class SlicePayload:
    absolute_bounding_box: Optional[BoundingBox] = None
    export_settings: List[Dict[str, object]] = field(default_factory=list)
    size: Optional[Vector] = None
    relative_transform: Optional[List[List[float]]] = None


NodePayload = (
    DocumentPayload
    | CanvasPayload
    | FramePayload
    | VectorPayload
    | BooleanOperationPayload
    | RectanglePayload
    | TextPayload
    | SlicePayload
)
