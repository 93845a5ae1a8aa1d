"""Parse raw document JSON into a node tree."""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional

from figma_renderer.errors import UnknownNodeKindError
from figma_renderer.model.elements import (
    BooleanOperationPayload,
    BoundingBox,
    CanvasPayload,
    DocumentPayload,
    FramePayload,
    NodeKind,
    NodePayload,
    PathGeometry,
    RectanglePayload,
    SlicePayload,
    TextPayload,
    Vector,
    VectorPayload,
)
from figma_renderer.model.node_tree import Node, NodeTree
from figma_renderer.model.paints import Color, Paint
from figma_renderer.model.variables import VariableLibrary
from figma_renderer.parser.paint_parser import parse_paints
from figma_renderer.parser.variables_parser import parse_color
from figma_renderer.utils.logger import get_logger

LOGGER = get_logger(__name__)

RawNode = Mapping[str, Any]

_PADDING_KEYS = ("paddingLeft", "paddingRight", "paddingTop", "paddingBottom")


class DocumentParser:
    """Transforms a raw node description and its descendants into :class:`Node` objects."""

    def __init__(self, library: VariableLibrary) -> None:
        self._library = library
        self._payload_builders: Dict[NodeKind, Callable[[RawNode], NodePayload]] = {
            NodeKind.DOCUMENT: lambda raw: DocumentPayload(),
            NodeKind.CANVAS: self._parse_canvas,
            NodeKind.SLICE: self._parse_slice,
            NodeKind.RECTANGLE: self._parse_rectangle,
            NodeKind.TEXT: self._parse_text,
            NodeKind.BOOLEAN_OPERATION: self._parse_boolean_operation,
        }
        for kind in (NodeKind.FRAME, NodeKind.GROUP, NodeKind.COMPONENT, NodeKind.COMPONENT_SET, NodeKind.INSTANCE):
            self._payload_builders[kind] = self._parse_frame
        for kind in (
            NodeKind.VECTOR,
            NodeKind.BOOLEAN,
            NodeKind.STAR,
            NodeKind.LINE,
            NodeKind.ELLIPSE,
            NodeKind.REGULAR_POLYGON,
        ):
            self._payload_builders[kind] = lambda raw: self._fill_vector(VectorPayload(), raw)

    def parse(self, raw: RawNode) -> Node:
        """Parse ``raw`` and all of its children into one tree; return the root."""
        tree = NodeTree()
        root = self._parse_node(raw)
        tree.register(root)
        self._parse_children(root, raw)
        LOGGER.debug("Parsed document tree with %d nodes", len(tree))
        return root

    def _parse_children(self, parent: Node, raw: RawNode) -> None:
        for raw_child in raw.get("children") or []:
            child = self._parse_node(raw_child)
            parent.append_child(child)
            self._parse_children(child, raw_child)

    def _parse_node(self, raw: RawNode) -> Node:
        try:
            kind = NodeKind(raw.get("type"))
        except ValueError as exc:
            raise UnknownNodeKindError(raw.get("type")) from exc

        payload = self._payload_builders[kind](raw)
        return Node(
            id=raw.get("id", ""),
            name=raw.get("name", ""),
            kind=kind,
            payload=payload,
            visible=raw.get("visible", True) is not False,
            plugin_data=raw.get("pluginData"),
            shared_plugin_data=raw.get("sharedPluginData"),
        )

    # ------------------------------------------------------------------
    # Payload builders

    def _parse_canvas(self, raw: RawNode) -> CanvasPayload:
        return CanvasPayload(
            background_color=self._color(raw.get("backgroundColor")),
            export_settings=list(raw.get("exportSettings") or []),
            prototype_start_node_id=raw.get("prototypeStartNodeID"),
        )

    def _parse_frame(self, raw: RawNode) -> FramePayload:
        return FramePayload(
            absolute_bounding_box=self._box(raw.get("absoluteBoundingBox")),
            fills=self._paints(raw.get("fills")),
            strokes=self._paints(raw.get("strokes")),
            background=self._paints(raw.get("background")),
            background_color=self._color(raw.get("backgroundColor")),
            fill_geometry=self._geometry(raw.get("fillGeometry")),
            stroke_geometry=self._geometry(raw.get("strokeGeometry")),
            stroke_weight=raw.get("strokeWeight"),
            stroke_align=raw.get("strokeAlign"),
            corner_radius=raw.get("cornerRadius"),
            rectangle_corner_radii=raw.get("rectangleCornerRadii"),
            blend_mode=raw.get("blendMode"),
            opacity=raw.get("opacity"),
            clips_content=bool(raw.get("clipsContent", False)),
            locked=bool(raw.get("locked", False)),
            is_mask=bool(raw.get("isMask", False)),
            layout_mode=raw.get("layoutMode"),
            layout_positioning=raw.get("layoutPositioning"),
            padding={key: raw[key] for key in _PADDING_KEYS if key in raw},
            item_spacing=raw.get("itemSpacing"),
            effects=list(raw.get("effects") or []),
            export_settings=list(raw.get("exportSettings") or []),
            constraints=raw.get("constraints"),
            size=self._vector(raw.get("size")),
            relative_transform=raw.get("relativeTransform"),
        )

    def _fill_vector(self, payload: VectorPayload, raw: RawNode) -> VectorPayload:
        payload.absolute_bounding_box = self._box(raw.get("absoluteBoundingBox"))
        payload.fills = self._paints(raw.get("fills"))
        payload.strokes = self._paints(raw.get("strokes"))
        payload.fill_geometry = self._geometry(raw.get("fillGeometry"))
        payload.stroke_geometry = self._geometry(raw.get("strokeGeometry"))
        payload.fill_override_table = {
            str(override_id): self._paints((entry or {}).get("fills"))
            for override_id, entry in (raw.get("fillOverrideTable") or raw.get("fillsOverrideTable") or {}).items()
        }
        payload.stroke_weight = raw.get("strokeWeight")
        payload.stroke_align = raw.get("strokeAlign")
        payload.stroke_cap = raw.get("strokeCap")
        payload.stroke_join = raw.get("strokeJoin")
        payload.stroke_dashes = raw.get("strokeDashes")
        payload.stroke_miter_angle = raw.get("strokeMiterAngle")
        payload.blend_mode = raw.get("blendMode")
        payload.opacity = raw.get("opacity")
        payload.locked = bool(raw.get("locked", False))
        payload.is_mask = bool(raw.get("isMask", False))
        payload.layout_positioning = raw.get("layoutPositioning")
        payload.effects = list(raw.get("effects") or [])
        payload.export_settings = list(raw.get("exportSettings") or [])
        payload.constraints = raw.get("constraints")
        payload.styles = dict(raw.get("styles") or {})
        payload.size = self._vector(raw.get("size"))
        payload.relative_transform = raw.get("relativeTransform")
        return payload

    def _parse_rectangle(self, raw: RawNode) -> RectanglePayload:
        payload = RectanglePayload(
            corner_radius=raw.get("cornerRadius"),
            rectangle_corner_radii=raw.get("rectangleCornerRadii"),
        )
        self._fill_vector(payload, raw)
        return payload

    def _parse_boolean_operation(self, raw: RawNode) -> BooleanOperationPayload:
        payload = BooleanOperationPayload(boolean_operation=raw.get("booleanOperation"))
        self._fill_vector(payload, raw)
        return payload

    def _parse_text(self, raw: RawNode) -> TextPayload:
        payload = TextPayload(
            characters=raw.get("characters", ""),
            style=dict(raw.get("style") or {}),
            character_style_overrides=list(raw.get("characterStyleOverrides") or []),
            style_override_table={
                str(key): value for key, value in (raw.get("styleOverrideTable") or {}).items()
            },
            line_types=list(raw.get("lineTypes") or []),
            line_indentations=list(raw.get("lineIndentations") or []),
        )
        self._fill_vector(payload, raw)
        return payload

    def _parse_slice(self, raw: RawNode) -> SlicePayload:
        return SlicePayload(
            absolute_bounding_box=self._box(raw.get("absoluteBoundingBox")),
            export_settings=list(raw.get("exportSettings") or []),
            size=self._vector(raw.get("size")),
            relative_transform=raw.get("relativeTransform"),
        )

    # ------------------------------------------------------------------
    # Field helpers

    def _paints(self, raw_paints: Optional[List[Mapping[str, Any]]]) -> List[Paint]:
        return parse_paints(raw_paints, self._library)

    def _box(self, raw: Optional[Mapping[str, Any]]) -> Optional[BoundingBox]:
        if not raw:
            return None
        return BoundingBox(
            x=float(raw.get("x", 0.0)),
            y=float(raw.get("y", 0.0)),
            width=float(raw.get("width", 0.0)),
            height=float(raw.get("height", 0.0)),
        )

    def _vector(self, raw: Optional[Mapping[str, Any]]) -> Optional[Vector]:
        if not raw:
            return None
        return Vector(x=float(raw["x"]), y=float(raw["y"]))

    def _color(self, raw: Optional[Mapping[str, Any]]) -> Optional[Color]:
        if not raw:
            return None
        return parse_color(raw)

    def _geometry(self, raw_paths: Optional[List[Mapping[str, Any]]]) -> List[PathGeometry]:
        geometry: List[PathGeometry] = []
        for raw in raw_paths or []:
            path = raw.get("path")
            if path is None:
                LOGGER.debug("Skipping geometry entry without path data")
                continue
            geometry.append(
                PathGeometry(
                    path=path,
                    winding_rule=raw.get("windingRule"),
                    override_id=raw.get("overrideID"),
                )
            )
        return geometry
