"""Unit tests for building node trees from raw document payloads."""
import unittest

from figma_renderer.errors import UnknownNodeKindError
from figma_renderer.main import build_document
from figma_renderer.model.elements import (
    BooleanOperationPayload,
    BoundingBox,
    FramePayload,
    NodeKind,
    RectanglePayload,
    TextPayload,
)
from figma_renderer.model.paints import SolidPaint
from figma_renderer.model.variables import VariableLibrary
from figma_renderer.parser.document_parser import DocumentParser

RAW_DOCUMENT = {
    "id": "0:0",
    "name": "Document",
    "type": "DOCUMENT",
    "children": [
        {
            "id": "0:1",
            "name": "Page 1",
            "type": "CANVAS",
            "backgroundColor": {"r": 0.9, "g": 0.9, "b": 0.9, "a": 1},
            "children": [
                {
                    "id": "1:1",
                    "name": "Card",
                    "type": "FRAME",
                    "clipsContent": True,
                    "absoluteBoundingBox": {"x": 10, "y": 20, "width": 100, "height": 50},
                    "paddingLeft": 8,
                    "children": [
                        {
                            "id": "1:2",
                            "name": "Background",
                            "type": "RECTANGLE",
                            "cornerRadius": 4,
                            "absoluteBoundingBox": {"x": 10, "y": 20, "width": 100, "height": 50},
                            "fills": [{"type": "SOLID", "color": {"r": 1, "g": 1, "b": 1, "a": 1}}],
                            "fillGeometry": [{"path": "M0 0L100 0L100 50L0 50L0 0Z", "windingRule": "NONZERO"}],
                        },
                        {
                            "id": "1:3",
                            "name": "Title",
                            "type": "TEXT",
                            "visible": False,
                            "characters": "Hello",
                            "style": {"fontFamily": "Inter"},
                            "absoluteBoundingBox": {"x": 18, "y": 28, "width": 40, "height": 12},
                        },
                        {
                            "id": "1:4",
                            "name": "Union",
                            "type": "BOOLEAN_OPERATION",
                            "booleanOperation": "UNION",
                            "fillGeometry": [{"path": "M0 0L1 1Z", "overrideID": 7}, {"windingRule": "NONZERO"}],
                            "fillOverrideTable": {
                                "7": {"fills": [{"type": "SOLID", "color": {"r": 0, "g": 0, "b": 1}}]}
                            },
                        },
                    ],
                }
            ],
        }
    ],
}


class DocumentParserTest(unittest.TestCase):
    def setUp(self) -> None:
        self.root = DocumentParser(VariableLibrary.from_data({})).parse(RAW_DOCUMENT)

    def test_structure_and_order_are_preserved(self) -> None:
        ids = [node.id for node in self.root.query_selector_all()]
        self.assertEqual(ids, ["0:1", "1:1", "1:2", "1:3", "1:4"])
        card = self.root.query_selector(id="1:1")
        self.assertEqual([child.name for child in card.children], ["Background", "Title", "Union"])
        self.assertIs(card.parent.kind, NodeKind.CANVAS)

    def test_frame_payload(self) -> None:
        card = self.root.query_selector(id="1:1")
        self.assertIsInstance(card.payload, FramePayload)
        self.assertTrue(card.payload.clips_content)
        self.assertEqual(card.payload.absolute_bounding_box, BoundingBox(10.0, 20.0, 100.0, 50.0))
        self.assertEqual(card.payload.padding, {"paddingLeft": 8})

    def test_rectangle_payload(self) -> None:
        rectangle = self.root.query_selector(kind=NodeKind.RECTANGLE)
        self.assertIsInstance(rectangle.payload, RectanglePayload)
        self.assertEqual(rectangle.payload.corner_radius, 4)
        self.assertEqual(len(rectangle.payload.fill_geometry), 1)
        self.assertEqual(rectangle.payload.fill_geometry[0].winding_rule, "NONZERO")
        self.assertIsInstance(rectangle.payload.fills[0], SolidPaint)

    def test_text_payload_and_visibility(self) -> None:
        title = self.root.query_selector(kind=NodeKind.TEXT)
        self.assertIsInstance(title.payload, TextPayload)
        self.assertEqual(title.payload.characters, "Hello")
        self.assertFalse(title.visible)
        self.assertEqual(title.field_value("style"), {"fontFamily": "Inter"})

    def test_geometry_without_path_is_skipped_and_overrides_keyed_by_string(self) -> None:
        union = self.root.query_selector(name="Union")
        self.assertIsInstance(union.payload, BooleanOperationPayload)
        self.assertEqual(union.payload.boolean_operation, "UNION")
        self.assertEqual(len(union.payload.fill_geometry), 1)
        self.assertEqual(union.payload.fill_geometry[0].override_id, 7)
        self.assertIn("7", union.payload.fill_override_table)
        self.assertEqual(str(union.payload.fill_override_table["7"][0].color), "rgba(0, 0, 255, 1)")

    def test_unknown_node_type_raises(self) -> None:
        parser = DocumentParser(VariableLibrary.from_data({}))
        with self.assertRaises(UnknownNodeKindError) as ctx:
            parser.parse({"id": "1", "name": "x", "type": "STICKY_NOTE"})
        self.assertIsInstance(ctx.exception, ValueError)

    def test_build_document_accepts_file_response(self) -> None:
        document = build_document(
            {
                "name": "Design",
                "document": RAW_DOCUMENT,
                "branches": [{"key": "b1", "name": "feature"}],
            }
        )
        self.assertEqual(document.name, "Design")
        self.assertEqual(document.root.id, "0:0")
        self.assertEqual([branch.name for branch in document.branches], ["feature"])
        self.assertTrue(document.library.resolved)
        self.assertEqual(document.query_selector(kind=NodeKind.TEXT).id, "1:3")


if __name__ == "__main__":
    unittest.main()
