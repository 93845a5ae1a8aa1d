"""Unit tests for paint parsing."""
import unittest

from figma_renderer.errors import UnknownPaintTypeError
from figma_renderer.model.paints import Color, GradientPaint, ImagePaint, PaintType, SolidPaint
from figma_renderer.model.variables import VariableLibrary
from figma_renderer.parser.paint_parser import parse_paint, parse_paints


class PaintParserTest(unittest.TestCase):
    def setUp(self) -> None:
        self.library = VariableLibrary.from_data({})

    def test_solid_paint(self) -> None:
        paint = parse_paint({"type": "SOLID", "color": {"r": 1, "g": 0, "b": 0, "a": 0.5}, "opacity": 0.8}, self.library)
        self.assertIsInstance(paint, SolidPaint)
        self.assertEqual(paint.color, Color(1.0, 0.0, 0.0, 0.5))
        self.assertEqual(paint.opacity, 0.8)
        self.assertIsNone(paint.bound_color)
        self.assertEqual(str(paint.color), "rgba(255, 0, 0, 0.5)")

    def test_solid_paint_bound_to_variable(self) -> None:
        paint = parse_paint(
            {
                "type": "SOLID",
                "color": {"r": 0, "g": 0, "b": 0},
                "boundVariables": {"color": {"type": "VARIABLE_ALIAS", "id": "VariableID:1:2"}},
            },
            self.library,
        )
        self.assertEqual(paint.bound_color.id, "VariableID:1:2")
        self.assertIs(paint.bound_color.library, self.library)

    def test_gradient_paint(self) -> None:
        paint = parse_paint(
            {
                "type": "GRADIENT_LINEAR",
                "gradientStops": [
                    {"position": 0, "color": {"r": 1, "g": 1, "b": 1, "a": 1}},
                    {"position": 1, "color": {"r": 0, "g": 0, "b": 0, "a": 1}},
                ],
                "gradientHandlePositions": [{"x": 0, "y": 0}, {"x": 1, "y": 1}, {"x": 0, "y": 1}],
            },
            self.library,
        )
        self.assertIsInstance(paint, GradientPaint)
        self.assertIs(paint.paint_type, PaintType.GRADIENT_LINEAR)
        self.assertEqual(len(paint.stops), 2)
        self.assertEqual(paint.handle_positions[1], (1.0, 1.0))

    def test_image_paint(self) -> None:
        paint = parse_paint({"type": "IMAGE", "imageRef": "abc", "scaleMode": "FILL"}, self.library)
        self.assertIsInstance(paint, ImagePaint)
        self.assertEqual(paint.image_ref, "abc")
        self.assertIs(paint.paint_type, PaintType.IMAGE)

    def test_unknown_paint_type(self) -> None:
        with self.assertRaises(UnknownPaintTypeError):
            parse_paint({"type": "VIDEO"}, self.library)

    def test_parse_paints_handles_missing_list(self) -> None:
        self.assertEqual(parse_paints(None, self.library), [])


if __name__ == "__main__":
    unittest.main()
