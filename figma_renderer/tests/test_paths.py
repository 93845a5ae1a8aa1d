"""Unit tests for path translation and rounding."""
import unittest

from figma_renderer.renderer.paths import translate_path


class TranslatePathTest(unittest.TestCase):
    def test_closed_rectangle_without_offset(self) -> None:
        self.assertEqual(
            translate_path("M0 0L10 0L10 10L0 10Z", 0, 0),
            "M0 0L10 0L10 10L0 10Z",
        )

    def test_explicit_closing_edge_is_kept(self) -> None:
        self.assertEqual(
            translate_path("M0 0L10 0L10 10L0 10L0 0Z", 0, 0),
            "M0 0L10 0L10 10L0 10L0 0Z",
        )

    def test_open_path_ending_at_start_stays_open(self) -> None:
        self.assertEqual(
            translate_path("M0 0L10 0L10 10L0 0", 0, 0),
            "M0 0L10 0L10 10L0 0",
        )
        self.assertEqual(
            translate_path("M0 0L10 0L10 10L0 0", 2, 3),
            "M2 3L12 3L12 13L2 3",
        )

    def test_subpaths_sharing_a_point_stay_separate(self) -> None:
        translated = translate_path("M0 0L10 0L10 10ZM0 0L-10 0L-10 -10Z", 0, 0)
        self.assertEqual(translated, "M0 0L10 0L10 10ZM0 0L-10 0L-10 -10Z")
        self.assertEqual(translated.count("M"), 2)
        self.assertEqual(translated.count("Z"), 2)

    def test_relative_move_after_close_starts_from_subpath_start(self) -> None:
        self.assertEqual(
            translate_path("M1 1L3 1L3 3Zm5 5l1 0", 0, 0),
            "M1 1L3 1L3 3ZM6 6L7 6",
        )

    def test_translation_shifts_every_point(self) -> None:
        self.assertEqual(translate_path("M0 0L10 0", 5, -2), "M5 -2L15 -2")

    def test_relative_commands_become_absolute(self) -> None:
        self.assertEqual(translate_path("M1 1l2 0l0 2", 0, 0), "M1 1L3 1L3 3")

    def test_coordinates_are_rounded(self) -> None:
        self.assertEqual(translate_path("M0.123456 0L1 1", 0, 0, precision=2), "M0.12 0L1 1")
        self.assertEqual(translate_path("M0 0L1 1", 0.00001, 0), "M0 0L1 1")

    def test_curves_are_serialized(self) -> None:
        self.assertEqual(
            translate_path("M0 0C1 0 2 1 2 2Q3 3 4 4", 1, 1),
            "M1 1C2 1 3 2 3 3Q4 4 5 5",
        )

    def test_multiple_subpaths(self) -> None:
        self.assertEqual(
            translate_path("M0 0L4 0L4 4Z M10 10L12 10", 0, 0),
            "M0 0L4 0L4 4ZM10 10L12 10",
        )

    def test_empty_path(self) -> None:
        self.assertEqual(translate_path("", 3, 3), "")


if __name__ == "__main__":
    unittest.main()
