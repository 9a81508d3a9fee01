"""Tests for plain and complex element loading.

Checks payload defaults, ``--enumerate`` numbering, quoting rules, tag
coloring, and the line/column reported for malformed records.
"""

from __future__ import annotations

import unittest
from unittest import mock

from gridpick.elements import DEFAULT_COLORS
from gridpick.errors import RecordParseError
from gridpick.records import read_complex_elements, read_elements, read_plain_elements, tag_colors


class PlainElementTests(unittest.TestCase):
    def test_each_line_becomes_an_element(self) -> None:
        elements = read_plain_elements("alpha\nbeta\ngamma\n")
        self.assertEqual([e.display for e in elements], ["alpha", "beta", "gamma"])
        self.assertEqual(elements[1].payload, ["beta"])
        self.assertEqual(elements[1].colors, DEFAULT_COLORS)
        self.assertEqual(elements[1].tags, ())

    def test_enumerate_uses_zero_based_index(self) -> None:
        elements = read_plain_elements("alpha\nbeta\n", enumerate_=True)
        self.assertEqual([e.payload for e in elements], [["0"], ["1"]])

    def test_only_newlines_separate_lines(self) -> None:
        elements = read_plain_elements("a\x0cb\nc\u2028d\n", enumerate_=True)
        self.assertEqual([e.display for e in elements], ["a\x0cb", "c\u2028d"])
        self.assertEqual([e.payload for e in elements], [["0"], ["1"]])

    def test_inner_empty_lines_are_kept(self) -> None:
        self.assertEqual([e.display for e in read_plain_elements("a\n\nb")], ["a", "", "b"])

    def test_empty_input_has_no_elements(self) -> None:
        self.assertEqual(read_plain_elements(""), [])

    def test_read_elements_dispatches_on_format(self) -> None:
        self.assertEqual(read_elements('name = "x"')[0].display, 'name = "x"')
        self.assertEqual(read_elements('name = "x"', complex_format=True)[0].display, "x")


class ComplexElementTests(unittest.TestCase):
    def test_full_record(self) -> None:
        line = 'name = "Firefox" "web browser"  tags = "web" "gui"  value = "firefox" "--new-window"'
        (element,) = read_complex_elements(line)
        self.assertEqual(element.display, "Firefox")
        self.assertEqual(element.extra, ("web browser",))
        self.assertEqual(element.tags, ("web", "gui"))
        self.assertEqual(element.payload, ["firefox", "--new-window"])
        self.assertEqual(element.colors, tag_colors(["web", "gui"]))

    def test_payload_defaults_to_display(self) -> None:
        (element,) = read_complex_elements('name="Terminal"')
        self.assertEqual(element.payload, ["Terminal"])
        self.assertEqual(element.colors, DEFAULT_COLORS)

    def test_doubled_quote_is_literal_quote(self) -> None:
        (element,) = read_complex_elements('name = "say ""hi"""')
        self.assertEqual(element.display, 'say "hi"')

    def test_explicit_colors_override_tag_colors(self) -> None:
        (element,) = read_complex_elements('name = "x" tags = "a" fg = "yellow" bg = "#102030"')
        self.assertEqual(element.colors, ("yellow", "#102030"))

    def test_repeated_tags_accumulate_and_empty_tags_are_dropped(self) -> None:
        (element,) = read_complex_elements('tags = "a" "" name = "x" tags = "b"')
        self.assertEqual(element.tags, ("a", "b"))

    def test_blank_lines_are_skipped_and_not_counted(self) -> None:
        text = 'name = "a"\n\n   \nname = "b"\n'
        elements = read_complex_elements(text, enumerate_=True)
        self.assertEqual([e.display for e in elements], ["a", "b"])
        self.assertEqual([e.payload for e in elements], [["0"], ["1"]])

    def test_explicit_value_wins_over_enumerate_index(self) -> None:
        elements = read_complex_elements('name = "a" value = "cmd"\nname = "b"', enumerate_=True)
        self.assertEqual([e.payload for e in elements], [["cmd"], ["1"]])

    def test_tab_between_pairs_is_an_error(self) -> None:
        with self.assertRaises(RecordParseError) as caught:
            read_complex_elements('name = "a"\ttags = "b"')
        self.assertEqual(caught.exception.column, 11)

    def test_surrounding_whitespace_is_ignored(self) -> None:
        (element,) = read_complex_elements('\t name = "a"\t')
        self.assertEqual(element.display, "a")

    def test_only_newlines_separate_records(self) -> None:
        elements = read_complex_elements('name = "a\x0cb"\nname = "c\u2028d"\n')
        self.assertEqual([e.display for e in elements], ["a\x0cb", "c\u2028d"])

    def test_unknown_key_reports_line_and_column(self) -> None:
        with self.assertRaises(RecordParseError) as caught:
            read_complex_elements('name = "a"\nname = "b" colour = "red"')
        self.assertEqual(caught.exception.line, 2)
        self.assertEqual(caught.exception.column, 12)
        self.assertIn("colour", str(caught.exception))

    def test_missing_name_is_an_error(self) -> None:
        with self.assertRaises(RecordParseError) as caught:
            read_complex_elements('tags = "a"')
        self.assertIn("without display", caught.exception.message)

    def test_color_with_two_values_is_an_error(self) -> None:
        with self.assertRaises(RecordParseError):
            read_complex_elements('name = "a" fg = "red" "blue"')

    def test_unterminated_string_is_an_error(self) -> None:
        with self.assertRaises(RecordParseError) as caught:
            read_complex_elements('name = "abc')
        self.assertEqual(caught.exception.line, 1)

    def test_missing_equals_is_an_error(self) -> None:
        with self.assertRaises(RecordParseError) as caught:
            read_complex_elements('name "a"')
        self.assertEqual(caught.exception.column, 6)


class TagColorTests(unittest.TestCase):
    def test_tag_colors_are_stable_white_on_hex(self) -> None:
        fg, bg = tag_colors(["web", "gui"])
        self.assertEqual(fg, "white")
        self.assertRegex(bg, r"^#[0-9a-f]{6}$")
        self.assertEqual(tag_colors(["web", "gui"]), (fg, bg))

    def test_channels_scale_by_256_and_wrap(self) -> None:
        with mock.patch("gridpick.records.colorsys.hsv_to_rgb", return_value=(1.0, 0.5, 0.0)):
            self.assertEqual(tag_colors(["x"]), ("white", "#008000"))

    def test_different_tags_get_different_colors(self) -> None:
        self.assertNotEqual(tag_colors(["web"]), tag_colors(["gui"]))


if __name__ == "__main__":
    unittest.main()
