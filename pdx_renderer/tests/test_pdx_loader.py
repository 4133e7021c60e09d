"""Tests for the persisted JSON document format."""
import json
import tempfile
import unittest
from pathlib import Path

from pdx_renderer.model.elements import DividerElement, DocumentElement, ImageElement, ParagraphElement
from pdx_renderer.model.sample_document import create_sample_document
from pdx_renderer.model.style_model import Color, Direction, FontWeight, Style, StyleSheet
from pdx_renderer.parser.pdx_loader import (
    DocumentLoadError,
    document_to_dict,
    dumps_document,
    load_document,
    loads_document,
    save_document,
)


def _payload(content) -> str:
    return json.dumps({"version": 1, "metadata": {"title": "T"}, "content": content})


class PdxWriterTest(unittest.TestCase):

    def test_layout_uses_external_tags(self) -> None:
        data = document_to_dict(create_sample_document())
        self.assertEqual(set(data), {"version", "metadata", "styles", "content"})
        self.assertEqual(data["styles"]["active_theme"], "default")
        children = data["content"]["Document"]["children"]
        self.assertEqual(children[0]["Heading"]["level"], 1)
        self.assertEqual(children[0]["Heading"]["style"], "heading1")
        self.assertEqual(children[2], "Divider")
        self.assertEqual(children[3]["Heading"]["runs"][0]["direction"], "RTL")
        self.assertEqual(data["styles"]["styles"]["heading1"]["font_weight"], "Bold")

    def test_arabic_is_not_escaped(self) -> None:
        self.assertIn("مستند", dumps_document(create_sample_document()))


class PdxReaderTest(unittest.TestCase):

    def test_round_trip(self) -> None:
        document = create_sample_document()
        self.assertEqual(loads_document(dumps_document(document)), document)

    def test_stored_direction_is_ignored(self) -> None:
        text = _payload(
            {
                "Document": {
                    "children": [
                        {"Paragraph": {"runs": [{"text": "مرحبا", "language": "en", "direction": "LTR"}], "style": "arabic"}}
                    ]
                }
            }
        )
        (paragraph,) = loads_document(text).content.children
        self.assertIsInstance(paragraph, ParagraphElement)
        self.assertEqual(paragraph.runs[0].direction, Direction.RTL)
        self.assertEqual(paragraph.runs[0].style_name, "paragraph")

    def test_unit_and_image_nodes(self) -> None:
        text = _payload(
            {"Document": {"children": ["PageBreak", {"Divider": None}, {"Image": {"path": "a.png", "width": 120}}]}}
        )
        page_break, divider, image = loads_document(text).content.children
        self.assertIsInstance(divider, DividerElement)
        self.assertIsInstance(image, ImageElement)
        self.assertEqual(image.width, 120.0)
        self.assertIsNone(image.height)
        self.assertEqual(image.alt_text, "")

    def test_block_root_is_wrapped(self) -> None:
        document = loads_document(_payload("Divider"))
        self.assertIsInstance(document.content, DocumentElement)
        self.assertIsInstance(document.content.children[0], DividerElement)

    def test_missing_sections_use_defaults(self) -> None:
        document = loads_document("{}")
        self.assertEqual(document.content.children, [])
        self.assertEqual(document.metadata.title, "Untitled Document")
        self.assertEqual(document.styles, StyleSheet())

    def test_partial_styles_fill_zero_defaults(self) -> None:
        text = json.dumps(
            {
                "styles": {
                    "styles": {"loud": {"font_size": 30, "font_weight": "Bold", "color": {"r": 300, "g": -4, "b": 7}}},
                    "active_theme": "sepia",
                }
            }
        )
        styles = loads_document(text).styles
        self.assertEqual(styles.active_theme, "sepia")
        loud = styles.get("loud")
        self.assertEqual(loud.font_size, 30.0)
        self.assertEqual(loud.font_weight, FontWeight.BOLD)
        self.assertEqual(loud.color, Color(255, 0, 7))
        self.assertEqual(loud.line_height, Style().line_height)

    def test_invalid_json(self) -> None:
        with self.assertRaises(DocumentLoadError):
            loads_document("{not json")

    def test_non_object_payload(self) -> None:
        with self.assertRaises(DocumentLoadError):
            loads_document("[1, 2]")

    def test_unknown_tag(self) -> None:
        with self.assertRaises(DocumentLoadError):
            loads_document(_payload({"Document": {"children": [{"Table": {}}]}}))
        with self.assertRaises(DocumentLoadError):
            loads_document(_payload({"Document": {"children": ["Spacer"]}}))

    def test_nested_document_rejected(self) -> None:
        with self.assertRaises(DocumentLoadError):
            loads_document(_payload({"Document": {"children": [{"Document": {"children": []}}]}}))

    def test_malformed_run_rejected(self) -> None:
        with self.assertRaises(DocumentLoadError):
            loads_document(_payload({"Paragraph": {"runs": ["plain"]}}))

    def test_wrongly_typed_values_rejected(self) -> None:
        payloads = [
            _payload({"Heading": {"level": None}}),
            _payload({"Heading": {"level": "two"}}),
            _payload({"Paragraph": {"runs": [{"text": 5}]}}),
            _payload({"Paragraph": {"runs": "text"}}),
            _payload({"List": {"items": {"content": []}}}),
            _payload({"CodeBlock": {"code": ["x"]}}),
            _payload({"Document": {"children": 3}}),
            json.dumps({"styles": []}),
            json.dumps({"styles": {"styles": ["heading1"]}}),
            json.dumps({"styles": {"styles": {"loud": 3}}}),
            json.dumps({"metadata": {"keywords": 3}}),
            json.dumps({"metadata": 3}),
            json.dumps({"version": "one"}),
            json.dumps({"version": None}),
        ]
        for text in payloads:
            with self.subTest(text=text):
                with self.assertRaises(DocumentLoadError):
                    loads_document(text)

    def test_unreadable_style_fields_fall_back_to_zero(self) -> None:
        text = json.dumps(
            {"styles": {"styles": {"odd": {"font_size": "big", "margin": [1, 2], "color": {"r": float("nan")}}}}}
        )
        self.assertEqual(loads_document(text).styles.get("odd"), Style())

    def test_heading_level_accepts_numeric_string(self) -> None:
        (heading,) = loads_document(_payload({"Heading": {"level": "3"}})).content.children
        self.assertEqual(heading.level, 3)


class PdxFileTest(unittest.TestCase):

    def test_save_and_load(self) -> None:
        document = create_sample_document()
        with tempfile.TemporaryDirectory() as tmp:
            path = save_document(document, Path(tmp) / "demo.pdx")
            self.assertTrue(path.exists())
            self.assertEqual(load_document(path), document)

    def test_missing_file_raises_os_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(OSError):
                load_document(Path(tmp) / "missing.pdx")


if __name__ == "__main__":
    unittest.main()
