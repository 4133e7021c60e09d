"""Unit tests for the markup block parser."""
import unittest

from pdx_renderer.model.elements import (
    CodeBlockElement,
    DividerElement,
    HeadingElement,
    ImageElement,
    ListElement,
    PageBreakElement,
    ParagraphElement,
)
from pdx_renderer.model.style_model import Direction
from pdx_renderer.parser.block_parser import is_bullet_line, parse_content, split_lines


class BlockParserTest(unittest.TestCase):
    """Line classification and block construction."""

    def test_empty_input_yields_empty_document(self) -> None:
        self.assertEqual(parse_content("").children, [])
        self.assertEqual(parse_content("\n\n   \n").children, [])

    def test_heading_level_and_style(self) -> None:
        (heading,) = parse_content("## Getting started").children
        self.assertIsInstance(heading, HeadingElement)
        self.assertEqual(heading.level, 2)
        self.assertEqual(heading.style_name, "heading2")
        self.assertEqual(heading.runs[0].text, "Getting started")
        self.assertEqual(heading.runs[0].style_name, "heading2")

    def test_heading_level_is_clamped(self) -> None:
        (heading,) = parse_content("######## Deep").children
        self.assertEqual(heading.level, 6)
        self.assertEqual(heading.style_name, "heading6")
        self.assertEqual(heading.runs[0].text, "Deep")

    def test_bare_hash_is_empty_heading(self) -> None:
        (heading,) = parse_content("#").children
        self.assertEqual(heading.level, 1)
        self.assertEqual(heading.runs[0].text, "")

    def test_code_block_keeps_lines_verbatim(self) -> None:
        text = "```python\n    def f():\n        return 1\n```\nafter"
        code, paragraph = parse_content(text).children
        self.assertIsInstance(code, CodeBlockElement)
        self.assertEqual(code.language, "python")
        self.assertEqual(code.code, "    def f():\n        return 1")
        self.assertIsInstance(paragraph, ParagraphElement)
        self.assertEqual(paragraph.runs[0].text, "after")

    def test_code_block_without_language_defaults_to_text(self) -> None:
        (code,) = parse_content("```\nx = 1\n```").children
        self.assertEqual(code.language, "text")

    def test_code_language_keeps_characters_after_fence(self) -> None:
        (code,) = parse_content("``` `js\nx\n```").children
        self.assertEqual(code.language, "`js")
        (code,) = parse_content("````md\nx\n```").children
        self.assertEqual(code.language, "`md")

    def test_code_block_lines_are_not_classified(self) -> None:
        (code,) = parse_content("```\n# not a heading\n- not a list\n---\n```").children
        self.assertEqual(code.code, "# not a heading\n- not a list\n---")

    def test_unclosed_code_fence_consumes_rest(self) -> None:
        (code,) = parse_content("```sh\necho hi\n# still code").children
        self.assertEqual(code.language, "sh")
        self.assertEqual(code.code, "echo hi\n# still code")

    def test_divider_and_page_break(self) -> None:
        divider, page_break = parse_content("---\n===").children
        self.assertIsInstance(divider, DividerElement)
        self.assertIsInstance(page_break, PageBreakElement)

    def test_list_collects_consecutive_bullets(self) -> None:
        text = "- first\n• second\n-third\nplain text"
        items, paragraph = parse_content(text).children
        self.assertIsInstance(items, ListElement)
        self.assertFalse(items.ordered)
        self.assertEqual([item.content[0].text for item in items.items], ["first", "second", "third"])
        self.assertEqual(items.items[0].content[0].style_name, "paragraph")
        self.assertIsInstance(paragraph, ParagraphElement)
        self.assertEqual(paragraph.runs[0].text, "plain text")

    def test_list_followed_by_heading_keeps_heading(self) -> None:
        items, heading = parse_content("- a\n- b\n# Next").children
        self.assertEqual(len(items.items), 2)
        self.assertIsInstance(heading, HeadingElement)

    def test_divider_token_ends_list(self) -> None:
        items, divider = parse_content("- a\n---").children
        self.assertIsInstance(items, ListElement)
        self.assertEqual(len(items.items), 1)
        self.assertIsInstance(divider, DividerElement)

    def test_image_line(self) -> None:
        (image,) = parse_content("![A cat](images/cat.png)").children
        self.assertIsInstance(image, ImageElement)
        self.assertEqual(image.path, "images/cat.png")
        self.assertEqual(image.alt_text, "A cat")
        self.assertIsNone(image.width)

    def test_image_with_trailing_text_is_paragraph(self) -> None:
        (paragraph,) = parse_content("![a](b.png) and more").children
        self.assertIsInstance(paragraph, ParagraphElement)
        self.assertEqual(paragraph.runs[0].text, "![a](b.png) and more")

    def test_arabic_paragraph_uses_arabic_style(self) -> None:
        (paragraph,) = parse_content("مرحبا بالعالم").children
        self.assertEqual(paragraph.style_name, "arabic")
        run = paragraph.runs[0]
        self.assertEqual(run.language, "ar")
        self.assertEqual(run.direction, Direction.RTL)

    def test_latin_paragraph_is_trimmed(self) -> None:
        (paragraph,) = parse_content("   Hello world   ").children
        self.assertEqual(paragraph.style_name, "paragraph")
        self.assertEqual(paragraph.runs[0].text, "Hello world")
        self.assertEqual(paragraph.runs[0].direction, Direction.LTR)

    def test_every_non_blank_line_lands_in_a_block(self) -> None:
        text = "# T\n\nline one\nline two\n- x\n\n- y\n![i](p)\n===\n"
        kinds = [type(node).__name__ for node in parse_content(text).children]
        self.assertEqual(
            kinds,
            [
                "HeadingElement",
                "ParagraphElement",
                "ParagraphElement",
                "ListElement",
                "ListElement",
                "ImageElement",
                "PageBreakElement",
            ],
        )

    def test_ordered_markers_are_not_recognised(self) -> None:
        (paragraph,) = parse_content("1. first").children
        self.assertIsInstance(paragraph, ParagraphElement)


class ReferenceInputsTest(unittest.TestCase):
    """Small canonical inputs and the exact trees they produce."""

    def test_single_heading(self) -> None:
        children = parse_content("# Hello").children
        self.assertEqual(len(children), 1)
        heading = children[0]
        self.assertEqual((heading.level, heading.style_name), (1, "heading1"))
        self.assertEqual([run.text for run in heading.runs], ["Hello"])

    def test_three_item_list(self) -> None:
        (items,) = parse_content("- a\n- b\n- c").children
        self.assertFalse(items.ordered)
        self.assertEqual([[run.text for run in item.content] for item in items.items], [["a"], ["b"], ["c"]])

    def test_fenced_code(self) -> None:
        (code,) = parse_content("```rust\ncode\n```").children
        self.assertEqual((code.language, code.code), ("rust", "code"))

    def test_arabic_paragraph(self) -> None:
        (paragraph,) = parse_content("مرحبا").children
        self.assertEqual(paragraph.runs[0].direction, Direction.RTL)
        self.assertEqual(paragraph.runs[0].style_name, "arabic")

    def test_lone_divider(self) -> None:
        children = parse_content("---").children
        self.assertEqual(len(children), 1)
        self.assertIsInstance(children[0], DividerElement)


class LineHelpersTest(unittest.TestCase):

    def test_split_lines_drops_single_trailing_newline(self) -> None:
        self.assertEqual(split_lines("a\nb\n"), ["a", "b"])
        self.assertEqual(split_lines("a\n\n"), ["a", ""])
        self.assertEqual(split_lines("a\r\nb"), ["a", "b"])

    def test_split_lines_drops_every_trailing_carriage_return(self) -> None:
        self.assertEqual(split_lines("line\r\r\nnext\r"), ["line", "next"])
        (code,) = parse_content("```\nline\r\r\n```").children
        self.assertEqual(code.code, "line")

    def test_bullet_detection(self) -> None:
        self.assertTrue(is_bullet_line("- item"))
        self.assertTrue(is_bullet_line("• item"))
        self.assertTrue(is_bullet_line("----"))
        self.assertFalse(is_bullet_line("---"))
        self.assertFalse(is_bullet_line("item"))


if __name__ == "__main__":
    unittest.main()
