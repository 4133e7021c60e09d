"""Parse the line-oriented markup buffer into a document tree."""
from __future__ import annotations

import re
from typing import List

from pdx_renderer.model.elements import (
    BlockElement,
    CodeBlockElement,
    DividerElement,
    DocumentElement,
    HeadingElement,
    ImageElement,
    ListElement,
    ListItem,
    PageBreakElement,
    ParagraphElement,
    TextRun,
)
from pdx_renderer.utils.logger import get_logger
from pdx_renderer.utils.shaping import contains_arabic

LOGGER = get_logger(__name__)

CODE_FENCE = "```"
DIVIDER_TOKEN = "---"
PAGE_BREAK_TOKEN = "==="
BULLET_MARKERS = ("-", "•")
DEFAULT_CODE_LANGUAGE = "text"

IMAGE_PATTERN = re.compile(r"!\[(?P<alt>.*?)\]\((?P<path>[^)]*)\)")


def split_lines(text: str) -> List[str]:
    """Split on ``\\n``, dropping one trailing empty line and trailing ``\\r`` characters."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line.rstrip("\r") for line in lines]


def is_bullet_line(line: str) -> bool:
    """True for a trimmed line that continues or starts a list."""
    return line.startswith(BULLET_MARKERS) and line != DIVIDER_TOKEN


class BlockParser:
    """Single forward scan over lines; every non-blank line lands in some block."""

    def __init__(self, text: str) -> None:
        self._lines = split_lines(text)

    def parse(self) -> DocumentElement:
        children: List[BlockElement] = []
        lines = self._lines
        i = 0
        while i < len(lines):
            line = lines[i].strip()
            if not line:
                i += 1
                continue

            image = self._parse_image(line)
            if image is not None:
                children.append(image)
            elif line.startswith("#"):
                children.append(self._parse_heading(line))
            elif line.startswith(CODE_FENCE):
                block, i = self._parse_code_block(line, i)
                children.append(block)
            elif line == DIVIDER_TOKEN:
                children.append(DividerElement())
            elif line == PAGE_BREAK_TOKEN:
                children.append(PageBreakElement())
            elif is_bullet_line(line):
                block, i = self._parse_list(i)
                children.append(block)
                # The list loop stops on the first non-bullet line; step back so
                # the increment below lands on it instead of skipping it.
                i -= 1
            else:
                children.append(self._parse_paragraph(line))
            i += 1

        LOGGER.debug("Parsed %d blocks from %d lines", len(children), len(lines))
        return DocumentElement(children=children)

    def _parse_image(self, line: str) -> ImageElement | None:
        match = IMAGE_PATTERN.fullmatch(line)
        if match is None:
            return None
        return ImageElement(path=match.group("path"), alt_text=match.group("alt"))

    def _parse_heading(self, line: str) -> HeadingElement:
        level = len(line) - len(line.lstrip("#"))
        text = line.lstrip("#").strip()
        heading = HeadingElement(level=level)
        heading.runs.append(TextRun.from_text(text, heading.style_name))
        return heading

    def _parse_code_block(self, line: str, start: int) -> tuple[CodeBlockElement, int]:
        language = line[len(CODE_FENCE):].strip() or DEFAULT_CODE_LANGUAGE
        lines = self._lines
        i = start + 1
        code_lines: List[str] = []
        while i < len(lines) and not lines[i].strip().startswith(CODE_FENCE):
            code_lines.append(lines[i])
            i += 1
        if i >= len(lines):
            LOGGER.debug("Code fence opened on line %d is never closed", start + 1)
        return CodeBlockElement(code="\n".join(code_lines), language=language), i

    def _parse_list(self, start: int) -> tuple[ListElement, int]:
        lines = self._lines
        items: List[ListItem] = []
        i = start
        while i < len(lines):
            line = lines[i].strip()
            if not is_bullet_line(line):
                break
            text = line.lstrip("-").lstrip("•").strip()
            items.append(ListItem(content=[TextRun.from_text(text, "paragraph")]))
            i += 1
        return ListElement(items=items, ordered=False), i

    def _parse_paragraph(self, line: str) -> ParagraphElement:
        style_name = "arabic" if contains_arabic(line) else "paragraph"
        return ParagraphElement(runs=[TextRun.from_text(line, style_name)], style_name=style_name)


def parse_content(text: str) -> DocumentElement:
    """Parse a raw markup buffer. Never raises; unknown lines become paragraphs."""
    return BlockParser(text).parse()
