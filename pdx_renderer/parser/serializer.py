"""Serialize a document tree back into the line-oriented markup buffer.

The output is canonical rather than faithful: bullets become ``-``, runs are
joined with single spaces and blocks are separated by one blank line.
Re-parsing the output yields the same tree as the first parse.
"""
from __future__ import annotations

from typing import List

from pdx_renderer.model.elements import (
    CodeBlockElement,
    DividerElement,
    DocumentElement,
    HeadingElement,
    ImageElement,
    ListElement,
    Node,
    PageBreakElement,
    ParagraphElement,
    runs_text,
)
from pdx_renderer.parser.block_parser import CODE_FENCE, DIVIDER_TOKEN, PAGE_BREAK_TOKEN

BLOCK_SEPARATOR = "\n\n"


def serialize_content(node: Node) -> str:
    """Return the markup text for ``node`` and, for a document, all of its children."""
    if isinstance(node, DocumentElement):
        return BLOCK_SEPARATOR.join(serialize_content(child) for child in node.children)
    if isinstance(node, HeadingElement):
        return f"{'#' * node.level} {runs_text(node.runs)}"
    if isinstance(node, ParagraphElement):
        return runs_text(node.runs)
    if isinstance(node, ListElement):
        return _serialize_list(node)
    if isinstance(node, CodeBlockElement):
        return f"{CODE_FENCE}{node.language}\n{node.code}\n{CODE_FENCE}"
    if isinstance(node, ImageElement):
        return f"![{node.alt_text}]({node.path})"
    if isinstance(node, DividerElement):
        return DIVIDER_TOKEN
    if isinstance(node, PageBreakElement):
        return PAGE_BREAK_TOKEN
    raise TypeError(f"Cannot serialize {type(node).__name__}")


def _serialize_list(node: ListElement) -> str:
    lines: List[str] = []
    for index, item in enumerate(node.items, start=1):
        marker = f"{index}." if node.ordered else "-"
        lines.append(f"{marker} {runs_text(item.content)}")
    return "\n".join(lines)
