"""Shared document traversal used by every renderer.

The preview, HTML and PDF renderers differ only in how they measure and
place text. ``DocumentProjector`` walks the tree once, decides run order,
shaping and anchoring, and delegates drawing to a ``RenderSurface``.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, List, Optional

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
    TextRun,
    derive_direction,
    runs_are_rtl,
)
from pdx_renderer.model.style_model import Direction, Style, StyleSheet, resolve_style
from pdx_renderer.renderer.resources import ImageResource, ImageStore
from pdx_renderer.utils.logger import get_logger
from pdx_renderer.utils.shaping import shape

LOGGER = get_logger(__name__)

BULLET_MARKER = "•"


class BlockKind(str, Enum):
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST_ITEM = "list_item"
    CODE = "code"
    CODE_LANGUAGE = "code_language"
    PLACEHOLDER = "placeholder"


@dataclass(slots=True, frozen=True)
class FontSpec:
    size: float
    bold: bool = False
    italic: bool = False
    monospace: bool = False


@dataclass(slots=True, frozen=True)
class Size:
    width: float
    height: float


@dataclass(slots=True, frozen=True)
class Position:
    x: float
    y: float


@dataclass(slots=True, frozen=True)
class BlockContext:
    """What is being drawn: block kind, its resolved style and direction."""

    kind: BlockKind
    style: Style
    direction: Direction = Direction.LTR
    level: int = 0
    element: Optional[Node] = None

    @property
    def is_rtl(self) -> bool:
        return self.direction is Direction.RTL


class RenderSurface(ABC):
    """Capabilities a render target exposes to the projector.

    ``left_edge`` and ``right_edge`` bound the content area in the surface's
    own units; right-to-left lines are anchored to ``right_edge``.
    """

    left_edge: float = 0.0
    right_edge: float = 0.0
    draws_list_markers: bool = True

    @abstractmethod
    def font_for(self, block: BlockContext) -> FontSpec:
        """Return the font used for text of ``block``."""

    @abstractmethod
    def measure(self, text: str, font: FontSpec) -> Size:
        """Return the extent of ``text`` drawn with ``font``."""

    @abstractmethod
    def next_line(self, block: BlockContext, font: FontSpec) -> float:
        """Reserve a line for ``block`` and return its vertical position."""

    @abstractmethod
    def place(self, text: str, position: Position, font: FontSpec, block: BlockContext) -> None:
        """Draw already shaped ``text`` at ``position``."""

    @abstractmethod
    def place_image(self, element: ImageElement, resource: ImageResource) -> None:
        """Draw a loaded image."""

    @abstractmethod
    def separator(self, page_break: bool) -> None:
        """Emit a divider, or a page break when ``page_break`` is set."""

    def line_start(self, block: BlockContext) -> float:
        """Left x of a left-to-right line of ``block``."""
        return self.left_edge

    def begin_block(self, block: BlockContext) -> None:
        pass

    def end_block(self, block: BlockContext) -> None:
        pass

    def begin_list(self, element: ListElement, style: Style) -> None:
        pass

    def end_list(self, element: ListElement, style: Style) -> None:
        pass


class DocumentProjector:
    """Walk a document tree and drive a ``RenderSurface``."""

    def __init__(
        self,
        surface: RenderSurface,
        styles: StyleSheet,
        images: Optional[ImageStore] = None,
    ) -> None:
        self._surface = surface
        self._styles = styles
        self._images = images

    def project(self, node: Node) -> None:
        if isinstance(node, DocumentElement):
            for child in node.children:
                self.project(child)
        elif isinstance(node, HeadingElement):
            self._project_runs(self._block(BlockKind.HEADING, node.style_name, node.runs, node, node.level), node.runs)
        elif isinstance(node, ParagraphElement):
            self._project_runs(self._block(BlockKind.PARAGRAPH, node.style_name, node.runs, node), node.runs)
        elif isinstance(node, ListElement):
            self._project_list(node)
        elif isinstance(node, CodeBlockElement):
            self._project_code(node)
        elif isinstance(node, ImageElement):
            self._project_image(node)
        elif isinstance(node, DividerElement):
            self._surface.separator(page_break=False)
        elif isinstance(node, PageBreakElement):
            self._surface.separator(page_break=True)
        else:
            LOGGER.warning("Skipping unsupported node: %s", type(node).__name__)

    # ------------------------------------------------------------------
    # Blocks
    def _block(
        self,
        kind: BlockKind,
        style_name: str,
        runs: List[TextRun],
        element: Optional[Node],
        level: int = 0,
    ) -> BlockContext:
        direction = Direction.RTL if runs_are_rtl(runs) else Direction.LTR
        return BlockContext(kind, resolve_style(self._styles, style_name), direction, level, element)

    def _project_runs(self, block: BlockContext, runs: List[TextRun], marker: Optional[str] = None) -> None:
        ordered_runs: Iterable[TextRun] = reversed(runs) if block.is_rtl else runs
        fragments = [shape(run.text) for run in ordered_runs]
        if marker is not None:
            if block.is_rtl:
                fragments.append(marker)
            else:
                fragments.insert(0, marker)
        self._surface.begin_block(block)
        self._emit_line(block, fragments)
        self._surface.end_block(block)

    def _project_list(self, element: ListElement) -> None:
        style = resolve_style(self._styles, element.style_name)
        self._surface.begin_list(element, style)
        for index, item in enumerate(element.items, start=1):
            block = self._block(BlockKind.LIST_ITEM, element.style_name, item.content, element, index)
            marker = None
            if self._surface.draws_list_markers:
                marker = self._list_marker(element.ordered, index, block.is_rtl)
            self._project_runs(block, item.content, marker)
        self._surface.end_list(element, style)

    def _list_marker(self, ordered: bool, index: int, rtl: bool) -> str:
        if not ordered:
            return BULLET_MARKER
        return f".{index}" if rtl else f"{index}."

    def _project_code(self, element: CodeBlockElement) -> None:
        # Code is always drawn left-to-right and never shaped.
        block = BlockContext(BlockKind.CODE, resolve_style(self._styles, element.style_name), element=element)
        label = replace(block, kind=BlockKind.CODE_LANGUAGE)
        self._surface.begin_block(block)
        self._emit_line(label, [element.language])
        for line in element.code.split("\n"):
            self._emit_line(block, [line])
        self._surface.end_block(block)

    def _project_image(self, element: ImageElement) -> None:
        resource = self._images.get(element.path) if self._images is not None else None
        if resource is not None:
            self._surface.place_image(element, resource)
            return
        text = f"[Image: {element.alt_text}]"
        block = BlockContext(BlockKind.PLACEHOLDER, Style(), derive_direction(text, ""), element=element)
        self._surface.begin_block(block)
        self._emit_line(block, [shape(text)])
        self._surface.end_block(block)

    # ------------------------------------------------------------------
    # Lines
    def _emit_line(self, block: BlockContext, fragments: List[str]) -> None:
        """Place fragments left to right, anchored to the edge matching the direction."""
        surface = self._surface
        font = surface.font_for(block)
        y = surface.next_line(block, font)
        gap = surface.measure(" ", font).width
        widths = [surface.measure(fragment, font).width for fragment in fragments]
        total = sum(widths) + gap * max(len(fragments) - 1, 0)
        x = surface.right_edge - total if block.is_rtl else surface.line_start(block)
        for fragment, width in zip(fragments, widths):
            surface.place(fragment, Position(x, y), font, block)
            x += width + gap


def project_document(
    node: Node,
    surface: RenderSurface,
    styles: StyleSheet,
    images: Optional[ImageStore] = None,
) -> RenderSurface:
    """Project ``node`` onto ``surface`` and return the surface."""
    DocumentProjector(surface, styles, images).project(node)
    return surface
