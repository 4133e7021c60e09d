"""Render a pdx document into a paginated A4 PDF using ReportLab.

Layout uses fixed font sizes per block kind and fixed vertical advances in
millimetres; the document style sheet is not consulted here.
"""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from pdx_renderer.model.document_model import PdxDocument
from pdx_renderer.model.elements import ImageElement, ListElement
from pdx_renderer.model.style_model import Style
from pdx_renderer.renderer.config import RenderConfig
from pdx_renderer.renderer.projection import (
    BlockContext,
    BlockKind,
    FontSpec,
    Position,
    RenderSurface,
    Size,
    project_document,
)
from pdx_renderer.renderer.resources import ImageResource, ImageStore
from pdx_renderer.utils.logger import get_logger

LOGGER = get_logger(__name__)

PAGE_TOP_MM = 270.0
PAGE_BOTTOM_MM = 20.0
LEFT_EDGE_MM = 20.0
RTL_ANCHOR_MM = 190.0
LIST_INDENT_MM = 5.0

HEADING_SIZES = {1: 24.0, 2: 20.0}
HEADING_DEFAULT_SIZE = 16.0
BODY_SIZE = 12.0
CODE_SIZE = 10.0

PARAGRAPH_ADVANCE_MM = 20.0
LIST_ITEM_ADVANCE_MM = 15.0
LIST_TRAILER_MM = 5.0
DIVIDER_ADVANCE_MM = 20.0
CODE_LINE_ADVANCE_MM = 6.0
IMAGE_SPACING_MM = 5.0
PIXEL_MM = 25.4 / 96

SANS_FONT = "PdxSans"
MONO_FONT = "PdxMono"


def heading_size(level: int) -> float:
    return HEADING_SIZES.get(level, HEADING_DEFAULT_SIZE)


def heading_advance(level: int) -> float:
    return heading_size(level) * 0.5 + 10.0


class PdfSurface(RenderSurface):
    """Draws projected lines on a ReportLab canvas, positions in millimetres."""

    left_edge = LEFT_EDGE_MM
    right_edge = RTL_ANCHOR_MM

    def __init__(self, target: BytesIO, config: RenderConfig) -> None:
        self._canvas = canvas.Canvas(target, pagesize=A4)
        self._fonts = _register_fonts(config)
        self._y = PAGE_TOP_MM
        self._dirty = False
        self.page_count = 0

    @property
    def canvas(self) -> canvas.Canvas:
        return self._canvas

    @property
    def cursor(self) -> float:
        """Baseline of the next line, in millimetres from the page bottom."""
        return self._y

    def font_for(self, block: BlockContext) -> FontSpec:
        if block.kind is BlockKind.HEADING:
            return FontSpec(heading_size(block.level), bold=True)
        if block.kind in (BlockKind.CODE, BlockKind.CODE_LANGUAGE):
            return FontSpec(CODE_SIZE, italic=block.kind is BlockKind.CODE_LANGUAGE, monospace=True)
        return FontSpec(BODY_SIZE)

    def measure(self, text: str, font: FontSpec) -> Size:
        width = pdfmetrics.stringWidth(text, self._font_name(font), font.size)
        return Size(width / mm, font.size / mm)

    def next_line(self, block: BlockContext, font: FontSpec) -> float:
        self._ensure_room()
        y = self._y
        self._y -= _line_advance(block)
        return y

    def line_start(self, block: BlockContext) -> float:
        if block.kind is BlockKind.LIST_ITEM:
            return LEFT_EDGE_MM + LIST_INDENT_MM
        return LEFT_EDGE_MM

    def place(self, text: str, position: Position, font: FontSpec, block: BlockContext) -> None:
        self._canvas.setFont(self._font_name(font), font.size)
        self._canvas.drawString(position.x * mm, position.y * mm, text)
        self._dirty = True

    def end_list(self, element: ListElement, style: Style) -> None:
        self._y -= LIST_TRAILER_MM

    def place_image(self, element: ImageElement, resource: ImageResource) -> None:
        pixel_width, pixel_height = resource.size
        width = (element.width or pixel_width) * PIXEL_MM
        height = (element.height or pixel_height) * PIXEL_MM
        max_width = RTL_ANCHOR_MM - LEFT_EDGE_MM
        if width > max_width:
            height *= max_width / width
            width = max_width
        if self._y - height < PAGE_BOTTOM_MM and self._dirty:
            self.new_page()
        bottom = self._y - height
        self._canvas.drawImage(ImageReader(resource.image), LEFT_EDGE_MM * mm, bottom * mm, width * mm, height * mm)
        self._dirty = True
        self._y = bottom - IMAGE_SPACING_MM

    def separator(self, page_break: bool) -> None:
        if page_break:
            self.new_page()
            return
        self._ensure_room()
        line_y = (self._y - DIVIDER_ADVANCE_MM / 2) * mm
        self._canvas.setStrokeColorRGB(0.87, 0.87, 0.87)
        self._canvas.line(LEFT_EDGE_MM * mm, line_y, RTL_ANCHOR_MM * mm, line_y)
        self._dirty = True
        self._y -= DIVIDER_ADVANCE_MM

    def new_page(self) -> None:
        self._canvas.showPage()
        self.page_count += 1
        self._dirty = False
        self._y = PAGE_TOP_MM

    def finish(self) -> None:
        if self._dirty or self.page_count == 0:
            self.new_page()
        self._canvas.save()

    def _ensure_room(self) -> None:
        if self._y < PAGE_BOTTOM_MM:
            self.new_page()

    def _font_name(self, font: FontSpec) -> str:
        if font.monospace:
            return self._fonts["mono"]
        if font.bold:
            return self._fonts["bold"]
        if font.italic:
            return self._fonts["italic"]
        return self._fonts["regular"]


def _line_advance(block: BlockContext) -> float:
    if block.kind is BlockKind.HEADING:
        return heading_advance(block.level)
    if block.kind is BlockKind.LIST_ITEM:
        return LIST_ITEM_ADVANCE_MM
    if block.kind in (BlockKind.CODE, BlockKind.CODE_LANGUAGE):
        return CODE_LINE_ADVANCE_MM
    return PARAGRAPH_ADVANCE_MM


def _register_fonts(config: RenderConfig) -> dict[str, str]:
    """Register configured TrueType fonts, falling back to the standard PDF fonts."""
    fonts = {
        "regular": "Helvetica",
        "bold": "Helvetica-Bold",
        "italic": "Helvetica-Oblique",
        "mono": "Courier",
    }
    if config.font_path:
        pdfmetrics.registerFont(TTFont(SANS_FONT, config.font_path))
        fonts.update(regular=SANS_FONT, bold=SANS_FONT, italic=SANS_FONT)
    if config.mono_font_path:
        pdfmetrics.registerFont(TTFont(MONO_FONT, config.mono_font_path))
        fonts["mono"] = MONO_FONT
    return fonts


class PdfRenderer:
    """Write the document as an A4 PDF carrying title, author and keywords."""

    def __init__(self, output_path: Path, config: Optional[RenderConfig] = None, images: Optional[ImageStore] = None) -> None:
        self._output_path = output_path
        self._config = config or RenderConfig()
        self._images = images
        self.page_count = 0

    def render(self, document: PdxDocument) -> Path:
        data = self.render_bytes(document)
        self._output_path.write_bytes(data)
        LOGGER.info("Wrote %d page PDF to %s", self.page_count, self._output_path)
        return self._output_path

    def render_bytes(self, document: PdxDocument) -> bytes:
        buffer = BytesIO()
        surface = PdfSurface(buffer, self._config)
        metadata = document.metadata
        surface.canvas.setTitle(metadata.title)
        surface.canvas.setAuthor(metadata.author)
        surface.canvas.setKeywords(metadata.keywords)
        project_document(document.content, surface, document.styles, self._images)
        surface.finish()
        self.page_count = surface.page_count
        return buffer.getvalue()
