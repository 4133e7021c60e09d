"""Raster preview of a pdx document drawn with Pillow."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Dict, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from pdx_renderer.model.document_model import PdxDocument
from pdx_renderer.model.elements import ImageElement, ListElement
from pdx_renderer.model.style_model import FontWeight, Style
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

PAGE_BREAK_LABEL = "— Page Break —"
DEFAULT_LINE_HEIGHT = 1.4
DIVIDER_SPACING = 20.0
SEPARATOR_COLOR = (221, 221, 221)
LABEL_COLOR = (120, 120, 120)
CODE_BACKGROUND = (244, 244, 244)

_FALLBACK_FONTS = {
    "regular": "DejaVuSans.ttf",
    "bold": "DejaVuSans-Bold.ttf",
    "italic": "DejaVuSans-Oblique.ttf",
    "mono": "DejaVuSansMono.ttf",
}

PreviewFont = ImageFont.FreeTypeFont | ImageFont.ImageFont


class PreviewSurface(RenderSurface):
    """Pillow canvas that grows downwards as content is placed."""

    def __init__(self, config: RenderConfig) -> None:
        self._config = config
        self._image = Image.new("RGB", (config.canvas_width, config.canvas_height), config.background_color.as_tuple())
        self._draw = ImageDraw.Draw(self._image)
        self._fonts: Dict[Tuple[str, int], PreviewFont] = {}
        self._y = config.page_margin * config.zoom
        self.left_edge = config.page_margin * config.zoom
        self.right_edge = config.canvas_width - config.page_margin * config.zoom

    @property
    def image(self) -> Image.Image:
        return self._image

    @property
    def cursor(self) -> float:
        return self._y

    # ------------------------------------------------------------------
    # Text
    def font_for(self, block: BlockContext) -> FontSpec:
        config = self._config
        if block.kind is BlockKind.CODE:
            return FontSpec(config.code_font_size * config.zoom, monospace=True)
        if block.kind is BlockKind.CODE_LANGUAGE:
            return FontSpec(config.code_language_font_size * config.zoom, italic=True)
        if block.kind is BlockKind.PLACEHOLDER:
            return FontSpec(config.font_size(0), italic=True)
        bold = block.style.font_weight is FontWeight.BOLD
        return FontSpec(config.font_size(block.style.font_size), bold=bold)

    def measure(self, text: str, font: FontSpec) -> Size:
        return Size(self._draw.textlength(text, font=self._font(font)), font.size)

    def begin_block(self, block: BlockContext) -> None:
        self._y += block.style.margin.top * self._config.zoom

    def next_line(self, block: BlockContext, font: FontSpec) -> float:
        line_height = block.style.line_height if block.style.line_height > 0 else DEFAULT_LINE_HEIGHT
        y = self._y
        self._y += font.size * line_height
        self._ensure_height(self._y)
        if block.kind is BlockKind.CODE:
            self._draw.rectangle(
                (self.left_edge, y, self.right_edge, self._y),
                fill=CODE_BACKGROUND,
            )
        return y

    def place(self, text: str, position: Position, font: FontSpec, block: BlockContext) -> None:
        fill = LABEL_COLOR if block.kind is BlockKind.CODE_LANGUAGE else self._text_color(block.style)
        self._draw.text((position.x, position.y), text, font=self._font(font), fill=fill)

    def end_block(self, block: BlockContext) -> None:
        self._y += block.style.margin.bottom * self._config.zoom

    def end_list(self, element: ListElement, style: Style) -> None:
        self._y += style.margin.bottom * self._config.zoom

    # ------------------------------------------------------------------
    # Non-text blocks
    def place_image(self, element: ImageElement, resource: ImageResource) -> None:
        zoom = self._config.zoom
        width, height = resource.size
        if element.width is not None and element.height is not None:
            width, height = element.width, element.height
        elif element.width is not None:
            height = height * element.width / width
            width = element.width
        elif element.height is not None:
            width = width * element.height / height
            height = element.height
        width, height = width * zoom, height * zoom
        max_width = self.right_edge - self.left_edge
        if width > max_width:
            height *= max_width / width
            width = max_width
        size = (max(int(width), 1), max(int(height), 1))
        picture = resource.image.convert("RGBA").resize(size)
        top = int(self._y)
        self._ensure_height(top + size[1])
        self._image.paste(picture, (int(self.left_edge), top), picture)
        self._y = top + size[1] + self._config.image_spacing * zoom

    def separator(self, page_break: bool) -> None:
        zoom = self._config.zoom
        middle = self._y + DIVIDER_SPACING * zoom / 2
        self._ensure_height(self._y + DIVIDER_SPACING * zoom * (2 if page_break else 1))
        self._draw.line((self.left_edge, middle, self.right_edge, middle), fill=SEPARATOR_COLOR, width=3 if page_break else 1)
        self._y += DIVIDER_SPACING * zoom
        if page_break:
            font = FontSpec(self._config.code_language_font_size * zoom, italic=True)
            width = self.measure(PAGE_BREAK_LABEL, font).width
            x = (self.left_edge + self.right_edge - width) / 2
            self._draw.text((x, self._y), PAGE_BREAK_LABEL, font=self._font(font), fill=LABEL_COLOR)
            self._y += DIVIDER_SPACING * zoom

    # ------------------------------------------------------------------
    # Helpers
    def _text_color(self, style: Style) -> Tuple[int, int, int]:
        if style == Style():
            return self._config.text_color.as_tuple()
        return style.color.as_tuple()

    def _ensure_height(self, bottom: float) -> None:
        required = int(bottom + self._config.page_margin * self._config.zoom)
        if required <= self._image.height:
            return
        height = max(required, self._image.height * 2)
        grown = Image.new("RGB", (self._image.width, height), self._config.background_color.as_tuple())
        grown.paste(self._image, (0, 0))
        self._image = grown
        self._draw = ImageDraw.Draw(self._image)

    def _font(self, spec: FontSpec) -> PreviewFont:
        variant = "mono" if spec.monospace else "bold" if spec.bold else "italic" if spec.italic else "regular"
        size = max(int(round(spec.size)), 1)
        key = (variant, size)
        if key not in self._fonts:
            self._fonts[key] = self._load_font(variant, size)
        return self._fonts[key]

    def _load_font(self, variant: str, size: int) -> PreviewFont:
        configured = self._config.mono_font_path if variant == "mono" else self._config.font_path
        for candidate in (configured, _FALLBACK_FONTS[variant], _FALLBACK_FONTS["regular"]):
            if not candidate:
                continue
            try:
                # Text is already shaped into visual order; no second bidi pass.
                return ImageFont.truetype(candidate, size, layout_engine=ImageFont.Layout.BASIC)
            except OSError:
                LOGGER.debug("Font %s not available", candidate)
        return ImageFont.load_default(size=size)


class PreviewRenderer:
    """Render the document to a PNG snapshot of the interactive preview."""

    def __init__(self, output_path: Path, config: Optional[RenderConfig] = None, images: Optional[ImageStore] = None) -> None:
        self._output_path = output_path
        self._config = config or RenderConfig()
        self._images = images

    def render(self, document: PdxDocument) -> Path:
        data = self.render_bytes(document)
        self._output_path.write_bytes(data)
        LOGGER.info("Wrote preview image to %s", self._output_path)
        return self._output_path

    def render_image(self, document: PdxDocument) -> Image.Image:
        surface = PreviewSurface(self._config)
        project_document(document.content, surface, document.styles, self._images)
        return surface.image

    def render_bytes(self, document: PdxDocument) -> bytes:
        buffer = BytesIO()
        self.render_image(document).save(buffer, format="PNG")
        return buffer.getvalue()
