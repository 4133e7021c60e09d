"""Render a pdx document into a standalone HTML document."""
from __future__ import annotations

from html import escape
from pathlib import Path
from typing import List, Optional

from pdx_renderer.model.document_model import PdxDocument
from pdx_renderer.model.elements import CodeBlockElement, ImageElement, ListElement
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
from pdx_renderer.renderer.utils import css_declarations, style_to_css
from pdx_renderer.utils.logger import get_logger

LOGGER = get_logger(__name__)

# Rough glyph advance used only to keep fragment positions monotonic; the
# browser does the real layout.
_AVERAGE_ADVANCE = 0.5

_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="{lang}" dir="auto">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title}</title>
  <style>
    body {{ font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif, 'Noto Sans Arabic'; max-width: 800px; margin: 40px auto; padding: 20px; line-height: 1.8; color: {text}; background: {background}; }}
    .rtl {{ direction: rtl; text-align: right; }}
    .ltr {{ direction: ltr; text-align: left; }}
    pre {{ background: #f4f4f4; padding: 15px; border-radius: 5px; overflow-x: auto; }}
    .code-language {{ font-style: italic; font-size: 11px; }}
    hr {{ margin: 20px 0; border: none; border-top: 1px solid #ddd; }}
    hr.page-break {{ border-top: 3px double #ddd; }}
    img {{ max-width: 100%; height: auto; margin: 10px 0; }}
    .image-placeholder {{ font-style: italic; }}
  </style>
</head>
<body>
{body}
</body>
</html>
"""


class HtmlSurface(RenderSurface):
    """Collects markup for each block; positions are ignored by the browser."""

    draws_list_markers = False

    def __init__(self) -> None:
        self.parts: List[str] = []
        self._lines: List[List[str]] = []

    def font_for(self, block: BlockContext) -> FontSpec:
        return FontSpec(size=block.style.font_size, monospace=block.kind is BlockKind.CODE)

    def measure(self, text: str, font: FontSpec) -> Size:
        return Size(len(text) * font.size * _AVERAGE_ADVANCE, font.size)

    def next_line(self, block: BlockContext, font: FontSpec) -> float:
        if block.kind is not BlockKind.CODE_LANGUAGE:
            self._lines.append([])
        return 0.0

    def place(self, text: str, position: Position, font: FontSpec, block: BlockContext) -> None:
        if block.kind is BlockKind.CODE_LANGUAGE:
            return
        self._lines[-1].append(text)

    def begin_block(self, block: BlockContext) -> None:
        self._lines = []

    def end_block(self, block: BlockContext) -> None:
        if block.kind is BlockKind.CODE:
            self.parts.append(self._code_markup(block))
            return
        text = " ".join(" ".join(line) for line in self._lines)
        direction = "rtl" if block.is_rtl else "ltr"
        content = escape(text)
        if block.is_rtl:
            # Shaped text is already in visual order; stop the browser reordering it.
            content = f'<bdo dir="ltr">{content}</bdo>'
        attributes = f'class="{direction}" dir="{direction}"'
        css = css_declarations(style_to_css(block.style))
        if css:
            attributes += f' style="{escape(css)}"'
        if block.kind is BlockKind.HEADING:
            self.parts.append(f"<h{block.level} {attributes}>{content}</h{block.level}>")
        elif block.kind is BlockKind.LIST_ITEM:
            self.parts.append(f"  <li {attributes}>{content}</li>")
        elif block.kind is BlockKind.PLACEHOLDER:
            self.parts.append(f'<p class="image-placeholder {direction}" dir="{direction}">{content}</p>')
        else:
            self.parts.append(f"<p {attributes}>{content}</p>")

    def _code_markup(self, block: BlockContext) -> str:
        element = block.element
        language = element.language if isinstance(element, CodeBlockElement) else "text"
        code = "\n".join(" ".join(line) for line in self._lines)
        return (
            f'<div class="code-block ltr" dir="ltr"><div class="code-language">{escape(language)}</div>'
            f'<pre><code class="language-{escape(language)}">{escape(code)}</code></pre></div>'
        )

    def begin_list(self, element: ListElement, style: Style) -> None:
        tag = "ol" if element.ordered else "ul"
        css = css_declarations(style_to_css(style))
        style_attr = f' style="{escape(css)}"' if css else ""
        self.parts.append(f"<{tag}{style_attr}>")

    def end_list(self, element: ListElement, style: Style) -> None:
        self.parts.append("</ol>" if element.ordered else "</ul>")

    def place_image(self, element: ImageElement, resource: ImageResource) -> None:
        attributes = [f'src="{resource.data_uri()}"', f'alt="{escape(element.alt_text)}"']
        if element.width is not None:
            attributes.append(f'width="{element.width:g}"')
        if element.height is not None:
            attributes.append(f'height="{element.height:g}"')
        self.parts.append(f"<img {' '.join(attributes)} />")

    def separator(self, page_break: bool) -> None:
        self.parts.append('<hr class="page-break"/>' if page_break else "<hr/>")


class HtmlRenderer:
    """Produce a standalone HTML representation of the document."""

    def __init__(self, output_path: Path, config: Optional[RenderConfig] = None, images: Optional[ImageStore] = None) -> None:
        self._output_path = output_path
        self._config = config or RenderConfig()
        self._images = images

    def render(self, document: PdxDocument) -> Path:
        html = self.render_to_string(document)
        self._output_path.write_text(html, encoding="utf-8")
        LOGGER.info("Wrote HTML export to %s", self._output_path)
        return self._output_path

    def render_to_string(self, document: PdxDocument) -> str:
        surface = HtmlSurface()
        project_document(document.content, surface, document.styles, self._images)
        return _PAGE_TEMPLATE.format(
            lang=escape(document.metadata.language),
            title=escape(document.metadata.title),
            text=self._config.text_color.to_hex(),
            background=self._config.background_color.to_hex(),
            body="\n".join(surface.parts),
        )
