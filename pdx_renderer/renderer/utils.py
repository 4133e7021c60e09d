"""Common helpers shared by renderer implementations."""
from __future__ import annotations

from typing import Dict

from pdx_renderer.model.style_model import EdgeInsets, FontWeight, Style, TextAlign

_FONT_WEIGHTS = {FontWeight.BOLD: "700", FontWeight.LIGHT: "300"}
_TEXT_ALIGN = {TextAlign.END: "end", TextAlign.CENTER: "center", TextAlign.JUSTIFY: "justify"}


def style_to_css(style: Style) -> Dict[str, str]:
    """Convert a resolved style into CSS properties. The default style maps to nothing."""
    css: Dict[str, str] = {}
    if style == Style():
        return css
    if style.font_size > 0:
        css["font-size"] = f"{style.font_size:g}px"
    if style.font_weight in _FONT_WEIGHTS:
        css["font-weight"] = _FONT_WEIGHTS[style.font_weight]
    css["color"] = style.color.to_hex()
    if style.text_align in _TEXT_ALIGN:
        css["text-align"] = _TEXT_ALIGN[style.text_align]
    if style.line_height > 0:
        css["line-height"] = f"{style.line_height:g}"
    if style.margin != EdgeInsets():
        css["margin"] = insets_to_css(style.margin)
    if style.padding != EdgeInsets():
        css["padding"] = insets_to_css(style.padding)
    return css


def insets_to_css(insets: EdgeInsets) -> str:
    return f"{insets.top:g}px {insets.right:g}px {insets.bottom:g}px {insets.left:g}px"


def css_declarations(css: Dict[str, str]) -> str:
    return "; ".join(f"{key}: {value}" for key, value in css.items())
