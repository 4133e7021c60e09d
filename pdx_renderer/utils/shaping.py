"""Bidirectional text shaping shared by every render target.

Arabic letters change glyph depending on their neighbours, and mixed
Arabic/Latin runs must be reordered before a renderer that only knows how
to draw left-to-right glyph sequences can use them. ``shape`` performs both
steps; renderers call it on each run immediately before measuring or drawing.
"""
from __future__ import annotations

import unicodedata

import arabic_reshaper
from bidi.algorithm import get_display

from pdx_renderer.model.style_model import Direction

ARABIC_BLOCK_START = "\u0600"
ARABIC_BLOCK_END = "\u06ff"

_RTL_BIDI_CLASSES = ("R", "AL", "RLE", "RLO")
_LTR_BIDI_CLASSES = ("L", "LRE", "LRO")


def contains_arabic(text: str) -> bool:
    """Return True when any character of ``text`` lies in the Arabic block."""
    return any(ARABIC_BLOCK_START <= char <= ARABIC_BLOCK_END for char in text)


def is_right_to_left_script(text: str) -> bool:
    """Return True for text written (at least partly) in a right-to-left script."""
    return contains_arabic(text)


def detect_direction(text: str) -> Direction:
    """Return the direction of the first strong character, LTR when there is none."""
    for char in text:
        bidi_class = unicodedata.bidirectional(char)
        if bidi_class in _RTL_BIDI_CLASSES:
            return Direction.RTL
        if bidi_class in _LTR_BIDI_CLASSES:
            return Direction.LTR
    return Direction.LTR


def shape(text: str) -> str:
    """Return ``text`` reshaped and reordered for left-to-right glyph drawing.

    Text without Arabic characters is returned unchanged. Otherwise the
    letters are replaced by their contextual presentation forms and the
    result is reordered by the Unicode bidirectional algorithm, treating the
    string as one paragraph whose base direction comes from its first strong
    character.
    """
    if not contains_arabic(text):
        return text
    reshaped = arabic_reshaper.reshape(text)
    return get_display(reshaped)
