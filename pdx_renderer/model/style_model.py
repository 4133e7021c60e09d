"""Style model: typographic records keyed by name, with lookup fallback."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional


class Direction(str, Enum):
    """Writing direction of a run or style."""

    LTR = "LTR"
    RTL = "RTL"
    AUTO = "Auto"


class FontWeight(str, Enum):
    NORMAL = "Normal"
    BOLD = "Bold"
    LIGHT = "Light"


class TextAlign(str, Enum):
    START = "Start"
    END = "End"
    CENTER = "Center"
    JUSTIFY = "Justify"


@dataclass(slots=True, frozen=True)
class Color:
    """Opaque RGB colour with 8-bit channels."""

    r: int = 0
    g: int = 0
    b: int = 0

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)


@dataclass(slots=True, frozen=True)
class EdgeInsets:
    """Spacing around a block, in unscaled points."""

    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0

    @classmethod
    def all(cls, value: float) -> "EdgeInsets":
        return cls(value, value, value, value)

    def scaled(self, factor: float) -> "EdgeInsets":
        return EdgeInsets(self.top * factor, self.right * factor, self.bottom * factor, self.left * factor)


@dataclass(slots=True)
class Style:
    """Resolved style record. The zero-valued instance is the structural default."""

    font_size: float = 0.0
    font_weight: FontWeight = FontWeight.NORMAL
    color: Color = field(default_factory=Color)
    text_align: TextAlign = TextAlign.START
    direction: Direction = Direction.AUTO
    line_height: float = 0.0
    margin: EdgeInsets = field(default_factory=EdgeInsets)
    padding: EdgeInsets = field(default_factory=EdgeInsets)


def _default_styles() -> Dict[str, Style]:
    return {
        "heading1": Style(
            font_size=28.0,
            font_weight=FontWeight.BOLD,
            color=Color(0, 0, 0),
            margin=EdgeInsets(12.0, 0.0, 16.0, 0.0),
        ),
        "heading2": Style(
            font_size=22.0,
            font_weight=FontWeight.BOLD,
            color=Color(40, 40, 40),
            margin=EdgeInsets(10.0, 0.0, 12.0, 0.0),
        ),
        "paragraph": Style(
            font_size=16.0,
            line_height=1.8,
            margin=EdgeInsets(0.0, 0.0, 10.0, 0.0),
        ),
        # Arabic body text: right-to-left with a taller line.
        "arabic": Style(
            font_size=18.0,
            line_height=2.0,
            direction=Direction.RTL,
        ),
    }


@dataclass(slots=True)
class StyleSheet:
    """Named styles plus the active theme name."""

    styles: Dict[str, Style] = field(default_factory=_default_styles)
    active_theme: str = "default"

    @classmethod
    def empty(cls, active_theme: str = "default") -> "StyleSheet":
        return cls(styles={}, active_theme=active_theme)

    def get(self, name: Optional[str]) -> Optional[Style]:
        """Return the style registered under ``name`` without any fallback."""
        if name is None:
            return None
        return self.styles.get(name)

    def all(self) -> Mapping[str, Style]:
        """Return read-only view of the registered styles."""
        return dict(self.styles)


def resolve_style(sheet: StyleSheet, name: Optional[str]) -> Style:
    """Look ``name`` up by exact match; a miss yields a fresh default ``Style``.

    The sheet is never modified. Callers scale ``font_size`` and the spacing
    metrics by their own zoom factor.
    """
    style = sheet.get(name)
    if style is None:
        return Style()
    return style
