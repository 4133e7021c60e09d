"""In-memory representation of a pdx document tree."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from pdx_renderer.model.style_model import Direction
from pdx_renderer.utils.shaping import contains_arabic

MAX_HEADING_LEVEL = 6
RTL_LANGUAGES = frozenset({"ar", "fa", "ur"})
ARABIC_LANGUAGE = "ar"
LATIN_LANGUAGE = "en"


def derive_direction(text: str, language: str) -> Direction:
    """Direction implied by a language code and the script of the text itself."""
    if language in RTL_LANGUAGES or contains_arabic(text):
        return Direction.RTL
    return Direction.LTR


@dataclass(slots=True)
class TextRun:
    """A span of text sharing one language, direction and style.

    ``direction`` is always derived from ``language`` and the text's script
    and cannot be passed in.
    """

    text: str
    language: str = LATIN_LANGUAGE
    style_name: str = "paragraph"
    direction: Direction = field(init=False)

    def __post_init__(self) -> None:
        self.direction = derive_direction(self.text, self.language)

    @classmethod
    def from_text(cls, text: str, style_name: str = "paragraph") -> "TextRun":
        """Build a run whose language is sniffed from the text's script."""
        language = ARABIC_LANGUAGE if contains_arabic(text) else LATIN_LANGUAGE
        return cls(text=text, language=language, style_name=style_name)


@dataclass(slots=True)
class ListItem:
    content: List[TextRun] = field(default_factory=list)


@dataclass(slots=True)
class HeadingElement:
    """Section heading. ``level`` is clamped to 1..MAX_HEADING_LEVEL."""

    level: int = 1
    runs: List[TextRun] = field(default_factory=list)
    style_name: str = ""

    def __post_init__(self) -> None:
        self.level = min(max(int(self.level), 1), MAX_HEADING_LEVEL)
        if not self.style_name:
            self.style_name = f"heading{self.level}"


@dataclass(slots=True)
class ParagraphElement:
    runs: List[TextRun] = field(default_factory=list)
    style_name: str = "paragraph"

    def __post_init__(self) -> None:
        if not self.style_name:
            self.style_name = "paragraph"


@dataclass(slots=True)
class ListElement:
    """Bulleted or numbered list. The markup grammar only produces unordered lists."""

    items: List[ListItem] = field(default_factory=list)
    ordered: bool = False
    style_name: str = "list"

    def __post_init__(self) -> None:
        if not self.style_name:
            self.style_name = "list"


@dataclass(slots=True)
class CodeBlockElement:
    code: str = ""
    language: str = "text"
    style_name: str = "code"

    def __post_init__(self) -> None:
        if not self.language:
            self.language = "text"
        if not self.style_name:
            self.style_name = "code"


@dataclass(slots=True)
class ImageElement:
    """Image reference; ``path`` is stored exactly as given."""

    path: str
    alt_text: str = ""
    width: Optional[float] = None
    height: Optional[float] = None


@dataclass(slots=True)
class DividerElement:
    pass


@dataclass(slots=True)
class PageBreakElement:
    pass


BlockElement = (
    HeadingElement
    | ParagraphElement
    | ListElement
    | CodeBlockElement
    | ImageElement
    | DividerElement
    | PageBreakElement
)


@dataclass(slots=True)
class DocumentElement:
    """Root of the tree; only valid as the outermost node."""

    children: List[BlockElement] = field(default_factory=list)


Node = BlockElement | DocumentElement


def runs_are_rtl(runs: List[TextRun]) -> bool:
    """True when any run in the sequence is right-to-left."""
    return any(run.direction is Direction.RTL for run in runs)


def runs_text(runs: List[TextRun]) -> str:
    """Run texts joined by single spaces."""
    return " ".join(run.text for run in runs)
