"""Aggregate model combining metadata, styles, and the content tree."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from pdx_renderer.model.elements import DocumentElement
from pdx_renderer.model.style_model import StyleSheet

FORMAT_VERSION = 1


def timestamp() -> str:
    """Local time in the format stored in ``Metadata.created``/``modified``."""
    return datetime.now().isoformat(sep=" ", timespec="seconds")


@dataclass(slots=True)
class Metadata:
    """Descriptive fields edited by the user; the parser never touches them."""

    title: str = "Untitled Document"
    author: str = ""
    language: str = "en"
    created: str = field(default_factory=timestamp)
    modified: str = field(default_factory=timestamp)
    keywords: List[str] = field(default_factory=list)


@dataclass(slots=True)
class PdxDocument:
    """Persisted unit: the content tree together with its styles and metadata."""

    content: DocumentElement = field(default_factory=DocumentElement)
    metadata: Metadata = field(default_factory=Metadata)
    styles: StyleSheet = field(default_factory=StyleSheet)
    version: int = FORMAT_VERSION
