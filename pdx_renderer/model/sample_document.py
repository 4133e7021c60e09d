"""Bilingual demo document shown when the editor starts without a file."""
from __future__ import annotations

from pdx_renderer.model.document_model import Metadata, PdxDocument
from pdx_renderer.model.elements import (
    DividerElement,
    DocumentElement,
    HeadingElement,
    ListElement,
    ListItem,
    ParagraphElement,
    TextRun,
)
from pdx_renderer.model.style_model import StyleSheet


def _item(text: str) -> ListItem:
    return ListItem(content=[TextRun(text, "en", "paragraph")])


def create_sample_document() -> PdxDocument:
    """Return a document mixing English and Arabic blocks."""
    children = [
        HeadingElement(level=1, runs=[TextRun("Welcome to PDX Editor", "en", "heading1")]),
        ParagraphElement(
            runs=[
                TextRun(
                    "PDX is a modern document format with full Arabic support, real PDF/PNG export, "
                    "and a comfortable theme for long writing sessions.",
                    "en",
                    "paragraph",
                )
            ],
        ),
        DividerElement(),
        HeadingElement(level=2, runs=[TextRun("مرحباً بك في محرر PDX", "ar", "heading2")]),
        ParagraphElement(
            runs=[
                TextRun(
                    "هذا المحرر يدعم اللغة العربية بشكل كامل مع الكتابة من اليمين إلى اليسار. "
                    "يمكنك كتابة المستندات بالعربية بسهولة تامة.",
                    "ar",
                    "arabic",
                )
            ],
            style_name="arabic",
        ),
        DividerElement(),
        HeadingElement(level=2, runs=[TextRun("New Features - المميزات الجديدة", "en", "heading2")]),
        ListElement(
            items=[
                _item("Real PDF export with Arabic font embedding"),
                _item("PNG image export for sharing"),
                _item("Image embedding support in documents"),
                _item("Comfort theme - optimized for long writing sessions"),
            ],
        ),
    ]
    metadata = Metadata(
        title="PDX Demo Document",
        author="PDX Editor",
        language="en",
        keywords=["pdx", "document", "مستند"],
    )
    return PdxDocument(
        content=DocumentElement(children=children),
        metadata=metadata,
        styles=StyleSheet(),
    )
