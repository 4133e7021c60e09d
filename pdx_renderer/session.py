"""Editing session: the raw markup buffer and the document parsed from it."""
from __future__ import annotations

from dataclasses import fields
from pathlib import Path
from typing import Any, List, Optional

from pdx_renderer.model.document_model import Metadata, PdxDocument, timestamp
from pdx_renderer.model.elements import DocumentElement, ImageElement, Node
from pdx_renderer.model.sample_document import create_sample_document
from pdx_renderer.parser.block_parser import parse_content
from pdx_renderer.parser.pdx_loader import load_document, save_document
from pdx_renderer.parser.serializer import serialize_content
from pdx_renderer.utils.logger import get_logger

LOGGER = get_logger(__name__)

_METADATA_FIELDS = frozenset(f.name for f in fields(Metadata))


class EditorSession:
    """Owns one document while it is being edited.

    The content tree is always rebuilt wholesale from ``raw_content``;
    metadata and styles are kept across reparses.
    """

    def __init__(self, document: Optional[PdxDocument] = None, path: Optional[Path] = None) -> None:
        self.document = document if document is not None else create_sample_document()
        self.raw_content = serialize_content(self.document.content)
        self.path = path

    @classmethod
    def open(cls, path: Path) -> "EditorSession":
        LOGGER.info("Opening %s", path)
        return cls(load_document(path), path)

    def save(self, path: Optional[Path] = None) -> Path:
        target = path or self.path
        if target is None:
            raise ValueError("No path given and the session has never been saved")
        save_document(self.document, target)
        self.path = target
        return target

    def set_content(self, raw_content: str) -> DocumentElement:
        self.raw_content = raw_content
        self.document.content = parse_content(raw_content)
        return self.document.content

    def insert_image(self, image_path: str) -> DocumentElement:
        """Append image markup for ``image_path`` to the buffer and reparse."""
        return self.set_content(f"{self.raw_content}\n![Image]({image_path})\n")

    def update_metadata(self, **changes: Any) -> Metadata:
        unknown = set(changes) - _METADATA_FIELDS
        if unknown:
            raise TypeError(f"Unknown metadata fields: {', '.join(sorted(unknown))}")
        metadata = self.document.metadata
        for name, value in changes.items():
            setattr(metadata, name, value)
        if "modified" not in changes:
            metadata.modified = timestamp()
        return metadata

    def image_paths(self) -> List[str]:
        paths: List[str] = []
        _collect_image_paths(self.document.content, paths)
        return paths


def _collect_image_paths(node: Node, paths: List[str]) -> None:
    if isinstance(node, DocumentElement):
        for child in node.children:
            _collect_image_paths(child, paths)
    elif isinstance(node, ImageElement):
        paths.append(node.path)
