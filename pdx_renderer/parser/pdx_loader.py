"""Read and write the persisted ``.pdx`` document format (JSON)."""
from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from pdx_renderer.model.document_model import FORMAT_VERSION, Metadata, PdxDocument
from pdx_renderer.model.elements import (
    BlockElement,
    CodeBlockElement,
    DividerElement,
    DocumentElement,
    HeadingElement,
    ImageElement,
    ListElement,
    ListItem,
    Node,
    PageBreakElement,
    ParagraphElement,
    TextRun,
)
from pdx_renderer.model.style_model import (
    Color,
    Direction,
    EdgeInsets,
    FontWeight,
    Style,
    StyleSheet,
    TextAlign,
)
from pdx_renderer.utils.logger import get_logger

LOGGER = get_logger(__name__)

UNIT_NODES = {"Divider": DividerElement, "PageBreak": PageBreakElement}


class DocumentLoadError(ValueError):
    """Raised when a persisted document cannot be turned into a tree."""


# ----------------------------------------------------------------------
# Writing
def document_to_dict(document: PdxDocument) -> Dict[str, Any]:
    return {
        "version": document.version,
        "metadata": _metadata_to_dict(document.metadata),
        "styles": {
            "styles": {name: _style_to_dict(style) for name, style in document.styles.styles.items()},
            "active_theme": document.styles.active_theme,
        },
        "content": node_to_dict(document.content),
    }


def node_to_dict(node: Node) -> Any:
    """Encode a node using external tagging: ``{"Tag": {...fields}}`` or ``"Tag"``."""
    if isinstance(node, DocumentElement):
        return {"Document": {"children": [node_to_dict(child) for child in node.children]}}
    if isinstance(node, HeadingElement):
        return {"Heading": {"level": node.level, "runs": _runs_to_list(node.runs), "style": node.style_name}}
    if isinstance(node, ParagraphElement):
        return {"Paragraph": {"runs": _runs_to_list(node.runs), "style": node.style_name}}
    if isinstance(node, ListElement):
        items = [{"content": _runs_to_list(item.content)} for item in node.items]
        return {"List": {"ordered": node.ordered, "items": items, "style": node.style_name}}
    if isinstance(node, CodeBlockElement):
        return {"CodeBlock": {"language": node.language, "code": node.code, "style": node.style_name}}
    if isinstance(node, ImageElement):
        return {
            "Image": {
                "path": node.path,
                "alt_text": node.alt_text,
                "width": node.width,
                "height": node.height,
            }
        }
    if isinstance(node, DividerElement):
        return "Divider"
    if isinstance(node, PageBreakElement):
        return "PageBreak"
    raise TypeError(f"Cannot encode {type(node).__name__}")


def _runs_to_list(runs: List[TextRun]) -> List[Dict[str, str]]:
    return [
        {"text": run.text, "language": run.language, "direction": run.direction.value, "style": run.style_name}
        for run in runs
    ]


def _metadata_to_dict(metadata: Metadata) -> Dict[str, Any]:
    return {
        "title": metadata.title,
        "author": metadata.author,
        "language": metadata.language,
        "created": metadata.created,
        "modified": metadata.modified,
        "keywords": list(metadata.keywords),
    }


def _style_to_dict(style: Style) -> Dict[str, Any]:
    return {
        "font_size": style.font_size,
        "font_weight": style.font_weight.value,
        "color": {"r": style.color.r, "g": style.color.g, "b": style.color.b},
        "text_align": style.text_align.value,
        "direction": style.direction.value,
        "line_height": style.line_height,
        "margin": _insets_to_dict(style.margin),
        "padding": _insets_to_dict(style.padding),
    }


def _insets_to_dict(insets: EdgeInsets) -> Dict[str, float]:
    return {"top": insets.top, "right": insets.right, "bottom": insets.bottom, "left": insets.left}


def dumps_document(document: PdxDocument) -> str:
    return json.dumps(document_to_dict(document), indent=2, ensure_ascii=False)


def save_document(document: PdxDocument, path: Path) -> Path:
    """Write ``document`` as pretty-printed JSON and return the path."""
    payload = dumps_document(document)
    path.write_text(payload, encoding="utf-8")
    LOGGER.info("Saved document to %s", path)
    return path


# ----------------------------------------------------------------------
# Reading
def document_from_dict(payload: Mapping[str, Any]) -> PdxDocument:
    if not isinstance(payload, Mapping):
        raise DocumentLoadError("Document payload must be a JSON object")

    content_payload = payload.get("content")
    if content_payload is None:
        content = DocumentElement()
    else:
        content = node_from_dict(content_payload)
        if not isinstance(content, DocumentElement):
            content = DocumentElement(children=[content])

    return PdxDocument(
        content=content,
        metadata=_metadata_from_dict(_require_mapping(payload.get("metadata") or {}, "metadata")),
        styles=_stylesheet_from_dict(payload.get("styles")),
        version=_int_field(payload.get("version", FORMAT_VERSION), "version"),
    )


def node_from_dict(payload: Any, *, root: bool = True) -> Node:
    """Decode an externally tagged node. A ``Document`` is only accepted at the root."""
    if isinstance(payload, str):
        if payload in UNIT_NODES:
            return UNIT_NODES[payload]()
        raise DocumentLoadError(f"Unknown node tag: {payload!r}")
    if not isinstance(payload, Mapping) or len(payload) != 1:
        raise DocumentLoadError(f"Malformed node: {payload!r}")

    tag, fields = next(iter(payload.items()))
    if tag in UNIT_NODES:
        return UNIT_NODES[tag]()
    if not isinstance(fields, Mapping):
        raise DocumentLoadError(f"Node {tag!r} must carry an object")

    if tag == "Document":
        if not root:
            raise DocumentLoadError("Document node is only allowed at the root")
        children: List[BlockElement] = [
            node_from_dict(child, root=False) for child in _require_list(fields.get("children"), "children")
        ]
        return DocumentElement(children=children)
    if tag == "Heading":
        return HeadingElement(
            level=_int_field(fields.get("level", 1), "heading level"),
            runs=_runs_from_list(fields.get("runs")),
            style_name=_string_field(fields, "style"),
        )
    if tag == "Paragraph":
        return ParagraphElement(runs=_runs_from_list(fields.get("runs")), style_name=_string_field(fields, "style"))
    if tag == "List":
        items = [
            ListItem(content=_runs_from_list(_require_mapping(item, "list item").get("content")))
            for item in _require_list(fields.get("items"), "list items")
        ]
        return ListElement(items=items, ordered=bool(fields.get("ordered", False)), style_name=_string_field(fields, "style"))
    if tag == "CodeBlock":
        return CodeBlockElement(
            code=_string_field(fields, "code"),
            language=_string_field(fields, "language"),
            style_name=_string_field(fields, "style"),
        )
    if tag == "Image":
        return ImageElement(
            path=_string_field(fields, "path"),
            alt_text=_string_field(fields, "alt_text"),
            width=_optional_float(fields.get("width")),
            height=_optional_float(fields.get("height")),
        )
    raise DocumentLoadError(f"Unknown node tag: {tag!r}")


def _runs_from_list(payload: Any) -> List[TextRun]:
    runs: List[TextRun] = []
    for entry in _require_list(payload, "runs"):
        entry = _require_mapping(entry, "text run")
        # The stored direction is ignored; TextRun derives it again.
        runs.append(
            TextRun(
                text=_string_field(entry, "text"),
                language=_string_field(entry, "language", "en"),
                style_name=_string_field(entry, "style", "paragraph"),
            )
        )
    return runs


def _require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise DocumentLoadError(f"Malformed {what}: {value!r}")
    return value


def _require_list(value: Any, what: str) -> List[Any]:
    """A missing list reads as empty; anything other than a JSON array is rejected."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise DocumentLoadError(f"Malformed {what}: expected a list, got {value!r}")
    return value


def _string_field(fields: Mapping[str, Any], name: str, default: str = "") -> str:
    value = fields.get(name)
    if value is None or value == "":
        return default
    if not isinstance(value, str):
        raise DocumentLoadError(f"Malformed {name!r}: expected a string, got {value!r}")
    return value


def _int_field(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise DocumentLoadError(f"Malformed {what}: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise DocumentLoadError(f"Malformed {what}: {value!r}") from exc


def _metadata_from_dict(payload: Mapping[str, Any]) -> Metadata:
    metadata = Metadata()
    for name in ("title", "author", "language", "created", "modified"):
        value = payload.get(name)
        if value is not None:
            setattr(metadata, name, str(value))
    metadata.keywords = [str(keyword) for keyword in _require_list(payload.get("keywords"), "keywords")]
    return metadata


def _stylesheet_from_dict(payload: Any) -> StyleSheet:
    if payload is None:
        return StyleSheet()
    payload = _require_mapping(payload, "styles")
    entries = _require_mapping(payload.get("styles") or {}, "style table")
    styles = {name: _style_from_dict(_require_mapping(fields or {}, f"style {name!r}")) for name, fields in entries.items()}
    return StyleSheet(styles=styles, active_theme=_string_field(payload, "active_theme", "default"))


def _style_from_dict(payload: Mapping[str, Any]) -> Style:
    """Build a style, taking the zero default for every missing or unreadable field."""
    return Style(
        font_size=_optional_float(payload.get("font_size")) or 0.0,
        font_weight=_enum_value(FontWeight, payload.get("font_weight"), FontWeight.NORMAL),
        color=_color_from_dict(payload.get("color")),
        text_align=_enum_value(TextAlign, payload.get("text_align"), TextAlign.START),
        direction=_enum_value(Direction, payload.get("direction"), Direction.AUTO),
        line_height=_optional_float(payload.get("line_height")) or 0.0,
        margin=_insets_from_dict(payload.get("margin")),
        padding=_insets_from_dict(payload.get("padding")),
    )


def _color_from_dict(payload: Any) -> Color:
    if not isinstance(payload, Mapping):
        return Color()
    channels = [_optional_float(payload.get(key)) or 0.0 for key in ("r", "g", "b")]
    return Color(*(min(max(int(value), 0), 255) for value in channels))


def _insets_from_dict(payload: Any) -> EdgeInsets:
    if not isinstance(payload, Mapping):
        return EdgeInsets()
    return EdgeInsets(
        top=_optional_float(payload.get("top")) or 0.0,
        right=_optional_float(payload.get("right")) or 0.0,
        bottom=_optional_float(payload.get("bottom")) or 0.0,
        left=_optional_float(payload.get("left")) or 0.0,
    )


def _enum_value(enum_type, value, default):
    try:
        return enum_type(value)
    except ValueError:
        if value is not None:
            LOGGER.debug("Unknown %s value %r, using %s", enum_type.__name__, value, default.value)
        return default


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def loads_document(data: str) -> PdxDocument:
    try:
        payload = json.loads(data)
    except json.JSONDecodeError as exc:
        raise DocumentLoadError(f"Invalid document JSON: {exc}") from exc
    return document_from_dict(payload)


def load_document(path: Path) -> PdxDocument:
    """Read a ``.pdx`` file. ``OSError`` propagates; bad content raises ``DocumentLoadError``."""
    document = loads_document(path.read_text(encoding="utf-8"))
    LOGGER.info("Loaded %s (%d blocks)", path.name, len(document.content.children))
    return document
