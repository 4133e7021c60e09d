"""Image resources shared by the renderers, loaded once per path."""
from __future__ import annotations

import base64
import mimetypes
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Dict, Optional

from PIL import Image

from pdx_renderer.utils.logger import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class ImageResource:
    """Decoded raster image together with its original bytes."""

    path: str
    data: bytes
    media_type: str
    image: Image.Image

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    def data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.media_type};base64,{encoded}"


class ImageStore:
    """Get-or-load cache keyed by the path stored in the document.

    Failed loads are remembered as misses so each path is read at most once.
    """

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = base_dir
        self._cache: Dict[str, Optional[ImageResource]] = {}

    def get(self, path: str) -> Optional[ImageResource]:
        if path not in self._cache:
            self._cache[path] = self._load(path)
        return self._cache[path]

    def _resolve(self, path: str) -> Path:
        candidate = Path(path)
        if not candidate.is_absolute() and self._base_dir is not None:
            candidate = self._base_dir / candidate
        return candidate

    def _load(self, path: str) -> Optional[ImageResource]:
        if not path:
            return None
        location = self._resolve(path)
        try:
            data = location.read_bytes()
            image = Image.open(BytesIO(data))
            image.load()
        except OSError as exc:
            LOGGER.warning("Image %s unavailable: %s", path, exc)
            return None
        media_type = mimetypes.guess_type(location.name)[0]
        if not media_type and image.format:
            media_type = Image.MIME.get(image.format)
        return ImageResource(path=path, data=data, media_type=media_type or "application/octet-stream", image=image)
