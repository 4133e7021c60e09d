"""Render configuration threaded explicitly through every renderer."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from pdx_renderer.model.style_model import Color
from pdx_renderer.utils.logger import get_logger

LOGGER = get_logger(__name__)

ENV_FONT_PATH = "PDX_FONT_PATH"
ENV_MONO_FONT_PATH = "PDX_MONO_FONT_PATH"
ENV_ZOOM = "PDX_ZOOM"


@dataclass(slots=True)
class RenderConfig:
    """Settings shared by the preview, HTML and PDF renderers.

    ``zoom`` scales style font sizes and spacing in the preview. Styles that
    resolve to a zero font size use ``fallback_font_size`` instead.
    """

    zoom: float = 1.0
    fallback_font_size: float = 16.0
    code_font_size: float = 13.0
    code_language_font_size: float = 11.0
    text_color: Color = field(default_factory=lambda: Color(45, 55, 65))
    background_color: Color = field(default_factory=lambda: Color(248, 250, 245))
    canvas_width: int = 1200
    canvas_height: int = 1600
    page_margin: float = 40.0
    image_spacing: float = 10.0
    font_path: Optional[str] = None
    mono_font_path: Optional[str] = None

    def font_size(self, style_size: float) -> float:
        """Scaled font size for a style, substituting the fallback for unset sizes."""
        size = style_size if style_size > 0 else self.fallback_font_size
        return size * self.zoom

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RenderConfig":
        """Build a config from ``PDX_*`` environment variables, ignoring bad values."""
        env = os.environ if environ is None else environ
        config = cls(
            font_path=env.get(ENV_FONT_PATH) or None,
            mono_font_path=env.get(ENV_MONO_FONT_PATH) or None,
        )
        zoom = env.get(ENV_ZOOM)
        if zoom:
            try:
                value = float(zoom)
            except ValueError:
                LOGGER.warning("Ignoring %s=%r: not a number", ENV_ZOOM, zoom)
            else:
                if value > 0:
                    config.zoom = value
                else:
                    LOGGER.warning("Ignoring %s=%r: zoom must be positive", ENV_ZOOM, zoom)
        return config
