"""Central logging configuration for the pdx renderer."""
from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

ENV_LOG_LEVEL = "PDX_LOG_LEVEL"
_DEFAULT_LEVEL = logging.INFO
_DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def level_from_env(environ: Optional[Mapping[str, str]] = None) -> int:
    """Resolve ``PDX_LOG_LEVEL`` (a level name such as ``DEBUG``) to a logging level."""
    env = os.environ if environ is None else environ
    name = (env.get(ENV_LOG_LEVEL) or "").strip().upper()
    if not name:
        return _DEFAULT_LEVEL
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else _DEFAULT_LEVEL


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-level logger, installing the default handler on first use."""
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level_from_env(), format=_DEFAULT_FORMAT)
    return logger
