"""
Logging helpers.

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
installed by applications (or the CLI) through :func:`configure_logging`.
"""

from __future__ import annotations

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Install a basic stream handler on the root logger if none is configured
    yet and set the level of the ``erd_sdk`` logger.

    `level` defaults to ``SDKConfig.from_env().log_level``.
    """
    if level is None:
        from .config import SDKConfig

        level = SDKConfig.from_env().log_level
    numeric = getattr(logging, str(level).upper(), logging.INFO)

    if not logging.getLogger().handlers:
        logging.basicConfig(level=numeric, format=LOG_FORMAT)

    log = logging.getLogger("erd_sdk")
    log.setLevel(numeric)
    return log


__all__ = ["LOG_FORMAT", "configure_logging"]
