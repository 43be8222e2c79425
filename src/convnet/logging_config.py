"""
convnet.logging_config

One place for logging config so the demo CLI and host scripts share formatting.
The engine itself only emits DEBUG records while building layers.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: Optional[str] = None, force: bool = False) -> None:
    lvl = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=lvl, format=LOG_FORMAT, force=force)
