# triggerforge/core/log.py
from __future__ import annotations

import logging

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_configured = False


def setup_logging(level: str = "INFO") -> None:
    """Configure the root handler once; later calls only adjust the level."""
    global _configured
    lvl = getattr(logging, (level or "INFO").upper(), logging.INFO)
    if not _configured:
        logging.basicConfig(level=lvl, format=_FORMAT)
        _configured = True
    logging.getLogger("triggerforge").setLevel(lvl)
