"""Central logging setup for the project."""
from __future__ import annotations
import logging
import sys

def _resolve_level(level: int | str) -> int:
    """Map a level name such as "debug" to its number; unknown names mean INFO."""
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping().get(level.strip().upper(), logging.INFO)

def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Send every log record to stdout in one format.

    Args:
        level: Logging level, as a number or a level name (LOG_LEVEL).
    """
    handler = logging.StreamHandler(sys.stdout)
    fmt = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_resolve_level(level))
