"""
Process logging for the CleanConnect API.

``setup_logging`` applies ``LOG_LEVEL`` to the application loggers and
to Uvicorn's own loggers, so ``LOG_LEVEL=WARNING`` also silences the
per-request access lines.  Handlers (console, plus an optional file) are
attached to the root logger only once per process; the levels are
reapplied on every call.
"""

import logging
from pathlib import Path
from typing import List, Optional

SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: str) -> int:
    """Numeric level for a level name; unknown names fall back to INFO."""
    numeric = logging.getLevelName(level.strip().upper())
    return numeric if isinstance(numeric, int) else logging.INFO


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root and server loggers.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"warning"``).
    logfile : Optional[str]
        Path of a file that receives a copy of every record.  Ignored
        when the root logger already has handlers.
    """
    numeric_level = resolve_level(level)
    root = logging.getLogger()
    root.setLevel(numeric_level)
    for name in SERVER_LOGGERS:
        logging.getLogger(name).setLevel(numeric_level)

    if root.handlers:
        return

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
