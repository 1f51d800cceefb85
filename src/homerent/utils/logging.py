"""Centralized logging configuration for homerent.

Usage in any module:
    from homerent.utils.logging import get_logger
    logger = get_logger(__name__)
    logger.info("Catalog refreshed")
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

_CONFIGURED = False

LOG_DIR = Path(__file__).resolve().parents[3] / "logs"
LOG_FILE = LOG_DIR / "homerent.log"
LOG_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"


class SafeStreamHandler(logging.StreamHandler):
    """StreamHandler that degrades to escaped text on encoding errors."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            stream = self.stream
            try:
                stream.write(msg + self.terminator)
            except UnicodeEncodeError:
                encoding = getattr(stream, "encoding", None) or "utf-8"
                stream.write(
                    msg.encode(encoding, errors="backslashreplace").decode(encoding)
                    + self.terminator
                )
            self.flush()
        except Exception:
            self.handleError(record)


def _level_from_env(default: int) -> int:
    raw = os.environ.get("HOMERENT_LOG_LEVEL", "").strip().upper()
    if not raw:
        return default
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else default


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
) -> None:
    """Configure the ``homerent`` logger (console + file).

    Only the first call takes effect.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return
    _CONFIGURED = True

    level = _level_from_env(level)
    root = logging.getLogger("homerent")
    root.setLevel(level)

    fmt = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console = SafeStreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(fmt)
    root.addHandler(console)

    target = log_file or LOG_FILE
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(target, encoding="utf-8", delay=True)
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)
    except OSError:
        # Read-only deployments (hosted Streamlit) have no writable log dir.
        pass


def get_logger(name: str) -> logging.Logger:
    """Return a logger, configuring the ``homerent`` namespace on first use."""
    setup_logging()
    return logging.getLogger(name)


def set_level(level: int) -> None:
    """Change the level of the ``homerent`` logger and its console handler."""
    setup_logging()
    root = logging.getLogger("homerent")
    root.setLevel(level)
    for handler in root.handlers:
        if isinstance(handler, SafeStreamHandler):
            handler.setLevel(level)
