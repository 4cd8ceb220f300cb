# src/doit_tracker/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE_NAME = "doit.log"

# Minimum console level per logger prefix; first match wins.
_CONSOLE_FLOORS: tuple[tuple[str, int], ...] = (
    # one DEBUG line per backend write; failures are logged at ERROR and still shown
    ("doit_tracker.persistence.sync", logging.INFO),
    # model fallback chatter (one WARNING per failed model)
    ("doit_tracker.llm.", logging.ERROR),
    ("doit_tracker.", logging.NOTSET),
    ("py.warnings", logging.ERROR),
)

# Request-level loggers of the supabase / openai stacks.
_CHATTY_LIBRARIES = ("httpx", "httpcore", "hpack", "openai", "postgrest", "gotrue", "supabase")


class _ConsoleFloorFilter(logging.Filter):
    """Drop console records below the floor of their logger prefix (third-party: ERROR)."""

    def filter(self, record: logging.LogRecord) -> bool:
        for prefix, floor in _CONSOLE_FLOORS:
            if record.name.startswith(prefix):
                return record.levelno >= floor
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/doit",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Console on stderr (filtered) plus a size-rotated `doit.log` in `log_dir`
    that keeps every sync call and every failure traceback.

    Replaces existing root handlers, so calling it twice does not duplicate output.
    Returns the log file path.
    """
    log_file = Path(log_dir) / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.addFilter(_ConsoleFloorFilter())

    file = RotatingFileHandler(log_file, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    file.setLevel(file_level)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in (console, file):
        h.setFormatter(fmt)
        root.addHandler(h)

    logging.captureWarnings(True)
    for name in _CHATTY_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
