from __future__ import annotations

import logging
import sys
from pathlib import Path

APP_LOGGER_PREFIX = "timeplanner"
_MARKER = "_timeplanner_handler"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - allow all timeplanner logs
    - let uvicorn access/error logs through at INFO
    - everything else (sqlalchemy, httpx, ...) only at WARNING+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == APP_LOGGER_PREFIX or name.startswith(APP_LOGGER_PREFIX + "."):
            return True
        if name.startswith("uvicorn"):
            return record.levelno >= logging.INFO
        return record.levelno >= logging.WARNING


def setup_logging(
    *,
    level: str | int = logging.INFO,
    log_dir: str | Path | None = None,
) -> None:
    """
    Configure the root logger with a filtered console handler and, when
    ``log_dir`` is given, a file handler that receives everything.

    Safe to call more than once; handlers installed by a previous call are
    replaced, handlers installed by anyone else (pytest, uvicorn) are kept.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for h in list(root.handlers):
        if getattr(h, _MARKER, False):
            root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    setattr(ch, _MARKER, True)
    root.addHandler(ch)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_dir / "timeplanner.log"), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        setattr(fh, _MARKER, True)
        root.addHandler(fh)

    logging.captureWarnings(True)
