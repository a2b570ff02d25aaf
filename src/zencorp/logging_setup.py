from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

_OWNED = "_zencorp_handler"


class _ConsoleNoiseFilter(logging.Filter):
    """Keep zencorp logs; show third-party records (werkzeug, mysql) only at WARNING+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("zencorp."):
            return True
        if record.name == "py.warnings":
            return record.levelno >= logging.ERROR
        return record.levelno >= logging.WARNING


def setup_logging(*, level: str | int = logging.INFO, log_dir: Optional[str | Path] = None) -> None:
    """Configure the root logger once: console always, file when ``log_dir`` is set."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Replace only our own handlers; others (test capture, embedding apps) stay.
    for h in list(root.handlers):
        if getattr(h, _OWNED, False):
            root.removeHandler(h)
            h.close()

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    setattr(ch, _OWNED, True)
    root.addHandler(ch)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_dir / "zencorp.log"), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        setattr(fh, _OWNED, True)
        root.addHandler(fh)

    logging.captureWarnings(True)
