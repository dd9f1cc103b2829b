from __future__ import annotations

import logging
import sys
from contextlib import suppress
from logging.handlers import RotatingFileHandler
from pathlib import Path

from jsonxf.env import env_str, env_truthy

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

_CONSOLE_TAG = "_jsonxf_console_log"
_FILE_TAG = "_jsonxf_file_log"


def _apply_level_from_env(root: logging.Logger) -> None:
    lvl = env_str("JSONXF_LOG_LEVEL")
    if lvl:
        with suppress(ValueError):
            root.setLevel(lvl.upper())


def _tagged(tag: str) -> logging.Handler | None:
    for h in logging.getLogger().handlers:
        if getattr(h, tag, False):
            return h
    return None


def _attach(handler: logging.Handler, tag: str, level: int) -> None:
    setattr(handler, tag, True)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
    root = logging.getLogger()
    root.addHandler(handler)
    _apply_level_from_env(root)


def configure_logging(level: int = logging.WARNING) -> None:
    """Attach a stderr handler to the root logger (idempotent).

    ``JSONXF_LOG_LEVEL`` overrides ``level`` when set.
    """

    root = logging.getLogger()
    root.setLevel(level)
    if _tagged(_CONSOLE_TAG) is not None:
        _apply_level_from_env(root)
        return
    _attach(logging.StreamHandler(sys.stderr), _CONSOLE_TAG, logging.NOTSET)


def ensure_file_logging(*, log_dir: Path, filename: str = "jsonxf.log") -> Path:
    """Attach a rotating file handler to the root logger (idempotent).

    This works well with uvicorn's logging config (we just add another handler).
    """

    if env_truthy("JSONXF_DISABLE_FILE_LOG"):
        return log_dir / filename

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = (log_dir / filename).resolve()

    existing = _tagged(_FILE_TAG)
    if existing is not None:
        base = getattr(existing, "baseFilename", None)
        return Path(str(base)).resolve() if base else log_file
    for h in logging.getLogger().handlers:
        base = getattr(h, "baseFilename", None)
        if base and Path(str(base)).resolve() == log_file:
            return log_file

    handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
    _attach(handler, _FILE_TAG, logging.INFO)
    return log_file
