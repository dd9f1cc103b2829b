from __future__ import annotations

import logging
from pathlib import Path

import pytest

from jsonxf.logging_setup import configure_logging, ensure_file_logging


def _console_handlers() -> list[logging.Handler]:
    return [h for h in logging.getLogger().handlers if getattr(h, "_jsonxf_console_log", False)]


def test_configure_logging_is_idempotent() -> None:
    root = logging.getLogger()
    old_level = root.level
    try:
        configure_logging(logging.INFO)
        configure_logging(logging.DEBUG)
        assert len(_console_handlers()) == 1
        assert root.level == logging.DEBUG
    finally:
        root.setLevel(old_level)


def test_configure_logging_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    old_level = root.level
    monkeypatch.setenv("JSONXF_LOG_LEVEL", "error")
    try:
        configure_logging(logging.DEBUG)
        assert root.level == logging.ERROR
    finally:
        root.setLevel(old_level)


def test_ensure_file_logging_disabled_by_env(tmp_path: Path) -> None:
    log_dir = tmp_path / "logs"
    assert ensure_file_logging(log_dir=log_dir) == log_dir / "jsonxf.log"
    assert not log_dir.exists()


def test_ensure_file_logging_attaches_one_handler(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JSONXF_DISABLE_FILE_LOG", raising=False)
    root = logging.getLogger()
    log_dir = tmp_path / "logs"
    try:
        first = ensure_file_logging(log_dir=log_dir)
        second = ensure_file_logging(log_dir=log_dir)
        assert first == second == (log_dir / "jsonxf.log").resolve()
        handlers = [h for h in root.handlers if getattr(h, "_jsonxf_file_log", False)]
        assert len(handlers) == 1

        logging.getLogger("jsonxf.test").warning("hello file")
        handlers[0].flush()
        assert "hello file" in first.read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            if getattr(h, "_jsonxf_file_log", False):
                root.removeHandler(h)
                h.close()
