from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Ensure the repo root (containing `jsonxf/`) is importable when pytest
# picks `tests/` as the rootdir (e.g., single-file runs).
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    # Keep local shell settings from changing chunking or logging under test.
    for name in ("JSONXF_CHUNK_SIZE", "JSONXF_LOG_LEVEL", "JSONXF_MAX_BODY_BYTES"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("JSONXF_DISABLE_FILE_LOG", "1")

    yield

    # The CLI attaches a stderr handler bound to the per-test capture stream.
    root = logging.getLogger()
    for h in list(root.handlers):
        if getattr(h, "_jsonxf_console_log", False):
            root.removeHandler(h)
