from __future__ import annotations

import os

DEFAULT_CHUNK_SIZE = 64 * 1024


def env_truthy(name: str) -> bool:
    v = str(os.getenv(name, "")).strip().lower()
    return v in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    raw = str(os.getenv(name, "")).strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_str(name: str) -> str | None:
    raw = str(os.getenv(name, "") or "").strip()
    return raw or None


def chunk_size_from_env() -> int:
    return max(1, env_int("JSONXF_CHUNK_SIZE", DEFAULT_CHUNK_SIZE))
