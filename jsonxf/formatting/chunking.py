from __future__ import annotations

from collections.abc import Iterator
from typing import BinaryIO

from jsonxf.errors import FormatterIOError


def iter_chunks(source: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    """Yield successive non-empty chunks from a binary source until EOF.

    Interrupted reads are retried; any other read failure is wrapped in
    :class:`FormatterIOError` with the original error as its cause.
    """

    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    while True:
        try:
            chunk = source.read(chunk_size)
        except InterruptedError:
            continue
        except OSError as e:
            raise FormatterIOError(f"read failed: {e}", operation="read") from e
        if not chunk:
            return
        yield bytes(chunk)


def split_bytes(data: bytes, chunk_size: int) -> list[bytes]:
    if chunk_size <= 0:
        return [data]
    return [data[i : i + chunk_size] for i in range(0, len(data), chunk_size)]
