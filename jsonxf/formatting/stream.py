from __future__ import annotations

import io
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import BinaryIO

from jsonxf.env import chunk_size_from_env
from jsonxf.errors import FormatCancelled, FormatterEncodingError, FormatterIOError
from jsonxf.formatting.chunking import iter_chunks
from jsonxf.formatting.config import FormatterOptions, minimizer, pretty_printer
from jsonxf.formatting.engine import Formatter


@dataclass
class FormatResult:
    text: str
    stats: dict[str, int]


def _check_stop(should_stop: Callable[[], bool] | None) -> None:
    if should_stop is not None and should_stop():
        raise FormatCancelled("formatting cancelled")


def _write(sink: BinaryIO, data: bytes) -> None:
    if not data:
        return
    try:
        sink.write(data)
    except OSError as e:
        raise FormatterIOError(f"write failed: {e}", operation="write") from e


def iter_formatted(
    chunks: Iterable[bytes],
    options: FormatterOptions | None = None,
    *,
    should_stop: Callable[[], bool] | None = None,
) -> Iterator[bytes]:
    """Lazily format an iterable of byte chunks, yielding output as it is produced."""

    xf = Formatter(options)
    for chunk in chunks:
        _check_stop(should_stop)
        out = xf.feed(chunk)
        if out:
            yield out
    tail = xf.finish()
    if tail:
        yield tail


def format_stream(
    source: BinaryIO,
    sink: BinaryIO,
    options: FormatterOptions | None = None,
    *,
    chunk_size: int | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> dict[str, int]:
    """Read ``source`` to exhaustion, writing formatted bytes to ``sink``.

    Output is written once per input chunk, so memory use is bounded by the
    chunk size rather than the stream length. ``should_stop`` is polled
    before each chunk; when it returns true :class:`FormatCancelled` is raised
    and the trailing output is not written.

    Returns the formatter statistics.
    """

    size = chunk_size if chunk_size is not None else chunk_size_from_env()
    xf = Formatter(options)
    for chunk in iter_chunks(source, size):
        _check_stop(should_stop)
        _write(sink, xf.feed(chunk))
    _write(sink, xf.finish())

    flush = getattr(sink, "flush", None)
    if flush is not None:
        try:
            flush()
        except OSError as e:
            raise FormatterIOError(f"write failed: {e}", operation="write") from e
    return xf.stats


def format_bytes(data: bytes, options: FormatterOptions | None = None) -> tuple[bytes, dict[str, int]]:
    sink = io.BytesIO()
    stats = format_stream(io.BytesIO(data), sink, options, chunk_size=max(1, len(data)))
    return sink.getvalue(), stats


def format_text(text: str, options: FormatterOptions | None = None) -> FormatResult:
    """Format a complete JSON text held in memory."""

    try:
        data = text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise FormatterEncodingError(f"input is not encodable as UTF-8: {e}") from e

    out, stats = format_bytes(data, options)
    try:
        return FormatResult(text=out.decode("utf-8"), stats=stats)
    except UnicodeDecodeError as e:
        raise FormatterEncodingError(f"output is not valid UTF-8: {e}") from e


def pretty_print(text: str, indent: str = "  ") -> str:
    return format_text(text, pretty_printer().with_overrides(indent=indent)).text


def minimize(text: str) -> str:
    return format_text(text, minimizer()).text
