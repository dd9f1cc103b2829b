from __future__ import annotations

import itertools
import logging
import os
import shutil
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path
from typing import BinaryIO

from jsonxf.errors import FormatterIOError
from jsonxf.formatting.config import FormatterOptions
from jsonxf.formatting.stream import format_stream

logger = logging.getLogger(__name__)

_tmp_seq = itertools.count()


def _tmp_suffix() -> str:
    return f".{os.getpid()}_{next(_tmp_seq)}.tmp"


def same_file(a: Path, b: Path) -> bool:
    try:
        return os.path.samefile(a, b)
    except OSError:
        return False


@contextmanager
def atomic_output(dst: Path) -> Iterator[BinaryIO]:
    """Open a temp file beside ``dst`` and rename it over ``dst`` on success.

    ``dst`` is left untouched if the body raises, which also makes it safe for
    ``dst`` to be the file currently being read. Symlinks are followed, so the
    link target is replaced and the link itself survives; an existing target's
    permission bits are carried over.
    """

    dst = dst.resolve()
    tmp = dst.with_name(dst.name + _tmp_suffix())
    try:
        with tmp.open("wb") as f:
            yield f
        if dst.exists():
            shutil.copymode(dst, tmp)
        tmp.replace(dst)
    except OSError as e:
        raise FormatterIOError(f"{dst}: {e.strerror or e}", operation="write") from e
    finally:
        if tmp.exists():
            try:
                tmp.unlink()
            except OSError:
                logger.exception("failed to cleanup temp output: %s", tmp)


def open_input(src: Path) -> BinaryIO:
    try:
        return src.open("rb")
    except OSError as e:
        raise FormatterIOError(f"{src}: {e.strerror or e}", operation="read") from e


def open_output(dst: Path) -> BinaryIO:
    try:
        return dst.open("wb")
    except OSError as e:
        raise FormatterIOError(f"{dst}: {e.strerror or e}", operation="write") from e


def output_for(src: Path | None, dst: Path) -> AbstractContextManager[BinaryIO]:
    """Open ``dst`` for writing.

    Only when ``dst`` is the same file as ``src`` is the output staged in a temp
    file; otherwise ``dst`` is truncated and written directly, so FIFOs, devices
    and existing file metadata are left alone.
    """

    if src is not None and same_file(src, dst):
        logger.debug("formatting %s in place", dst)
        return atomic_output(dst)
    return open_output(dst)


def format_file(
    src: Path,
    dst: Path,
    options: FormatterOptions | None = None,
    *,
    chunk_size: int | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> dict[str, int]:
    """Format ``src`` into ``dst``; ``dst`` may be ``src`` itself."""

    with open_input(src) as fin, output_for(src, dst) as fout:
        return format_stream(fin, fout, options, chunk_size=chunk_size, should_stop=should_stop)
