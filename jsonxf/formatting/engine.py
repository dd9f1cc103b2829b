from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from jsonxf.errors import FormatterEncodingError
from jsonxf.formatting.config import FormatterOptions, pretty_printer

logger = logging.getLogger(__name__)


# Outside a string, every byte not matched here is copied through untouched.
_STRUCTURAL_RE = re.compile(rb'[ \t\r\n{}\[\],:"]')
# Inside a string only the quote and the backslash change state.
_STRING_RE = re.compile(rb'["\\]')

_WHITESPACE = frozenset(b" \t\r\n")
_OPENERS = frozenset(b"{[")
_CLOSERS = frozenset(b"}]")
_QUOTE = ord('"')
_BACKSLASH = ord("\\")
_COMMA = ord(",")


def _encode_option(name: str, value: str) -> bytes:
    try:
        return value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise FormatterEncodingError(f"option {name} is not encodable as UTF-8: {e}") from e


@dataclass
class FormatterState:
    """Cursor state carried across chunk boundaries for a single stream."""

    depth: int = 0
    in_string: bool = False
    in_backslash: bool = False
    empty: bool = False
    first: bool = True


class Formatter:
    """Streaming JSON pretty-printer/minimizer.

    Feed arbitrary byte chunks with :meth:`feed` and collect the returned
    bytes, then call :meth:`finish` once for the trailing output. The input is
    never parsed or validated; only whitespace between tokens is rewritten.
    One instance formats exactly one stream.
    """

    def __init__(self, options: FormatterOptions | None = None) -> None:
        self.options = options if options is not None else pretty_printer()
        self.state = FormatterState()
        self.stats: dict[str, int] = {
            "bytes_in": 0,
            "bytes_out": 0,
            "records": 0,
            "unbalanced_closers": 0,
        }
        self._finished = False

        opts = self.options
        self._indent = _encode_option("indent", opts.indent)
        self._line_separator = _encode_option("line_separator", opts.line_separator)
        self._record_separator = _encode_option("record_separator", opts.record_separator)
        self._after_colon = b":" + _encode_option("after_colon", opts.after_colon)
        self._trailing_output = _encode_option("trailing_output", opts.trailing_output)
        self._breaks: list[bytes] = [self._line_separator]

    def _line_break(self, depth: int) -> bytes:
        breaks = self._breaks
        while len(breaks) <= depth:
            breaks.append(breaks[-1] + self._indent)
        return breaks[depth]

    def feed(self, chunk: bytes) -> bytes:
        if self._finished:
            raise RuntimeError("formatter already finished")

        st = self.state
        out: list[bytes] = []
        emit = out.append
        pos = 0
        end = len(chunk)

        while pos < end:
            if st.in_string:
                if st.in_backslash:
                    st.in_backslash = False
                    emit(chunk[pos : pos + 1])
                    pos += 1
                    continue
                m = _STRING_RE.search(chunk, pos)
                if m is None:
                    emit(chunk[pos:])
                    break
                i = m.start()
                emit(chunk[pos : i + 1])
                if chunk[i] == _BACKSLASH:
                    st.in_backslash = True
                else:
                    st.in_string = False
                pos = i + 1
                continue

            m = _STRUCTURAL_RE.search(chunk, pos)
            i = end if m is None else m.start()
            if i > pos:
                # Bare scalar bytes: numbers, literals, or junk.
                self._begin_content(emit)
                emit(chunk[pos:i])
            if m is None:
                break

            b = chunk[i]
            pos = i + 1
            if b in _WHITESPACE:
                continue
            if b == _QUOTE:
                self._begin_content(emit)
                st.in_string = True
                emit(b'"')
            elif b in _OPENERS:
                self._open(emit, chunk[i:pos])
            elif b in _CLOSERS:
                self._close(emit, chunk[i:pos])
            elif b == _COMMA:
                st.first = False
                emit(b",")
                emit(self._line_break(st.depth))
            else:
                st.first = False
                emit(self._after_colon)

        data = b"".join(out)
        self.stats["bytes_in"] += end
        self.stats["bytes_out"] += len(data)
        return data

    def finish(self) -> bytes:
        if self._finished:
            raise RuntimeError("formatter already finished")
        self._finished = True

        st = self.state
        self.stats["bytes_out"] += len(self._trailing_output)
        logger.debug(
            "formatted %s bytes into %s bytes (records=%s, depth=%s, in_string=%s)",
            self.stats["bytes_in"],
            self.stats["bytes_out"],
            self.stats["records"],
            st.depth,
            st.in_string,
        )
        return self._trailing_output

    def _begin_content(self, emit) -> None:
        st = self.state
        st.first = False
        if st.empty:
            st.empty = False
            emit(self._line_break(st.depth))

    def _open(self, emit, byte: bytes) -> None:
        st = self.state
        if st.first:
            st.first = False
        elif st.empty:
            emit(self._line_break(st.depth))
        elif st.depth == 0 and not self.options.eager_record_separator:
            emit(self._record_separator)

        if st.depth == 0:
            self.stats["records"] += 1
        emit(byte)
        st.depth += 1
        st.empty = True

    def _close(self, emit, byte: bytes) -> None:
        st = self.state
        st.first = False
        if st.depth > 0:
            st.depth -= 1
        else:
            # More closers than openers: clamp at zero and keep going.
            self.stats["unbalanced_closers"] += 1
            if self.stats["unbalanced_closers"] == 1:
                logger.warning("unbalanced closing bracket; depth clamped at zero")

        if st.empty:
            st.empty = False
            emit(byte)
        else:
            emit(self._line_break(st.depth))
            emit(byte)

        if st.depth == 0 and self.options.eager_record_separator:
            emit(self._record_separator)
