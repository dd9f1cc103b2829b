from __future__ import annotations


class FormatterError(RuntimeError):
    """Base class for failures surfaced by the formatting entry points."""


class FormatterIOError(FormatterError):
    def __init__(self, message: str, *, operation: str) -> None:
        super().__init__(message)
        self.operation = operation

    @property
    def broken_pipe(self) -> bool:
        return isinstance(self.__cause__, BrokenPipeError)


class FormatterEncodingError(FormatterError):
    pass


class FormatCancelled(FormatterError):
    pass
