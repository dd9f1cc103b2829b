from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

Mode = Literal["pretty", "minimize"]


class ErrorEnvelope(BaseModel):
    code: str
    message: str


class FormatOptionsIn(BaseModel):
    """Per-field overrides on top of the chosen preset; unset fields keep the preset value."""

    indent: str | None = None
    line_separator: str | None = None
    record_separator: str | None = None
    after_colon: str | None = None
    trailing_output: str | None = None
    eager_record_separator: bool | None = None


class FormatRequest(BaseModel):
    text: str
    mode: Mode = "pretty"
    options: FormatOptionsIn = Field(default_factory=FormatOptionsIn)


class FormatStats(BaseModel):
    bytes_in: int = 0
    bytes_out: int = 0
    records: int = 0
    unbalanced_closers: int = 0


class FormatResponse(BaseModel):
    text: str
    stats: FormatStats
