from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import BinaryIO

from fastapi import Body, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, StreamingResponse

from jsonxf.env import chunk_size_from_env, env_int
from jsonxf.errors import FormatterEncodingError
from jsonxf.formatting.chunking import iter_chunks
from jsonxf.formatting.config import FormatterOptions, preset
from jsonxf.formatting.engine import Formatter
from jsonxf.formatting.stream import format_text
from jsonxf.logging_setup import ensure_file_logging
from jsonxf.models import ErrorEnvelope, FormatRequest, FormatResponse, FormatStats, Mode

logger = logging.getLogger(__name__)

WORKDIR = Path(__file__).resolve().parent.parent
LOG_DIR = Path(os.getenv("JSONXF_LOG_DIR") or WORKDIR / "logs")

MAX_BODY_BYTES = env_int("JSONXF_MAX_BODY_BYTES", 64 * 1024 * 1024)
SPOOL_MAX_MEMORY = 1024 * 1024


def _error_code_for_status(status_code: int) -> str:
    if status_code == 404:
        return "not_found"
    if status_code in {400, 413, 422}:
        return "bad_request"
    return "internal_error"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": ErrorEnvelope(code=_error_code_for_status(status_code), message=message).model_dump()},
    )


def _options_for(mode: Mode, **overrides: str | bool | None) -> FormatterOptions:
    return preset(mode).with_overrides(**overrides)


@asynccontextmanager
async def _lifespan(_app: FastAPI) -> AsyncIterator[None]:
    log_file = ensure_file_logging(log_dir=LOG_DIR)
    logger.info("file logging enabled: %s", log_file)
    yield


app = FastAPI(lifespan=_lifespan)


@app.exception_handler(HTTPException)
async def _http_exception_handler(_request: Request, exc: HTTPException):
    return _error(int(exc.status_code), str(exc.detail))


@app.exception_handler(RequestValidationError)
async def _validation_exception_handler(_request: Request, exc: RequestValidationError):
    msg = "bad request"
    errors = exc.errors()
    if errors:
        msg = errors[0].get("msg") or msg
    return _error(400, msg)


@app.exception_handler(FormatterEncodingError)
async def _encoding_exception_handler(_request: Request, exc: FormatterEncodingError):
    return _error(400, str(exc))


@app.exception_handler(Exception)
async def _unhandled_exception_handler(_request: Request, exc: Exception):
    logger.exception("unhandled error")
    return _error(500, str(exc))


@app.get("/healthz")
async def healthz():
    return {"ok": True}


@app.post("/api/v1/format", response_model=FormatResponse)
async def format_json(body: FormatRequest = Body(...)):
    if len(body.text.encode("utf-8", "surrogatepass")) > MAX_BODY_BYTES:
        raise HTTPException(status_code=413, detail=f"text too large (> {MAX_BODY_BYTES} bytes)")

    options = _options_for(body.mode, **body.options.model_dump())
    result = format_text(body.text, options)
    return FormatResponse(text=result.text, stats=FormatStats(**result.stats))


def _iter_spool(spool: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    with spool:
        yield from iter_chunks(spool, chunk_size)


@app.post("/api/v1/format/stream")
async def format_json_stream(
    request: Request,
    mode: Mode = Query("pretty"),
    indent: str | None = Query(None),
):
    """Format the raw request body.

    The body is consumed incrementally and formatted output is spooled (to
    disk past ``SPOOL_MAX_MEMORY``) before being streamed back, so neither
    side is held in memory in full.
    """

    xf = Formatter(_options_for(mode, indent=indent))
    spool = tempfile.SpooledTemporaryFile(max_size=SPOOL_MAX_MEMORY)
    try:
        async for chunk in request.stream():
            if not chunk:
                continue
            if xf.stats["bytes_in"] + len(chunk) > MAX_BODY_BYTES:
                raise HTTPException(status_code=413, detail=f"body too large (> {MAX_BODY_BYTES} bytes)")
            spool.write(xf.feed(chunk))
        spool.write(xf.finish())
    except BaseException:
        spool.close()
        raise
    spool.seek(0)

    headers = {
        "X-Jsonxf-Records": str(xf.stats["records"]),
        "X-Jsonxf-Unbalanced-Closers": str(xf.stats["unbalanced_closers"]),
    }
    return StreamingResponse(
        _iter_spool(spool, chunk_size_from_env()),
        media_type="application/json",
        headers=headers,
    )
