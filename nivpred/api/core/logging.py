"""Logging helpers for nivpred."""
from __future__ import annotations

import logging
import re
import time
from typing import Callable, Union

from fastapi import FastAPI, Request

# Medical record numbers, phone numbers and similar identifier-like digit runs.
_RE_IDENTIFIER = re.compile(r"\b\d{6,}\b")


class IdentifierRedactor(logging.Filter):
    """Filter that redacts identifier-like numbers from log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        if isinstance(record.msg, str):
            record.msg = _RE_IDENTIFIER.sub("[REDACTED]", record.msg)
        return True


def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    """Configure global logging handlers."""

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    redactor = IdentifierRedactor()
    for handler in logging.getLogger().handlers:
        handler.addFilter(redactor)
    logging.getLogger("uvicorn.access").addFilter(redactor)


async def timing_middleware(request: Request, call_next: Callable):
    """Log HTTP request duration."""

    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logging.getLogger("nivpred.request").info(
        "%s %s completed in %.2f ms", request.method, request.url.path, duration_ms
    )
    return response


def register_middleware(app: FastAPI) -> None:
    app.middleware("http")(timing_middleware)
