"""Request correlation and CORS setup."""

from __future__ import annotations

import logging
import time
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from codesync_api.settings import Settings

from .logging import bind_request_context, clear_request_context, log_context

REQUEST_ID_HEADER = "X-Request-ID"

_REQUEST_LOGGER = logging.getLogger("codesync_api.request")


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind ``X-Request-ID`` (or a fresh id) to the request's logs and echo it back."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        bind_request_context(request_id)
        started = time.perf_counter()

        def _fields(status_code: int | None) -> dict:
            return log_context(
                path=request.url.path,
                method=request.method,
                status_code=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )

        try:
            response = await call_next(request)
        except Exception:
            # The exception handler logs the traceback; this only closes the request line.
            _REQUEST_LOGGER.error("request.error", extra=_fields(None))
            raise
        else:
            _REQUEST_LOGGER.info("request.complete", extra=_fields(response.status_code))
        finally:
            clear_request_context()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def register_middleware(app: FastAPI, settings: Settings) -> None:
    """CORS for the browser editor, then request correlation (outermost)."""
    if settings.server_cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.server_cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=[REQUEST_ID_HEADER, "Content-Disposition", "Location"],
        )
    app.add_middleware(RequestContextMiddleware)


__all__ = ["RequestContextMiddleware", "register_middleware"]
