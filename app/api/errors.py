# app/api/errors.py
"""
Exception handlers for the session endpoints.

Every failure of a fetch cycle is rendered as `{"error": ..., "details": ...}`
with a non-2xx status, so callers never see an empty list in place of an
upstream error.
"""

from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.schemas.call_session import ErrorResponse
from app.services.livekit_client import (
    ConfigurationError,
    LiveKitClientError,
    UpstreamHttpError,
)
from app.services.session_normalizer import MissingSessionIdentifierError

logger = logging.getLogger(__name__)


def upstream_status_to_response_status(status_code: int | None) -> int:
    """
    Status to answer with for an upstream non-2xx response.

    The upstream status is propagated when it is a client or server error
    code; anything else becomes 502 Bad Gateway.
    """
    if status_code is not None and 400 <= status_code <= 599:
        return status_code
    return HTTPStatus.BAD_GATEWAY


def _error_response(status_code: int, error: str, details: str | None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(status_code=int(status_code), content=body.model_dump())


async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error("Configuration error on %s: %s", request.url.path, exc)
    return _error_response(
        HTTPStatus.INTERNAL_SERVER_ERROR,
        "Server configuration error: Missing LiveKit credentials.",
        str(exc),
    )


async def upstream_http_error_handler(request: Request, exc: UpstreamHttpError) -> JSONResponse:
    logger.warning(
        "Upstream error on %s: status=%s body=%s", request.url.path, exc.status_code, exc.body
    )
    return _error_response(
        upstream_status_to_response_status(exc.status_code),
        "Failed to fetch sessions from LiveKit.",
        f"LiveKit API responded with status {exc.status_code}. "
        "Check server logs for more details.",
    )


async def livekit_client_error_handler(request: Request, exc: LiveKitClientError) -> JSONResponse:
    # TransportError / DecodeError
    logger.error("Internal error on %s: %s: %s", request.url.path, type(exc).__name__, exc)
    return _error_response(
        HTTPStatus.INTERNAL_SERVER_ERROR,
        "Internal server error.",
        str(exc),
    )


async def missing_identifier_handler(
    request: Request, exc: MissingSessionIdentifierError
) -> JSONResponse:
    logger.error("Rejected session batch on %s: %s", request.url.path, exc)
    return _error_response(
        HTTPStatus.BAD_GATEWAY,
        "LiveKit returned a session without an identifier.",
        str(exc),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register the session error handlers with the FastAPI app."""
    app.add_exception_handler(ConfigurationError, configuration_error_handler)
    app.add_exception_handler(UpstreamHttpError, upstream_http_error_handler)
    app.add_exception_handler(LiveKitClientError, livekit_client_error_handler)
    app.add_exception_handler(MissingSessionIdentifierError, missing_identifier_handler)
