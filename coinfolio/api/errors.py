"""Mapping of domain exceptions to HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from coinfolio.exceptions import (
    AccountDeletionError,
    AuthError,
    CoinfolioError,
    ConflictError,
    NotFoundError,
    TransportError,
    UpstreamError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[CoinfolioError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthError: status.HTTP_401_UNAUTHORIZED,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    AccountDeletionError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    UpstreamError: status.HTTP_502_BAD_GATEWAY,
    TransportError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_to_http(exc: CoinfolioError) -> tuple[int, dict[str, str]]:
    """Map a domain exception to (status_code, body)."""
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            status_code = STATUS_BY_ERROR[error_type]
            break
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return status_code, {"detail": exc.message, "error": exc.code}


async def handle_coinfolio_error(request: Request, exc: CoinfolioError) -> JSONResponse:
    status_code, body = error_to_http(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CoinfolioError, handle_coinfolio_error)
