"""Translate domain errors into JSON error responses."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from services.exceptions import ErrorKind, SimulationConsistencyError, WalletError

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.PRICE_FETCH_ERROR: 503,
    ErrorKind.ASSET_NOT_FOUND: 404,
    ErrorKind.ALREADY_EXISTS: 409,
    ErrorKind.AUTHENTICATION_FAILED: 401,
    ErrorKind.INTERNAL_ERROR: 500,
}


def error_response(kind: ErrorKind, message: str) -> JSONResponse:
    """Build the standard error body for a failure of the given kind."""
    return JSONResponse(
        status_code=STATUS_BY_KIND.get(kind, 500),
        content={
            "error": kind.value,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "details": None,
        },
    )


async def wallet_error_handler(request: Request, exc: WalletError) -> JSONResponse:
    if STATUS_BY_KIND.get(exc.kind, 500) >= 500:
        logger.warning("%s on %s %s: %s", exc.kind.value, request.method, request.url.path, exc)
    return error_response(exc.kind, str(exc))


async def consistency_error_handler(
    request: Request, exc: SimulationConsistencyError
) -> JSONResponse:
    logger.error("Internal error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(ErrorKind.INTERNAL_ERROR, str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain error handlers on an application."""
    app.add_exception_handler(WalletError, wallet_error_handler)
    app.add_exception_handler(SimulationConsistencyError, consistency_error_handler)
