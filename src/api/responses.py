"""Response envelope: every route answers {success, data?, error?, message?, ...}."""

import logging
import traceback

from fastapi import Request, status
from fastapi.responses import JSONResponse

from contactbook.application import ErrorKind, Failure

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.MALFORMED_IDENTIFIER: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DUPLICATE_EMAIL: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.STORE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(status_code: int, error: str, *, details: list[str] | None = None) -> JSONResponse:
    content: dict = {"success": False, "error": error}
    if details:
        content["details"] = details
    return JSONResponse(content=content, status_code=status_code)


def failure_response(failure: Failure) -> JSONResponse:
    return error_response(
        STATUS_BY_KIND[failure.kind],
        failure.message,
        details=list(failure.details) or None,
    )


def server_error(request: Request, message: str, exc: BaseException) -> JSONResponse:
    """500 envelope. The stack trace is included unless running in production."""
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    content: dict = {"success": False, "error": message}
    settings = getattr(request.app.state, "settings", None)
    if settings is None or not settings.is_production:
        content["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(content=content, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
