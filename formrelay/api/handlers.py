"""
Exception handlers that keep every error response in the
{"success": false, "error": ...} shape the landing pages expect.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INVALID_PAYLOAD_MESSAGE = "Invalid submission payload"
NOT_FOUND_MESSAGE = "Not found"
INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_response(status_code: int, error: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error}, headers=headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Request bodies that are not a JSON object of strings.

    Missing or blank form fields are not reported here; they pass parsing and
    are listed by the notifier instead.
    """
    logger.info(f"⚠️ Malformed payload on {request.url.path}: {exc.errors()}")
    return error_response(status.HTTP_400_BAD_REQUEST, INVALID_PAYLOAD_MESSAGE)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return error_response(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"❌ Unhandled error on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
