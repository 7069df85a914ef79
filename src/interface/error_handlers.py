"""JSON error responses for domain and request-validation errors."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.core.config import constants
from src.core.errors import DatabaseError, DevBoardError, ErrorCode, classify_error_with_response


logger = logging.getLogger(__name__)


async def handle_devboard_error(request: Request, exc: DevBoardError) -> JSONResponse:
    """Turn domain errors into JSON error responses."""
    response = classify_error_with_response(exc)
    if isinstance(exc, DatabaseError):
        logger.error("request_failed", extra={"path": request.url.path, "error": str(exc)})
    else:
        logger.info("request_rejected", extra={"path": request.url.path, "code": response.code})
    return JSONResponse(
        status_code=response.status_code,
        content={"error": response.message, "code": response.code},
    )


async def handle_request_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400s."""
    details = [
        {"loc": ".".join(str(part) for part in err.get("loc", ())), "msg": str(err.get("msg", ""))}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=constants.HTTP_BAD_REQUEST,
        content={"error": "Invalid request", "code": ErrorCode.ERR_VALIDATION, "details": details},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to an application."""
    app.add_exception_handler(DevBoardError, handle_devboard_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)  # type: ignore[arg-type]
