"""Exception handlers rendering errors as JSON envelopes."""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from erp_auth.exceptions import ERPAuthError

logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    error: str,
    message: str,
    **extra: object,
) -> JSONResponse:
    body = {"success": False, "error": error, "message": message, **extra}
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers for domain errors and request validation."""

    @app.exception_handler(ERPAuthError)
    async def handle_domain_error(request: Request, exc: ERPAuthError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.info(
                f"{request.method} {request.url.path} -> {exc.status_code} {exc.error}"
            )
        return error_response(exc.status_code, exc.error, exc.message, **exc.details)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        # Drop "input" and "ctx": they may echo passwords or hold exceptions.
        details = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ]
        first = details[0]["msg"] if details else "Invalid request"
        return error_response(400, "Invalid request data", first, details=details)

    @app.exception_handler(Exception)
    async def handle_uncaught(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return error_response(500, "Internal Server Error", "Internal server error")
