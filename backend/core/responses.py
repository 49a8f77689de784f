"""
Response envelope and exception handlers
"""
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def api_response(data: Any = None, status_code: int = 200, message: Optional[str] = None,
                 success: bool = True) -> JSONResponse:
    """Wrap a payload in the {success, data, message} envelope"""
    content = {"success": success}
    if data is not None:
        content["data"] = jsonable_encoder(data, by_alias=True)
    if message:
        content["message"] = message
    return JSONResponse(status_code=status_code, content=content)


def error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


def format_validation_error(exc: RequestValidationError) -> str:
    """First validation problem as 'field: reason'"""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(location)
    reason = first.get("msg", "Invalid value")
    return f"{field}: {reason}" if field else reason


def register_exception_handlers(app: FastAPI):
    """Render every error through the shared envelope"""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return error_response(400, format_validation_error(exc))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return error_response(500, "Internal server error")
