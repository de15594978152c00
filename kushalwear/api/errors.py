# kushalwear/api/errors.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from kushalwear.domain.errors import AppError
from kushalwear.utils.settings import ENVIRONMENT
from kushalwear.utils.logging import get_logger

logger = get_logger(__name__)


def _field(loc) -> str:
    # ("body", "items", 0, "price") -> "items.0.price"
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    """Kazdy blad wychodzi jako JSON z polem message."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        body = {"message": exc.message}
        if exc.errors:
            body["errors"] = exc.errors
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [{"field": _field(e.get("loc", ())), "message": e.get("msg", "")} for e in exc.errors()]
        return JSONResponse(status_code=400, content={"message": "Validation failed", "errors": errors})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        body = {"message": "Internal server error"}
        # szczegoly tylko w developmencie
        if ENVIRONMENT == "development":
            body["error"] = str(exc)
        return JSONResponse(status_code=500, content=body)
