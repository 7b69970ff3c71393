"""Global error handlers untuk FastAPI application."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from src.core.exceptions import KompensasiError

logger = logging.getLogger(__name__)


async def kompensasi_error_handler(request: Request, exc: KompensasiError) -> JSONResponse:
    """Map domain error ke response JSON dengan status masing-masing."""
    logger.info(
        f"{request.method} {request.url.path} -> {exc.code}: {exc.message}"
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_error_handler(request: Request, exc) -> JSONResponse:
    """Validation error dari pydantic request body / query."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Data yang dikirim tidak valid",
            "error_code": "REQUEST_VALIDATION_ERROR",
            "details": {"errors": jsonable_errors(exc)}
        }
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Fallback untuk error database yang tidak ter-handle di service."""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Terjadi kesalahan pada database. Silakan coba lagi.",
            "error_code": "DATABASE_ERROR",
            "details": {}
        }
    )


async def filter_validation_error_handler(request: Request, exc: PydanticValidationError) -> JSONResponse:
    """Validator filter params (`Depends()` pada schema) gagal saat dependency dibuat."""
    return await request_validation_error_handler(request, exc)


def jsonable_errors(exc) -> list:
    """Ambil field location dan message saja dari pydantic errors."""
    return [
        {"loc": list(error.get("loc", [])), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


def add_error_handlers(app: FastAPI) -> None:
    """Register semua error handlers ke app."""
    app.add_exception_handler(KompensasiError, kompensasi_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(PydanticValidationError, filter_validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
