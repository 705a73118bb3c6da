import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, SQLAlchemyError, TimeoutError as SQLAlchemyTimeoutError

from boxoffice.domain.exceptions import BoxOfficeError, StorageUnavailableError

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = "1"


def _error_body(code: str, detail) -> dict:
    return {"code": code, "detail": detail}


def _is_db_degraded(exc: Exception) -> bool:
    return isinstance(exc, (OperationalError, SQLAlchemyTimeoutError))


async def box_office_error_handler(request: Request, exc: BoxOfficeError) -> JSONResponse:
    headers = None
    if isinstance(exc, StorageUnavailableError):
        headers = {"Retry-After": RETRY_AFTER_SECONDS}
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.code, exc.message),
        headers=headers,
    )


async def request_validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("VALIDATION_ERROR", jsonable_encoder(exc.errors())),
    )


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Unhandled storage error on %s %s", request.method, request.url.path)
    if _is_db_degraded(exc):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=_error_body(
                StorageUnavailableError.code,
                "Database is currently unavailable. Please retry.",
            ),
            headers={"Retry-After": RETRY_AFTER_SECONDS},
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("STORAGE_ERROR", "Server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BoxOfficeError, box_office_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
