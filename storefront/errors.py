"""Error taxonomy of the storefront API and its FastAPI handlers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
import structlog

logger = structlog.get_logger(__name__)


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(StorefrontError):
    """The referenced cart row or product does not exist."""

    status_code = 404


class InvalidInputError(StorefrontError):
    """The request is well-formed but cannot be applied to the current state."""

    status_code = 400


async def storefront_error_handler(request: Request, exc: StorefrontError):
    logger.info(
        "Request rejected",
        method=request.method,
        path=request.url.path,
        status=exc.status_code,
        detail=exc.detail,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    # no retry here; the client decides whether to try again
    logger.error(
        "Storage failure",
        method=request.method,
        path=request.url.path,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "storage failure"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
