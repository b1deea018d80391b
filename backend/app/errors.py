"""Domain errors raised by the marketplace services.

Every error carries a ``kind`` (stable machine-readable name), a human
message and an optional list of offending field names. The HTTP layer maps
kinds to status codes in :func:`register_exception_handlers`.
"""

from __future__ import annotations

from typing import Iterable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.logging_config import get_logger


logger = get_logger(__name__)


class MarketplaceError(Exception):
    kind = "error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, fields: Iterable[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.fields = sorted(fields) if fields else []

    def to_dict(self) -> dict[str, object]:
        return {"detail": self.message, "kind": self.kind, "fields": self.fields}


class ValidationError(MarketplaceError):
    kind = "validation"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(MarketplaceError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class DuplicateError(MarketplaceError):
    kind = "duplicate"
    status_code = status.HTTP_409_CONFLICT


class IneligibleError(MarketplaceError):
    kind = "ineligible"
    status_code = status.HTTP_409_CONFLICT


class ForbiddenError(MarketplaceError):
    kind = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    logger.info(
        "request_rejected",
        path=request.url.path,
        kind=exc.kind,
        detail=exc.message,
        fields=exc.fields,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path, error_type=type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "kind": "internal", "fields": []},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)
