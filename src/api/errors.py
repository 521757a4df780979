"""
Translate component failures into HTTP responses.

Every error body has the shape ``{"detail": <message>, "code": <CODE>}``.
"""

import logging
from collections.abc import Sequence
from uuid import UUID

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.domain.errors import ErrorKind, LifecycleError
from src.domain.validation import is_uuid

logger = logging.getLogger(__name__)

STATUS_FOR_KIND: dict[ErrorKind, int] = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "validation_failed": status.HTTP_400_BAD_REQUEST,
    "forbidden": status.HTTP_403_FORBIDDEN,
    "conflict": status.HTTP_409_CONFLICT,
    "unauthenticated": status.HTTP_401_UNAUTHORIZED,
    "storage_failure": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class APIError(Exception):
    def __init__(
        self,
        status_code: int,
        detail: str,
        code: str,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail
        self.code = code
        self.headers = headers

    @classmethod
    def from_error(cls, error: LifecycleError) -> "APIError":
        return cls(STATUS_FOR_KIND[error.kind], error.message, error.code)


def raise_for_errors(errors: Sequence[LifecycleError]) -> None:
    """Raise the first error as an APIError; no-op when there are none."""
    if errors:
        raise APIError.from_error(errors[0])


def not_found(detail: str, code: str) -> APIError:
    return APIError(status.HTTP_404_NOT_FOUND, detail, code)


def unauthenticated(detail: str) -> APIError:
    return APIError(
        status.HTTP_401_UNAUTHORIZED,
        detail,
        "UNAUTHENTICATED",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _api_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, APIError)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
        headers=exc.headers,
    )


async def _request_validation_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.debug("Rejected request body on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request body", "code": "VALIDATION_FAILED"},
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)


def parse_path_id(value: str, detail: str, code: str) -> UUID:
    """Ids in paths that are not UUID-shaped cannot name anything: 404."""
    if not is_uuid(value):
        raise not_found(detail, code)
    return UUID(value)
