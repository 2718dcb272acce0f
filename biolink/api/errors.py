"""Translation of component errors and exceptions into HTTP responses."""

import logging
import sqlite3
from collections.abc import Sequence
from typing import Any, Protocol

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic.alias_generators import to_camel
from starlette.exceptions import HTTPException as StarletteHTTPException

from biolink.domain.errors import StorageError

logger = logging.getLogger(__name__)


class ComponentError(Protocol):
    code: str
    message: str
    field: str | None


def raise_for_errors(errors: Sequence[ComponentError]) -> None:
    """
    Raise the HTTP error matching the first component error.

    Not-found codes become 404 with only a message, so a caller cannot tell
    a missing resource from one owned by somebody else. Everything else is 400.
    """
    if not errors:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Request rejected")

    err = errors[0]
    if err.code.endswith("_not_found"):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=err.message)

    detail: dict[str, Any] = {"message": err.message, "code": err.code}
    if err.field:
        detail["field"] = to_camel(err.field)
    logger.warning("Rejected request: %s (%s)", err.code, err.message)
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict):
        body = exc.detail
    else:
        body = {"message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {"msg": "Invalid request", "loc": ()}
    loc = [str(part) for part in first.get("loc", ())]
    # Drop the "body"/"path"/"query" prefix
    field = ".".join(loc[1:]) if len(loc) > 1 else None
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": first.get("msg", "Invalid request"), "field": field},
    )


async def storage_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StorageError, storage_exception_handler)
    app.add_exception_handler(sqlite3.Error, storage_exception_handler)
