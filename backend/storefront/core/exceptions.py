"""RFC 7807 Problem Details error handling."""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import exc as sa_exc
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.schemas.common import ProblemDetail

PROBLEM_BASE = "https://errors.storefront.dev"
PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


class ProblemDetailError(Exception):
    """Raise for RFC 7807 problem+json responses.

    ``retryable`` is written into the body when set; API clients read it to
    decide whether a 5xx is worth retrying.
    """

    def __init__(
        self,
        status: int,
        title: str,
        detail: str,
        error_type: str | None = None,
        retryable: bool | None = None,
    ):
        super().__init__(detail)
        self.status = status
        self.title = title
        self.detail = detail
        self.error_type = error_type or "about:blank"
        self.retryable = retryable


def problem_type(slug: str) -> str:
    return f"{PROBLEM_BASE}/{slug}"


def _problem_response(
    request: Request, problem: dict, headers: dict | None = None
) -> JSONResponse:
    body = ProblemDetail(instance=str(request.url.path), **problem)
    return JSONResponse(
        status_code=body.status,
        content=body.to_content(),
        media_type=PROBLEM_MEDIA_TYPE,
        headers=headers,
    )


async def problem_detail_handler(request: Request, exc: ProblemDetailError) -> JSONResponse:
    return _problem_response(
        request,
        {
            "type": exc.error_type,
            "title": exc.title,
            "status": exc.status,
            "detail": exc.detail,
            "retryable": exc.retryable,
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _problem_response(
        request,
        {
            "title": exc.detail if isinstance(exc.detail, str) else "Error",
            "status": exc.status_code,
            "detail": exc.detail,
        },
        headers=getattr(exc, "headers", None),
    )


async def database_error_handler(request: Request, exc: sa_exc.SQLAlchemyError) -> JSONResponse:
    """Lost connections are worth retrying; anything else the database rejects is not."""
    if _is_unavailable(exc):
        logger.warning("Database unavailable on %s: %s", request.url.path, exc)
        return _problem_response(
            request,
            {
                "type": problem_type("database-unavailable"),
                "title": "Service Unavailable",
                "status": 503,
                "detail": "The store database is temporarily unavailable",
                "retryable": True,
            },
            headers={"Retry-After": "5"},
        )
    logger.error("Database error on %s", request.url.path, exc_info=exc)
    return _problem_response(
        request,
        {
            "type": problem_type("database-error"),
            "title": "Internal Server Error",
            "status": 500,
            "detail": "The request could not be completed",
            "retryable": False,
        },
    )


# server gone or pool exhausted
_UNAVAILABLE = (sa_exc.OperationalError, sa_exc.InterfaceError, sa_exc.TimeoutError)


def _is_unavailable(exc: sa_exc.SQLAlchemyError) -> bool:
    if isinstance(exc, sa_exc.DBAPIError) and exc.connection_invalidated:
        return True
    return isinstance(exc, _UNAVAILABLE)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _problem_response(
        request,
        {"title": "Validation Error", "status": 422, "detail": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # ctx may hold the raw ValueError raised by a validator
    errors = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        errors.append(err)
    return errors
