"""Errors raised by the storefront API client."""

from typing import Any


class ApiError(Exception):
    """Non-success API response; ``payload`` is the decoded problem body."""

    def __init__(self, status: int, detail: str, payload: Any = None):
        super().__init__(f"{status}: {detail}")
        self.status = status
        self.detail = detail
        self.payload = payload


class NotFoundError(ApiError):
    pass


class UnauthorizedError(ApiError):
    pass


class ApiValidationError(ApiError):
    @property
    def field_errors(self) -> dict[str, str]:
        """``{"body.colors.primary": "msg"}`` from a 422 problem body."""
        detail = self.payload.get("detail") if isinstance(self.payload, dict) else None
        if not isinstance(detail, list):
            return {}
        errors = {}
        for err in detail:
            if isinstance(err, dict):
                loc = ".".join(str(part) for part in err.get("loc", ()))
                errors[loc] = err.get("msg", "")
        return errors


class ServerError(ApiError):
    """5xx response, after retries where the response allowed them."""


class ApiUnavailableError(ApiError):
    """The API could not be reached after retries."""

    def __init__(self, detail: str):
        super().__init__(503, detail)


STATUS_ERRORS: dict[int, type[ApiError]] = {
    401: UnauthorizedError,
    404: NotFoundError,
    422: ApiValidationError,
}


def error_for_status(status: int, detail: str, payload: Any = None) -> ApiError:
    if status >= 500:
        return ServerError(status, detail, payload)
    return STATUS_ERRORS.get(status, ApiError)(status, detail, payload)
