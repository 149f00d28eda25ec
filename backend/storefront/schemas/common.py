"""Shared schema types: cursor pages and the problem+json error body."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    items: list[T]
    # opaque; pass back unchanged with the same filters and sort
    next_cursor: str | None = None
    has_more: bool = False


class ProblemDetail(BaseModel):
    """RFC 7807 body. ``retryable`` is only sent when the server knows."""

    type: str = "about:blank"
    title: str
    status: int
    detail: Any
    instance: str
    retryable: bool | None = None

    def to_content(self) -> dict:
        return self.model_dump(exclude_none=True) | {"detail": self.detail}
