"""Store (tenant) request/response schemas."""

import uuid
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

# 3-63 chars, lowercase alphanumerics and inner hyphens; doubles as a URL segment
StoreSlug = Annotated[
    str,
    StringConstraints(min_length=3, max_length=63, pattern=r"^[a-z0-9][a-z0-9-]{1,61}[a-z0-9]$"),
]
CurrencyCode = Annotated[str, StringConstraints(pattern=r"^[A-Z]{3}$")]


class TenantCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: StoreSlug
    default_currency: CurrencyCode = "KWD"
    # initial storefront theme; the default theme when omitted
    theme: str | None = Field(None, min_length=1, max_length=63)


class TenantResponse(BaseModel):
    id: uuid.UUID
    name: str
    slug: str
    is_active: bool
    default_currency: str
    created_at: datetime

    model_config = {"from_attributes": True}
