"""Public product schemas and catalog filters."""

import uuid
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field, model_validator

ProductSort = Literal["featured", "price_asc", "price_desc", "newest"]

DEFAULT_PAGE_SIZE = 24


class ProductFilters(BaseModel):
    """Storefront grid query: text search, price range, category, ordering."""

    q: str | None = Field(None, max_length=200)
    min_price: Decimal | None = Field(None, ge=0)
    max_price: Decimal | None = Field(None, ge=0)
    sort: ProductSort = "featured"
    category_id: uuid.UUID | None = None
    cursor: str | None = None
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=100)

    @model_validator(mode="after")
    def check_price_range(self) -> "ProductFilters":
        if self.q is not None and not self.q.strip():
            self.q = None
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValueError("min_price must not exceed max_price")
        return self

    def query_params(self) -> dict[str, str]:
        """Non-default filters as query-string values."""
        params = self.model_dump(exclude_none=True, exclude_defaults=True, mode="json")
        return {key: str(value) for key, value in params.items()}

    @property
    def is_filtered(self) -> bool:
        return any(
            value is not None
            for value in (self.q, self.min_price, self.max_price, self.category_id)
        )


class PublicProductResponse(BaseModel):
    id: uuid.UUID
    category_id: uuid.UUID | None = None
    title: str
    description: str | None = None
    price_amount: Decimal
    compare_at_amount: Decimal | None = None
    effective_currency: str
    variants: list[str] = Field(default_factory=list)
    is_featured: bool = False
    image_url: str | None = None
    images: list[str] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    @property
    def on_sale(self) -> bool:
        return self.compare_at_amount is not None and self.compare_at_amount > self.price_amount
