"""Category schemas."""

import uuid

from pydantic import BaseModel


class PublicCategoryResponse(BaseModel):
    id: uuid.UUID
    name: str
    sort_order: int

    model_config = {"from_attributes": True}
