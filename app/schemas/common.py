from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys, as the dashboard frontend expects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PaginatedResponse(CamelModel, Generic[T]):
    data: list[T]
    current_page: int
    items_per_page: int
    total_items: int
    total_pages: int


class MessageResponse(BaseModel):
    message: str
