from typing import Any, Generic, TypeVar

from pydantic import BaseModel, field_validator

from tenantcms.access.references import to_website_id

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    items: list[T]
    total: int
    skip: int
    limit: int


class WebsiteFieldModel(BaseModel):
    """Accepts a ``website`` reference as a bare id or a populated object."""

    @field_validator("website", mode="before", check_fields=False)
    @classmethod
    def normalize_website(cls, v: Any) -> Any:
        return to_website_id(v)
