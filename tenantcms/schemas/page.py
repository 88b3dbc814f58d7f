from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from tenantcms.models.page import PageStatus
from tenantcms.schemas.blocks import LayoutBlock
from tenantcms.schemas.common import WebsiteFieldModel


class PageCreate(WebsiteFieldModel):
    title: str = Field(..., min_length=1, max_length=300)
    slug: str | None = Field(None, max_length=300, description="Generated from the title when omitted")
    website: int | None = Field(None, description="Only honoured for super-admins")
    layout: list[LayoutBlock] = Field(default_factory=list)
    meta_description: str | None = None
    published_date: datetime | None = None
    status: PageStatus = PageStatus.DRAFT


class PageUpdate(WebsiteFieldModel):
    title: str | None = Field(None, min_length=1, max_length=300)
    slug: str | None = Field(None, max_length=300)
    website: int | None = None
    layout: list[LayoutBlock] | None = None
    meta_description: str | None = None
    published_date: datetime | None = None
    status: PageStatus | None = None


class PageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    slug: str
    website_id: int | None
    layout: list[dict[str, Any]]
    meta_description: str | None
    published_date: datetime | None
    status: str
    created_at: datetime
    updated_at: datetime


class PageVersionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    page_id: int
    version: int
    title: str
    slug: str
    website_id: int | None
    layout: list[dict[str, Any]]
    status: str
    author_id: int | None
    created_at: datetime
