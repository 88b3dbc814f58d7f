from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from tenantcms.schemas.common import WebsiteFieldModel


class MediaCreate(WebsiteFieldModel):
    alt: str = Field(..., min_length=1, description="Alternative text")
    filename: str | None = None
    mime_type: str | None = None
    filesize: int | None = Field(None, ge=0)
    width: int | None = Field(None, ge=0)
    height: int | None = Field(None, ge=0)
    url: str | None = None
    website: int | None = Field(None, description="Only honoured for super-admins")


class MediaUpdate(WebsiteFieldModel):
    alt: str | None = Field(None, min_length=1)
    filename: str | None = None
    mime_type: str | None = None
    filesize: int | None = Field(None, ge=0)
    width: int | None = Field(None, ge=0)
    height: int | None = Field(None, ge=0)
    url: str | None = None
    website: int | None = None


class MediaResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    alt: str
    filename: str | None
    mime_type: str | None
    filesize: int | None
    width: int | None
    height: int | None
    url: str | None
    website_id: int | None
    created_at: datetime
    updated_at: datetime
