from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tenantcms.models.website import Website, WebsiteStatus

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}){1,2}$"


class WebsiteSettings(BaseModel):
    logo: int | None = Field(None, description="Media id of the website logo")
    primary_color: str | None = Field(None, pattern=COLOR_PATTERN)
    secondary_color: str | None = Field(None, pattern=COLOR_PATTERN)
    analytics_id: str | None = Field(None, max_length=100)


class WebsiteCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    domain: str = Field(..., min_length=1, max_length=253, description='Primary domain for routing, e.g. "acme.com"')
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN)
    status: WebsiteStatus = WebsiteStatus.active
    settings: WebsiteSettings | None = None

    @field_validator("domain")
    @classmethod
    def normalize_domain(cls, v: str) -> str:
        return v.strip().lower()


class WebsiteUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    domain: str | None = Field(None, min_length=1, max_length=253)
    slug: str | None = Field(None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    status: WebsiteStatus | None = None
    settings: WebsiteSettings | None = None

    @field_validator("domain")
    @classmethod
    def normalize_domain(cls, v: str | None) -> str | None:
        return v.strip().lower() if v is not None else v


class WebsiteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    domain: str
    slug: str
    status: str
    settings: WebsiteSettings
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_website(cls, website: Website) -> "WebsiteResponse":
        return cls(
            id=website.id,
            name=website.name,
            domain=website.domain,
            slug=website.slug,
            status=website.status,
            settings=WebsiteSettings(
                logo=website.settings_logo_id,
                primary_color=website.settings_primary_color,
                secondary_color=website.settings_secondary_color,
                analytics_id=website.settings_analytics_id,
            ),
            created_at=website.created_at,
            updated_at=website.updated_at,
        )
