from datetime import datetime
from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator

from tenantcms.access.references import extract_website_ids, to_website_id
from tenantcms.constants.roles import DEFAULT_ROLE, RoleName
from tenantcms.models.user import User


class _WebsiteMembershipFields(BaseModel):
    """Accepts website references as bare ids or populated objects."""

    @field_validator("websites", mode="before", check_fields=False)
    @classmethod
    def normalize_websites(cls, v: Any) -> Any:
        if v is None:
            return v
        return extract_website_ids(v)

    @field_validator("default_website", mode="before", check_fields=False)
    @classmethod
    def normalize_default_website(cls, v: Any) -> Any:
        return to_website_id(v)


class UserCreate(_WebsiteMembershipFields):
    email: EmailStr = Field(..., description="A valid email address.")
    password: str = Field(..., min_length=8, max_length=128, description="Password must be between 8 and 128 characters.")
    role: RoleName = DEFAULT_ROLE
    websites: list[int] = Field(default_factory=list, description="Websites this user can access")
    default_website: int | None = Field(None, description="Website used when this user creates content")


class UserUpdate(_WebsiteMembershipFields):
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=8, max_length=128)
    role: RoleName | None = None
    websites: list[int] | None = None
    default_website: int | None = None


class UserResponse(BaseModel):
    id: int
    email: str
    role: str | None
    websites: list[int]
    default_website: int | None
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            role=user.role,
            websites=extract_website_ids(user.websites),
            default_website=user.default_website_id,
            created_at=user.created_at,
        )
