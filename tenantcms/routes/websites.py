"""
Website Routes

GET    /api/v1/websites        → list websites
POST   /api/v1/websites        → create website
GET    /api/v1/websites/{id}   → get website
PATCH  /api/v1/websites/{id}   → update website
DELETE /api/v1/websites/{id}   → delete website

Super-admin only; the access rules deny everyone else.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tenantcms.auth import get_current_user
from tenantcms.database import get_db
from tenantcms.models.user import User
from tenantcms.models.website import WebsiteStatus
from tenantcms.schemas.common import PaginatedResponse
from tenantcms.schemas.website import WebsiteCreate, WebsiteResponse, WebsiteUpdate
from tenantcms.services import website_service

router = APIRouter(prefix="/websites", tags=["Websites"])


@router.get("", response_model=PaginatedResponse[WebsiteResponse])
async def list_websites(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    website_status: WebsiteStatus | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    websites, total = await website_service.list_websites(
        db, current_user, skip=skip, limit=limit, status=website_status.value if website_status else None
    )
    return PaginatedResponse[WebsiteResponse](
        items=[WebsiteResponse.from_website(w) for w in websites], total=total, skip=skip, limit=limit
    )


@router.post("", response_model=WebsiteResponse, status_code=status.HTTP_201_CREATED)
async def create_website(
    data: WebsiteCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    website = await website_service.create_website(data, db, current_user)
    return WebsiteResponse.from_website(website)


@router.get("/{website_id}", response_model=WebsiteResponse)
async def get_website(
    website_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    return WebsiteResponse.from_website(await website_service.get_website(website_id, db, current_user))


@router.patch("/{website_id}", response_model=WebsiteResponse)
async def update_website(
    website_id: int,
    data: WebsiteUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    website = await website_service.update_website(website_id, data, db, current_user)
    return WebsiteResponse.from_website(website)


@router.delete("/{website_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_website(
    website_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    await website_service.delete_website(website_id, db, current_user)
