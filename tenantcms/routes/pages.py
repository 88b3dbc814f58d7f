"""
Page Routes

Reads are limited to the caller's websites. On create the owning website is
filled in from the caller's default; only super-admins can choose or change
it explicitly.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tenantcms.auth import get_current_user
from tenantcms.database import get_db
from tenantcms.models.page import PageStatus
from tenantcms.models.user import User
from tenantcms.schemas.common import PaginatedResponse
from tenantcms.schemas.page import PageCreate, PageResponse, PageUpdate, PageVersionResponse
from tenantcms.services import page_service

router = APIRouter(prefix="/pages", tags=["Pages"])


@router.get("", response_model=PaginatedResponse[PageResponse])
async def list_pages(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    website_id: int | None = Query(None),
    page_status: PageStatus | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    items, total = await page_service.list_pages(
        db,
        current_user,
        skip=skip,
        limit=limit,
        website_id=website_id,
        status=page_status.value if page_status else None,
    )
    return PaginatedResponse[PageResponse](
        items=[PageResponse.model_validate(p) for p in items], total=total, skip=skip, limit=limit
    )


@router.post("", response_model=PageResponse, status_code=status.HTTP_201_CREATED)
async def create_page(
    data: PageCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    return await page_service.create_page(data, db, current_user)


@router.get("/{page_id}", response_model=PageResponse)
async def get_page(
    page_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    return await page_service.get_page(page_id, db, current_user)


@router.get("/{page_id}/versions", response_model=list[PageVersionResponse])
async def list_page_versions(
    page_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    return await page_service.get_versions(page_id, db, current_user)


@router.patch("/{page_id}", response_model=PageResponse)
async def update_page(
    page_id: int,
    data: PageUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    return await page_service.update_page(page_id, data, db, current_user)


@router.delete("/{page_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_page(
    page_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    await page_service.delete_page(page_id, db, current_user)
