from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tenantcms.auth import get_current_user
from tenantcms.database import get_db
from tenantcms.models.user import User
from tenantcms.schemas.common import PaginatedResponse
from tenantcms.schemas.media import MediaCreate, MediaResponse, MediaUpdate
from tenantcms.services import media_service

router = APIRouter(prefix="/media", tags=["Media"])


@router.get("", response_model=PaginatedResponse[MediaResponse])
async def list_media(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    items, total = await media_service.list_media(db, current_user, skip=skip, limit=limit)
    return PaginatedResponse[MediaResponse](
        items=[MediaResponse.model_validate(m) for m in items], total=total, skip=skip, limit=limit
    )


@router.post("", response_model=MediaResponse, status_code=status.HTTP_201_CREATED)
async def create_media(
    data: MediaCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    return await media_service.create_media(data, db, current_user)


@router.get("/{media_id}", response_model=MediaResponse)
async def get_media(
    media_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    return await media_service.get_media(media_id, db, current_user)


@router.patch("/{media_id}", response_model=MediaResponse)
async def update_media(
    media_id: int,
    data: MediaUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    return await media_service.update_media(media_id, data, db, current_user)


@router.delete("/{media_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_media(
    media_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    await media_service.delete_media(media_id, db, current_user)
