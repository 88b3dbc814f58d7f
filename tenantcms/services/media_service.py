from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from tenantcms.access import Collection
from tenantcms.models.media import Media
from tenantcms.schemas.media import MediaCreate, MediaUpdate
from tenantcms.services.content_service import TenantScopedService

media = TenantScopedService(Media, Collection.MEDIA, "Media")


async def create_media(data: MediaCreate, db: AsyncSession, current_user: Any) -> Media:
    return await media.create(data.model_dump(), db, current_user)


async def update_media(media_id: int, data: MediaUpdate, db: AsyncSession, current_user: Any) -> Media:
    values = data.model_dump(exclude_unset=True)
    if values.get("alt", "") is None:
        del values["alt"]
    return await media.update(media_id, values, db, current_user)


async def get_media(media_id: int, db: AsyncSession, current_user: Any) -> Media:
    return await media.get(media_id, db, current_user)


async def list_media(db: AsyncSession, current_user: Any, skip: int = 0, limit: int = 20) -> tuple[list[Media], int]:
    return await media.find(db, current_user, skip=skip, limit=limit)


async def delete_media(media_id: int, db: AsyncSession, current_user: Any) -> None:
    await media.delete(media_id, db, current_user)
