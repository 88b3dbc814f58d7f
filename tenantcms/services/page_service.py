"""
Page Service

Pages are tenant-scoped content with a block-based layout. Each update
records a snapshot of the page as it was, so earlier versions can be
listed.
"""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tenantcms.access import Collection, Principal
from tenantcms.models.page import Page, PageStatus, PageVersion
from tenantcms.schemas.blocks import dump_layout
from tenantcms.schemas.page import PageCreate, PageUpdate
from tenantcms.services.content_service import TenantScopedService
from tenantcms.utils.slugify import slugify

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("title", "slug", "layout", "status")


class PageService(TenantScopedService):
    def __init__(self):
        super().__init__(Page, Collection.PAGES, "Page")

    async def before_update(self, record: Page, db: AsyncSession, principal: Principal | None) -> None:
        latest = (
            await db.execute(select(func.max(PageVersion.version)).where(PageVersion.page_id == record.id))
        ).scalar()
        db.add(
            PageVersion(
                page_id=record.id,
                version=(latest or 0) + 1,
                title=record.title,
                slug=record.slug,
                website_id=record.website_id,
                layout=list(record.layout or []),
                meta_description=record.meta_description,
                status=record.status,
                author_id=principal.id if principal else None,
            )
        )


pages = PageService()


def _page_values(data: PageCreate | PageUpdate, partial: bool) -> dict[str, Any]:
    values = data.model_dump(exclude_unset=partial, exclude={"layout"})
    if "layout" in data.model_fields_set or not partial:
        values["layout"] = dump_layout(data.layout)
    if values.get("status") is not None:
        values["status"] = PageStatus(values["status"]).value
    if partial:
        # required columns cannot be cleared
        values = {k: v for k, v in values.items() if not (k in _REQUIRED_FIELDS and v is None)}
    return values


async def create_page(data: PageCreate, db: AsyncSession, current_user: Any) -> Page:
    values = _page_values(data, partial=False)
    values["slug"] = values.get("slug") or slugify(data.title)
    return await pages.create(values, db, current_user)


async def update_page(page_id: int, data: PageUpdate, db: AsyncSession, current_user: Any) -> Page:
    return await pages.update(page_id, _page_values(data, partial=True), db, current_user)


async def get_page(page_id: int, db: AsyncSession, current_user: Any) -> Page:
    return await pages.get(page_id, db, current_user)


async def list_pages(
    db: AsyncSession,
    current_user: Any,
    skip: int = 0,
    limit: int = 20,
    website_id: int | None = None,
    status: str | None = None,
) -> tuple[list[Page], int]:
    return await pages.find(db, current_user, skip=skip, limit=limit, filters={"website_id": website_id, "status": status})


async def delete_page(page_id: int, db: AsyncSession, current_user: Any) -> None:
    await pages.delete(page_id, db, current_user)


async def get_versions(page_id: int, db: AsyncSession, current_user: Any) -> list[PageVersion]:
    """List the stored versions of a readable page, newest first."""
    await pages.get(page_id, db, current_user)
    result = await db.execute(
        select(PageVersion).where(PageVersion.page_id == page_id).order_by(PageVersion.version.desc())
    )
    return list(result.scalars().all())
