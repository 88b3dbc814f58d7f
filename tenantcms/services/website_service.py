"""
Website Service

Async CRUD for websites (tenants). Every operation is gated by the access
rules; in practice only super-admins get through. Domain and slug are
checked for uniqueness independently before the database constraint is
hit, so callers get a precise error.
"""

import logging
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tenantcms.access import Collection, Operation, Principal, evaluate
from tenantcms.access.filters import require_access
from tenantcms.exceptions import ConstraintViolation, DuplicateResourceError, ResourceNotFoundError
from tenantcms.models.media import Media
from tenantcms.models.page import Page
from tenantcms.models.user import User
from tenantcms.models.user_websites import user_websites
from tenantcms.models.website import Website, WebsiteStatus
from tenantcms.schemas.website import WebsiteCreate, WebsiteSettings, WebsiteUpdate

logger = logging.getLogger(__name__)

_SETTINGS_COLUMNS = {
    "logo": "settings_logo_id",
    "primary_color": "settings_primary_color",
    "secondary_color": "settings_secondary_color",
    "analytics_id": "settings_analytics_id",
}


def _authorize(current_user: Any, operation: Operation) -> None:
    principal = Principal.from_user(current_user)
    require_access(evaluate(principal, operation, Collection.WEBSITES), Collection.WEBSITES, operation, principal)


async def get_website_by_id(website_id: int, db: AsyncSession) -> Website | None:
    """Return a Website by primary key, or None if not found. No access check."""
    result = await db.execute(select(Website).where(Website.id == website_id))
    return result.scalars().first()


async def get_website_by_slug(slug: str, db: AsyncSession) -> Website | None:
    """Return a Website by slug, or None if not found. No access check."""
    result = await db.execute(select(Website).where(Website.slug == slug))
    return result.scalars().first()


async def get_website_by_domain(domain: str, db: AsyncSession) -> Website | None:
    """Return a Website by routing domain, or None if not found. No access check."""
    result = await db.execute(select(Website).where(Website.domain == domain))
    return result.scalars().first()


async def _ensure_unique(db: AsyncSession, domain: str | None, slug: str | None, exclude_id: int | None = None) -> None:
    for field, value, lookup in (("domain", domain, get_website_by_domain), ("slug", slug, get_website_by_slug)):
        if value is None:
            continue
        existing = await lookup(value, db)
        if existing is not None and existing.id != exclude_id:
            raise DuplicateResourceError("Website", field, value)


def _apply_settings(website: Website, website_settings: WebsiteSettings | dict | None) -> None:
    if website_settings is None:
        return
    if isinstance(website_settings, WebsiteSettings):
        website_settings = website_settings.model_dump(exclude_unset=True)
    for key, column in _SETTINGS_COLUMNS.items():
        if key in website_settings:
            setattr(website, column, website_settings[key])


async def _commit(db: AsyncSession, website: Website) -> None:
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Website write rejected by database constraint: {e.orig}")
        raise ConstraintViolation("Website violates a uniqueness or reference constraint") from e
    await db.refresh(website)


async def create_website(data: WebsiteCreate, db: AsyncSession, current_user: Any) -> Website:
    """Create a new website (super-admin only)."""
    _authorize(current_user, Operation.CREATE)
    await _ensure_unique(db, data.domain, data.slug)

    website = Website(
        name=data.name,
        domain=data.domain,
        slug=data.slug,
        status=WebsiteStatus(data.status).value,
    )
    _apply_settings(website, data.settings)
    db.add(website)
    await _commit(db, website)
    logger.info("Website created: id=%d slug=%s domain=%s", website.id, website.slug, website.domain)
    return website


async def get_website(website_id: int, db: AsyncSession, current_user: Any) -> Website:
    _authorize(current_user, Operation.READ)
    website = await get_website_by_id(website_id, db)
    if website is None:
        raise ResourceNotFoundError("Website", website_id)
    return website


async def list_websites(
    db: AsyncSession,
    current_user: Any,
    skip: int = 0,
    limit: int = 20,
    status: str | None = None,
) -> tuple[list[Website], int]:
    """Return a page of websites and the total count (super-admin only)."""
    _authorize(current_user, Operation.READ)
    query = select(Website)
    if status:
        query = query.where(Website.status == status)

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
    result = await db.execute(query.order_by(Website.id).offset(skip).limit(limit))
    return list(result.scalars().all()), total


async def update_website(website_id: int, data: WebsiteUpdate, db: AsyncSession, current_user: Any) -> Website:
    """
    Apply a partial update to a website.

    Only fields present in ``data`` are changed.
    """
    _authorize(current_user, Operation.UPDATE)
    website = await get_website_by_id(website_id, db)
    if website is None:
        raise ResourceNotFoundError("Website", website_id)

    updates = data.model_dump(exclude_unset=True)
    await _ensure_unique(db, updates.get("domain"), updates.get("slug"), exclude_id=website.id)

    for field in ("name", "domain", "slug"):
        if updates.get(field) is not None:
            setattr(website, field, updates[field])
    if updates.get("status") is not None:
        website.status = WebsiteStatus(updates["status"]).value
    _apply_settings(website, updates.get("settings"))

    await _commit(db, website)
    logger.info("Website updated: id=%d slug=%s", website.id, website.slug)
    return website


async def delete_website(website_id: int, db: AsyncSession, current_user: Any) -> None:
    """
    Delete a website.

    Owned pages and media are kept with their website reference cleared,
    and users lose the membership and, where it pointed here, their default.
    Once the contract migration makes content ownership required, a website
    that still owns content cannot be deleted.
    """
    _authorize(current_user, Operation.DELETE)
    website = await get_website_by_id(website_id, db)
    if website is None:
        raise ResourceNotFoundError("Website", website_id)

    try:
        await db.execute(update(Page).where(Page.website_id == website_id).values(website_id=None))
        await db.execute(update(Media).where(Media.website_id == website_id).values(website_id=None))
        await db.execute(update(User).where(User.default_website_id == website_id).values(default_website_id=None))
        await db.execute(delete(user_websites).where(user_websites.c.website_id == website_id))
        await db.delete(website)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Website delete rejected by database constraint: {e.orig}")
        raise ConstraintViolation("Website still owns content that requires an owner") from e
    logger.info("Website deleted: id=%d slug=%s", website_id, website.slug)
