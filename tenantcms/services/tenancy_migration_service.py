"""
Tenancy Migration Service: the migrate phase of the tenancy rollout.

The rollout runs in three phases:

1. expand: the schema gains optional ``role``, website membership and
   ``website_id`` columns; the access rules keep unmigrated callers
   working (``TENANCY_EXPAND_MODE=true``).
2. migrate: ``run_backfill`` assigns every existing user and content
   record to a website.
3. contract: the columns become required and expand mode is switched
   off. ``get_migration_status`` reports whether that is safe yet.

The backfill is a single sequential administrative batch. It is safe to
re-run: records that already satisfy the tenancy invariants are skipped, so
a second run creates no website and performs no writes. It is not meant to
run as several concurrent instances.
"""

import logging
from dataclasses import asdict, dataclass, field

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from tenantcms.config import Settings, settings as default_settings
from tenantcms.constants.roles import RoleName
from tenantcms.exceptions import MigrationPreconditionError
from tenantcms.models.media import Media
from tenantcms.models.page import Page
from tenantcms.models.user import User
from tenantcms.models.user_websites import user_websites
from tenantcms.models.website import Website, WebsiteStatus

logger = logging.getLogger(__name__)

FALLBACK_DOMAIN = "example.com"
PRIMARY_WEBSITE_NAME = "Primary Website"
PRIMARY_WEBSITE_SLUG = "primary"


@dataclass
class CollectionCounts:
    migrated: int = 0
    skipped: int = 0


@dataclass
class BackfillReport:
    website_id: int
    website_name: str
    website_domain: str
    website_created: bool
    users: CollectionCounts = field(default_factory=CollectionCounts)
    pages: CollectionCounts = field(default_factory=CollectionCounts)
    media: CollectionCounts = field(default_factory=CollectionCounts)

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class MigrationStatus:
    websites: int
    users_unmigrated: int
    pages_unmigrated: int
    media_unmigrated: int
    expand_mode: bool

    @property
    def ready_to_contract(self) -> bool:
        return (
            self.websites > 0
            and self.users_unmigrated == 0
            and self.pages_unmigrated == 0
            and self.media_unmigrated == 0
        )


def check_preconditions(config: Settings) -> None:
    """Fail before any write when required configuration is missing."""
    if not config.secret_key:
        logger.error("SECRET_KEY environment variable is not set; aborting tenancy migration")
        raise MigrationPreconditionError(
            "SECRET_KEY environment variable is not set", missing="SECRET_KEY"
        )


def is_user_migrated(user: User) -> bool:
    return bool(user.websites) and user.default_website_id is not None and bool(user.role)


async def _locate_or_create_website(db: AsyncSession, config: Settings) -> tuple[Website, bool]:
    result = await db.execute(select(Website).order_by(Website.id).limit(1))
    website = result.scalars().first()
    if website is not None:
        logger.info('Found existing website: "%s" (%s)', website.name, website.id)
        return website, False

    website = Website(
        name=PRIMARY_WEBSITE_NAME,
        domain=config.primary_domain or FALLBACK_DOMAIN,
        slug=PRIMARY_WEBSITE_SLUG,
        status=WebsiteStatus.active.value,
    )
    db.add(website)
    await db.commit()
    await db.refresh(website)
    logger.info('Created default website: "%s" (%s) domain=%s', website.name, website.id, website.domain)
    return website, True


async def _backfill_users(db: AsyncSession, website: Website, counts: CollectionCounts) -> None:
    # Creation order decides who becomes the super-admin; id breaks ties
    result = await db.execute(select(User).order_by(User.created_at, User.id))
    for user in result.scalars().all():
        if is_user_migrated(user):
            logger.info("Skipping user %s (already migrated)", user.email)
            counts.skipped += 1
            continue

        role = RoleName.SUPER_ADMIN if counts.migrated == 0 else RoleName.WEBSITE_ADMIN
        user.websites = [website]
        user.default_website_id = website.id
        user.role = role.value
        await db.commit()
        logger.info("Updated user %s (role: %s)", user.email, role.value)
        counts.migrated += 1


async def _backfill_content(db: AsyncSession, model, label: str, website: Website, counts: CollectionCounts) -> None:
    result = await db.execute(select(model).order_by(model.id))
    for record in result.scalars().all():
        if record.website_id is not None:
            logger.info("Skipping %s %s (already migrated)", label, record.id)
            counts.skipped += 1
            continue

        record.website_id = website.id
        await db.commit()
        logger.info("Assigned %s %s to website %s", label, record.id, website.id)
        counts.migrated += 1


async def run_backfill(db: AsyncSession, config: Settings | None = None) -> BackfillReport:
    """
    Assign every existing user and content record to a website.

    Locates the first website or creates exactly one, then migrates users
    (the first unmigrated user in creation order becomes super-admin, the
    rest website-admins) and finally pages and media without an owner.

    Raises:
        MigrationPreconditionError: If the signing secret is not configured.
    """
    config = config or default_settings
    check_preconditions(config)
    logger.info("Starting multi-tenant data migration")

    try:
        website, created = await _locate_or_create_website(db, config)
        report = BackfillReport(
            website_id=website.id,
            website_name=website.name,
            website_domain=website.domain,
            website_created=created,
        )
        await _backfill_users(db, website, report.users)
        await _backfill_content(db, Page, "page", website, report.pages)
        await _backfill_content(db, Media, "media", website, report.media)
    except Exception:
        await db.rollback()
        logger.exception("Tenancy migration aborted; re-run once the cause is fixed")
        raise

    logger.info(
        "Migration completed: website=%s users=%d pages=%d media=%d",
        report.website_id,
        report.users.migrated,
        report.pages.migrated,
        report.media.migrated,
    )
    return report


async def get_migration_status(db: AsyncSession, config: Settings | None = None) -> MigrationStatus:
    """Count records that still block the contract phase."""
    config = config or default_settings

    has_membership = select(user_websites.c.user_id).where(user_websites.c.user_id == User.id).exists()
    unmigrated_users = select(func.count()).select_from(User).where(
        or_(User.role.is_(None), User.role == "", User.default_website_id.is_(None), ~has_membership)
    )

    return MigrationStatus(
        websites=(await db.execute(select(func.count()).select_from(Website))).scalar_one(),
        users_unmigrated=(await db.execute(unmigrated_users)).scalar_one(),
        pages_unmigrated=(
            await db.execute(select(func.count()).select_from(Page).where(Page.website_id.is_(None)))
        ).scalar_one(),
        media_unmigrated=(
            await db.execute(select(func.count()).select_from(Media).where(Media.website_id.is_(None)))
        ).scalar_one(),
        expand_mode=config.tenancy_expand_mode,
    )
