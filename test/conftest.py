"""
Pytest configuration and fixtures for tenant CMS tests.

Every test gets its own in-memory SQLite database (aiosqlite with a
StaticPool so all sessions share one connection).
"""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import tenantcms.models  # noqa: F401
from tenantcms.config import settings
from tenantcms.database import Base
from tenantcms.models.media import Media
from tenantcms.models.page import Page
from tenantcms.models.user import User
from tenantcms.models.website import Website

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_SECRET_KEY = "test-secret-key"

# Stored hashes are never verified in these tests
FAKE_PASSWORD_HASH = "$2b$12$notarealhashnotarealhashnotarealhashnotarealhashnot"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)


@pytest.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def secret_key(monkeypatch):
    """Configure a token signing secret for the duration of a test."""
    monkeypatch.setattr(settings, "secret_key", TEST_SECRET_KEY)
    return TEST_SECRET_KEY


@pytest.fixture
def strict_tenancy(monkeypatch):
    """Contract phase: no transitional access for unmigrated users."""
    monkeypatch.setattr(settings, "tenancy_expand_mode", False)


@pytest.fixture
def make_website(test_db: AsyncSession):
    async def _make(slug: str, domain: str | None = None, name: str | None = None) -> Website:
        website = Website(name=name or slug.title(), domain=domain or f"{slug}.test", slug=slug)
        test_db.add(website)
        await test_db.commit()
        await test_db.refresh(website)
        return website

    return _make


@pytest.fixture
def make_user(test_db: AsyncSession):
    counter = {"n": 0}

    async def _make(
        email: str | None = None,
        role: str | None = None,
        websites: list[Website] | None = None,
        default_website: Website | None = None,
        created_at: datetime | None = None,
    ) -> User:
        counter["n"] += 1
        websites = websites or []
        if default_website is None and websites:
            default_website = websites[0]
        user = User(
            email=email or f"user{counter['n']}@example.com",
            hashed_password=FAKE_PASSWORD_HASH,
            role=role,
            websites=websites,
            default_website_id=default_website.id if default_website else None,
            created_at=created_at or datetime(2024, 1, 1) + timedelta(minutes=counter["n"]),
        )
        test_db.add(user)
        await test_db.commit()
        await test_db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_page(test_db: AsyncSession):
    async def _make(title: str = "Home", website: Website | None = None, slug: str | None = None) -> Page:
        page = Page(title=title, slug=slug or title.lower(), website_id=website.id if website else None, layout=[])
        test_db.add(page)
        await test_db.commit()
        await test_db.refresh(page)
        return page

    return _make


@pytest.fixture
def make_media(test_db: AsyncSession):
    async def _make(alt: str = "Logo", website: Website | None = None) -> Media:
        media = Media(alt=alt, filename=f"{alt.lower()}.png", website_id=website.id if website else None)
        test_db.add(media)
        await test_db.commit()
        await test_db.refresh(media)
        return media

    return _make


@pytest.fixture
async def acme(make_website) -> Website:
    return await make_website("acme", domain="acme.com", name="Acme")


@pytest.fixture
async def globex(make_website) -> Website:
    return await make_website("globex", domain="globex.com", name="Globex")


@pytest.fixture
async def super_admin(make_user) -> User:
    return await make_user(email="root@example.com", role="super-admin")


@pytest.fixture
async def acme_admin(make_user, acme) -> User:
    return await make_user(email="admin@acme.com", role="website-admin", websites=[acme])


@pytest.fixture
async def acme_editor(make_user, acme) -> User:
    return await make_user(email="editor@acme.com", role="editor", websites=[acme])


@pytest.fixture
async def acme_viewer(make_user, acme) -> User:
    return await make_user(email="viewer@acme.com", role="viewer", websites=[acme])


@pytest.fixture
async def globex_admin(make_user, globex) -> User:
    return await make_user(email="admin@globex.com", role="website-admin", websites=[globex])
