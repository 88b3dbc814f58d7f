"""
Tests for the tenancy backfill and the migration status report.
"""

import importlib.util
import logging
from pathlib import Path

import pytest
from sqlalchemy import func, select

from tenantcms.config import Settings
from tenantcms.exceptions import MigrationPreconditionError
from tenantcms.models.website import Website
from tenantcms.services.tenancy_migration_service import get_migration_status, run_backfill
from tenantcms.services.user_service import get_user_by_id

CONTRACT_REVISION = Path(__file__).resolve().parent.parent / "alembic" / "versions" / "c3d4e5f6a7b8_tenancy_contract.py"


def _config(**overrides) -> Settings:
    values = {"secret_key": "backfill-secret", "primary_domain": None}
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
async def legacy_data(make_user, make_page, make_media):
    """A single-tenant install: three users, two pages, one media item, no websites."""
    users = [
        await make_user(email="first@example.com"),
        await make_user(email="second@example.com"),
        await make_user(email="third@example.com"),
    ]
    pages = [await make_page("Home"), await make_page("About")]
    media = [await make_media("Logo")]
    return users, pages, media


async def _website_count(db) -> int:
    return (await db.execute(select(func.count()).select_from(Website))).scalar_one()


class TestRunBackfill:
    async def test_three_user_scenario(self, test_db, legacy_data):
        users, pages, media = legacy_data

        report = await run_backfill(test_db, _config(primary_domain="acme.com"))

        assert report.website_created is True
        assert report.website_name == "Primary Website"
        assert report.website_domain == "acme.com"
        assert await _website_count(test_db) == 1

        first, second, third = [await get_user_by_id(u.id, test_db) for u in users]
        assert first.role == "super-admin"
        assert second.role == "website-admin"
        assert third.role == "website-admin"
        for user in (first, second, third):
            assert [w.id for w in user.websites] == [report.website_id]
            assert user.default_website_id == report.website_id

        for record in pages + media:
            await test_db.refresh(record)
            assert record.website_id == report.website_id

        assert (report.users.migrated, report.users.skipped) == (3, 0)
        assert (report.pages.migrated, report.pages.skipped) == (2, 0)
        assert (report.media.migrated, report.media.skipped) == (1, 0)

    async def test_second_run_changes_nothing(self, test_db, legacy_data):
        first_report = await run_backfill(test_db, _config())
        second_report = await run_backfill(test_db, _config())

        assert second_report.website_created is False
        assert second_report.website_id == first_report.website_id
        assert await _website_count(test_db) == 1
        assert (second_report.users.migrated, second_report.users.skipped) == (0, 3)
        assert (second_report.pages.migrated, second_report.pages.skipped) == (0, 2)
        assert (second_report.media.migrated, second_report.media.skipped) == (0, 1)

    async def test_fallback_domain(self, test_db, legacy_data):
        report = await run_backfill(test_db, _config(primary_domain=None))
        assert report.website_domain == "example.com"

    async def test_existing_website_reused(self, test_db, make_website, make_user):
        existing = await make_website("legacy", domain="legacy.com")
        user = await make_user(email="only@example.com")

        report = await run_backfill(test_db, _config())

        assert report.website_created is False
        assert report.website_id == existing.id
        user = await get_user_by_id(user.id, test_db)
        assert user.role == "super-admin"
        assert user.default_website_id == existing.id

    async def test_migrated_users_keep_their_role(self, test_db, acme, make_user):
        admin = await make_user(email="admin@acme.com", role="editor", websites=[acme])
        newcomer = await make_user(email="new@acme.com")

        report = await run_backfill(test_db, _config())

        assert (report.users.migrated, report.users.skipped) == (1, 1)
        assert (await get_user_by_id(admin.id, test_db)).role == "editor"
        # First unmigrated user in creation order, even though another user exists
        assert (await get_user_by_id(newcomer.id, test_db)).role == "super-admin"

    async def test_creation_order_decides_super_admin(self, test_db, make_user):
        from datetime import datetime

        late = await make_user(email="late@example.com", created_at=datetime(2024, 6, 1))
        early = await make_user(email="early@example.com", created_at=datetime(2023, 1, 1))

        await run_backfill(test_db, _config())

        assert (await get_user_by_id(early.id, test_db)).role == "super-admin"
        assert (await get_user_by_id(late.id, test_db)).role == "website-admin"

    async def test_missing_secret_aborts_before_writes(self, test_db, legacy_data):
        with pytest.raises(MigrationPreconditionError) as exc_info:
            await run_backfill(test_db, _config(secret_key=None))

        assert exc_info.value.details == {"missing": "SECRET_KEY"}
        assert await _website_count(test_db) == 0

    async def test_logs_each_record(self, test_db, legacy_data, caplog):
        with caplog.at_level(logging.INFO, logger="tenantcms.services.tenancy_migration_service"):
            await run_backfill(test_db, _config())

        messages = [record.getMessage() for record in caplog.records]
        assert any("first@example.com" in m and "super-admin" in m for m in messages)
        assert sum("Assigned page" in m for m in messages) == 2


class TestMigrationStatus:
    async def test_status_before_and_after_backfill(self, test_db, legacy_data):
        status = await get_migration_status(test_db, _config(tenancy_expand_mode=True))
        assert status.websites == 0
        assert status.users_unmigrated == 3
        assert status.pages_unmigrated == 2
        assert status.media_unmigrated == 1
        assert status.ready_to_contract is False

        await run_backfill(test_db, _config())

        status = await get_migration_status(test_db, _config())
        assert status.websites == 1
        assert status.users_unmigrated == 0
        assert status.pages_unmigrated == 0
        assert status.media_unmigrated == 0
        assert status.ready_to_contract is True


@pytest.fixture(scope="module")
def contract_revision():
    module_spec = importlib.util.spec_from_file_location("tenancy_contract_revision", CONTRACT_REVISION)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


class TestContractPrecondition:
    async def test_rejects_user_with_role_but_no_membership(self, test_engine, contract_revision, make_user):
        await make_user(email="orphan@example.com", role="editor")

        async with test_engine.connect() as conn:
            with pytest.raises(RuntimeError, match="1 unmigrated users"):
                await conn.run_sync(contract_revision._check_backfilled)

    async def test_rejects_member_without_default_website(self, test_db, test_engine, contract_revision, acme, make_user):
        user = await make_user(email="member@example.com", role="editor", websites=[acme])
        user.default_website_id = None
        await test_db.commit()

        async with test_engine.connect() as conn:
            with pytest.raises(RuntimeError, match="unmigrated users"):
                await conn.run_sync(contract_revision._check_backfilled)

    async def test_passes_after_backfill(self, test_db, test_engine, contract_revision, legacy_data):
        async with test_engine.connect() as conn:
            with pytest.raises(RuntimeError, match="3 unmigrated users, 2 pages without a website"):
                await conn.run_sync(contract_revision._check_backfilled)

        await run_backfill(test_db, _config())

        async with test_engine.connect() as conn:
            await conn.run_sync(contract_revision._check_backfilled)
