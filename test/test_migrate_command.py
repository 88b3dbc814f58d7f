"""
Tests for the migrate_tenancy command-line runner.
"""

from unittest.mock import AsyncMock, patch

from tenantcms.commands import migrate_tenancy
from tenantcms.exceptions import MigrationPreconditionError
from tenantcms.services.tenancy_migration_service import BackfillReport, CollectionCounts


def _report() -> BackfillReport:
    return BackfillReport(
        website_id=1,
        website_name="Primary Website",
        website_domain="example.com",
        website_created=True,
        users=CollectionCounts(migrated=3),
        pages=CollectionCounts(migrated=2, skipped=1),
    )


def test_format_report():
    text = migrate_tenancy.format_report(_report())
    assert 'Website: "Primary Website" (1) example.com [created]' in text
    assert "Users: 3 migrated, 0 skipped" in text
    assert "Pages: 2 migrated, 1 skipped" in text
    assert "Media: 0 migrated, 0 skipped" in text


def test_main_success(capsys):
    with patch.object(migrate_tenancy, "migrate", AsyncMock(return_value=_report())):
        assert migrate_tenancy.main() == 0
    assert "Migration Summary:" in capsys.readouterr().out


def test_main_precondition_failure():
    error = MigrationPreconditionError("SECRET_KEY environment variable is not set", missing="SECRET_KEY")
    with patch.object(migrate_tenancy, "migrate", AsyncMock(side_effect=error)):
        assert migrate_tenancy.main() == 1


def test_main_unexpected_failure():
    with patch.object(migrate_tenancy, "migrate", AsyncMock(side_effect=RuntimeError("database went away"))):
        assert migrate_tenancy.main() == 1
