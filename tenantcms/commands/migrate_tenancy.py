"""
Run the tenancy backfill.

Usage:
    python -m tenantcms.commands.migrate_tenancy

Exits 0 once every user, page and media record belongs to a website and
1 on any failure. Safe to run again after a partial or complete run.
"""

import asyncio
import logging
import sys

from tenantcms.config import settings
from tenantcms.database import AsyncSessionLocal, engine
from tenantcms.exceptions import MigrationPreconditionError
from tenantcms.middleware.logging import setup_structured_logging
from tenantcms.services.tenancy_migration_service import BackfillReport, run_backfill

logger = logging.getLogger(__name__)


def format_report(report: BackfillReport) -> str:
    lines = [
        "Migration Summary:",
        f'  Website: "{report.website_name}" ({report.website_id}) {report.website_domain}'
        + (" [created]" if report.website_created else ""),
    ]
    for label, counts in (("Users", report.users), ("Pages", report.pages), ("Media", report.media)):
        lines.append(f"  {label}: {counts.migrated} migrated, {counts.skipped} skipped")
    return "\n".join(lines)


async def migrate() -> BackfillReport:
    try:
        async with AsyncSessionLocal() as session:
            return await run_backfill(session, settings)
    finally:
        await engine.dispose()


def main() -> int:
    setup_structured_logging(settings.log_level, settings.log_json)
    try:
        report = asyncio.run(migrate())
    except MigrationPreconditionError as e:
        logger.error(f"Migration precondition failed: {e.message}")
        return 1
    except Exception:
        logger.exception("Migration failed")
        return 1

    print(format_report(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())
