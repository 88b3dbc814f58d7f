"""tenancy_contract

Revision ID: c3d4e5f6a7b8
Revises: b2c3d4e5f6a7
Create Date: 2026-10-01 00:00:00.000000

Multi-tenancy, contract phase: `users.role`, `pages.website_id` and
`media.website_id` become NOT NULL.

Run only after the backfill has completed and set TENANCY_EXPAND_MODE=false
once it is applied. The upgrade refuses to start while any user lacks a
role, a default website or a membership, or any page or media record lacks
a website.
"""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic
revision: str = "c3d4e5f6a7b8"
down_revision: str | None = "b2c3d4e5f6a7"
branch_labels: str | None = None
depends_on: str | None = None

_PRECONDITIONS = {
    "unmigrated users": (
        "SELECT COUNT(*) FROM users WHERE role IS NULL OR role = '' OR default_website_id IS NULL"
        " OR NOT EXISTS (SELECT 1 FROM user_websites WHERE user_websites.user_id = users.id)"
    ),
    "pages without a website": "SELECT COUNT(*) FROM pages WHERE website_id IS NULL",
    "media without a website": "SELECT COUNT(*) FROM media WHERE website_id IS NULL",
}


def _check_backfilled(connection: sa.engine.Connection) -> None:
    pending = {label: connection.execute(sa.text(query)).scalar() for label, query in _PRECONDITIONS.items()}
    pending = {label: count for label, count in pending.items() if count}
    if pending:
        summary = ", ".join(f"{count} {label}" for label, count in pending.items())
        raise RuntimeError(
            f"Tenancy backfill incomplete ({summary}); run `python -m tenantcms.commands.migrate_tenancy` first"
        )


def upgrade() -> None:
    _check_backfilled(op.get_bind())

    with op.batch_alter_table("users") as batch_op:
        batch_op.alter_column("role", existing_type=sa.String(20), nullable=False)
    for table in ("pages", "media"):
        with op.batch_alter_table(table) as batch_op:
            batch_op.alter_column("website_id", existing_type=sa.Integer(), nullable=False)


def downgrade() -> None:
    for table in ("media", "pages"):
        with op.batch_alter_table(table) as batch_op:
            batch_op.alter_column("website_id", existing_type=sa.Integer(), nullable=True)
    with op.batch_alter_table("users") as batch_op:
        batch_op.alter_column("role", existing_type=sa.String(20), nullable=True)
