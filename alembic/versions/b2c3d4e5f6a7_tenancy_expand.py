"""tenancy_expand

Revision ID: b2c3d4e5f6a7
Revises: a1b2c3d4e5f6
Create Date: 2026-09-15 00:00:00.000000

Multi-tenancy, expand phase:
  - Creates the `websites` table and the `user_websites` membership table.
  - Adds nullable `role` and `default_website_id` to `users`.
  - Adds nullable `website_id` to `pages`, `page_versions` and `media`.

Every new column is nullable so existing rows stay valid until the backfill
(`python -m tenantcms.commands.migrate_tenancy`) has run.
"""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic
revision: str = "b2c3d4e5f6a7"
down_revision: str | None = "a1b2c3d4e5f6"
branch_labels: str | None = None
depends_on: str | None = None


def upgrade() -> None:
    # 1. Websites (tenants)
    op.create_table(
        "websites",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("domain", sa.String(253), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("settings_logo_id", sa.Integer(), nullable=True),
        sa.Column("settings_primary_color", sa.String(20), nullable=True),
        sa.Column("settings_secondary_color", sa.String(20), nullable=True),
        sa.Column("settings_analytics_id", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["settings_logo_id"], ["media.id"], name="fk_websites_settings_logo_id", ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_websites_id"), "websites", ["id"], unique=False)
    op.create_index(op.f("ix_websites_domain"), "websites", ["domain"], unique=True)
    op.create_index(op.f("ix_websites_slug"), "websites", ["slug"], unique=True)
    op.create_index("idx_website_status", "websites", ["status"], unique=False)

    # 2. Memberships
    op.create_table(
        "user_websites",
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("website_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["website_id"], ["websites.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id", "website_id"),
    )
    op.create_index(op.f("ix_user_websites_website_id"), "user_websites", ["website_id"], unique=False)

    # 3. Roles and default website on users (nullable until backfilled)
    with op.batch_alter_table("users") as batch_op:
        batch_op.add_column(sa.Column("role", sa.String(20), nullable=True))
        batch_op.add_column(sa.Column("default_website_id", sa.Integer(), nullable=True))
        batch_op.create_foreign_key(
            "fk_users_default_website_id", "websites", ["default_website_id"], ["id"], ondelete="SET NULL"
        )
        batch_op.create_index("idx_user_role", ["role"], unique=False)

    # 4. Content ownership (nullable until backfilled)
    for table in ("pages", "media"):
        with op.batch_alter_table(table) as batch_op:
            batch_op.add_column(sa.Column("website_id", sa.Integer(), nullable=True))
            batch_op.create_foreign_key(
                f"fk_{table}_website_id", "websites", ["website_id"], ["id"], ondelete="SET NULL"
            )
            batch_op.create_index(f"ix_{table}_website_id", ["website_id"], unique=False)

    op.add_column("page_versions", sa.Column("website_id", sa.Integer(), nullable=True))


def downgrade() -> None:
    op.drop_column("page_versions", "website_id")

    for table in ("media", "pages"):
        with op.batch_alter_table(table) as batch_op:
            batch_op.drop_index(f"ix_{table}_website_id")
            batch_op.drop_constraint(f"fk_{table}_website_id", type_="foreignkey")
            batch_op.drop_column("website_id")

    with op.batch_alter_table("users") as batch_op:
        batch_op.drop_index("idx_user_role")
        batch_op.drop_constraint("fk_users_default_website_id", type_="foreignkey")
        batch_op.drop_column("default_website_id")
        batch_op.drop_column("role")

    op.drop_index(op.f("ix_user_websites_website_id"), table_name="user_websites")
    op.drop_table("user_websites")

    op.drop_index("idx_website_status", table_name="websites")
    op.drop_index(op.f("ix_websites_slug"), table_name="websites")
    op.drop_index(op.f("ix_websites_domain"), table_name="websites")
    op.drop_index(op.f("ix_websites_id"), table_name="websites")
    op.drop_table("websites")
