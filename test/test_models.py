"""
Structure checks for the tenancy schema.
"""

from tenantcms.models import Media, Page, PageVersion, User, Website, user_websites


def _columns(model) -> dict:
    return {c.key: c for c in model.__table__.columns}


def test_website_columns():
    cols = _columns(Website)
    assert {"id", "name", "domain", "slug", "status", "settings_logo_id"}.issubset(cols)
    assert cols["domain"].unique
    assert cols["slug"].unique


def test_website_logo_fk_is_deferred():
    fk = next(iter(_columns(Website)["settings_logo_id"].foreign_keys))
    assert fk.use_alter
    assert fk.target_fullname == "media.id"


def test_user_membership_columns():
    cols = _columns(User)
    assert cols["role"].nullable
    fk = next(iter(cols["default_website_id"].foreign_keys))
    assert fk.ondelete == "SET NULL"


def test_membership_table_cascades():
    for column in user_websites.columns:
        fk = next(iter(column.foreign_keys))
        assert fk.ondelete == "CASCADE"
        assert column.primary_key


def test_content_website_reference():
    for model in (Page, Media):
        column = _columns(model)["website_id"]
        fk = next(iter(column.foreign_keys))
        assert fk.target_fullname == "websites.id"
        assert fk.ondelete == "SET NULL"
        assert column.index


def test_page_version_cascades_with_page():
    fk = next(iter(_columns(PageVersion)["page_id"].foreign_keys))
    assert fk.ondelete == "CASCADE"
