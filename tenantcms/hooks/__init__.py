"""Before-write interceptors for tenant fields."""

from tenantcms.hooks.user_fields import check_role_assignment, resolve_default_website
from tenantcms.hooks.website_field import auto_populate_website

__all__ = ["auto_populate_website", "check_role_assignment", "resolve_default_website"]
