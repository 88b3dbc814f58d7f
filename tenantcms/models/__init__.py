from tenantcms.models.media import Media
from tenantcms.models.page import Page, PageStatus, PageVersion
from tenantcms.models.user import User
from tenantcms.models.user_websites import user_websites
from tenantcms.models.website import Website, WebsiteStatus

__all__ = [
    "Media",
    "Page",
    "PageStatus",
    "PageVersion",
    "User",
    "Website",
    "WebsiteStatus",
    "user_websites",
]
