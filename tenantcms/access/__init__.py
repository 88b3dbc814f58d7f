"""
Tenant-scoped access control.

``evaluate`` maps (principal, operation, collection) to an access decision;
the helpers in ``filters`` turn that decision into query predicates or a
rejection. Nothing here is cached between requests.
"""

from tenantcms.access.principal import Principal
from tenantcms.access.references import WebsiteRef, extract_website_ids, to_website_id
from tenantcms.access.rules import (
    ACCESS_RULES,
    ALLOW_ALL,
    DENIED,
    AccessDecision,
    AllowAll,
    AllowFiltered,
    Collection,
    DecisionKind,
    Denied,
    Operation,
    evaluate,
)

__all__ = [
    "ACCESS_RULES",
    "ALLOW_ALL",
    "DENIED",
    "AccessDecision",
    "AllowAll",
    "AllowFiltered",
    "Collection",
    "DecisionKind",
    "Denied",
    "Operation",
    "Principal",
    "WebsiteRef",
    "evaluate",
    "extract_website_ids",
    "to_website_id",
]
