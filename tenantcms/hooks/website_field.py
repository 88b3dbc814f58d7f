"""
Website field interceptor for tenant-scoped content.

Runs before every create and update of a page or media record and decides
which website the record belongs to:

- without an acting user (system writes) the supplied value is kept;
- on create, super-admins may pick any website; everyone else gets their
  default website, falling back to the supplied value when they have none;
- on update, only super-admins may move a record to another website;
  everyone else keeps the stored website, and the supplied value is used
  only when nothing is stored yet.
"""

from typing import Any

from tenantcms.access.principal import Principal
from tenantcms.access.references import WebsiteId, to_website_id
from tenantcms.access.rules import Operation


def auto_populate_website(
    user: Any,
    operation: Operation,
    value: Any = None,
    original: Any = None,
) -> WebsiteId | None:
    """
    Compute the website to store on a content record.

    Args:
        user: The acting user (ORM user, mapping or Principal), or None.
        operation: ``Operation.CREATE`` or ``Operation.UPDATE``.
        value: The website supplied by the caller, if any.
        original: The website currently stored on the record (updates only).

    Returns:
        The website id to persist, or None when none can be determined.
    """
    principal = Principal.from_user(user)
    supplied = to_website_id(value)

    if principal is None:
        return supplied

    operation = Operation(operation)

    if operation is Operation.UPDATE:
        if principal.is_super_admin and supplied is not None:
            return supplied
        stored = to_website_id(original)
        return stored if stored is not None else supplied

    if operation is Operation.CREATE:
        if principal.is_super_admin and supplied is not None:
            return supplied
        if principal.default_website_id is not None:
            return principal.default_website_id
        return supplied

    return supplied
