"""
Interceptors for the tenant fields of user records.
"""

from collections.abc import Sequence

from tenantcms.access.principal import Principal
from tenantcms.access.references import WebsiteId
from tenantcms.access.rules import Operation
from tenantcms.constants.roles import RoleName, coerce_role, is_higher_role
from tenantcms.exceptions import AuthorizationDenied, ConstraintViolation

DEFAULT_WEBSITE_NOT_ASSIGNED = "Default website must be one of the assigned websites"


def resolve_default_website(
    website_ids: Sequence[WebsiteId],
    default_website_id: WebsiteId | None,
    operation: Operation,
) -> WebsiteId | None:
    """
    Validate and complete a user's default website.

    The default must be one of the assigned websites whenever both are set.
    On create, a single assigned website becomes the default when none was
    given.

    Raises:
        ConstraintViolation: If the default is not among ``website_ids``.
    """
    if website_ids and default_website_id is not None and default_website_id not in website_ids:
        raise ConstraintViolation(DEFAULT_WEBSITE_NOT_ASSIGNED, field="default_website")

    if Operation(operation) is Operation.CREATE and len(website_ids) == 1 and default_website_id is None:
        return website_ids[0]

    return default_website_id


def check_role_assignment(
    principal: Principal,
    requested_role: str | RoleName | None,
    current_role: str | RoleName | None,
    operation: Operation,
) -> None:
    """
    Field-level rule for the ``role`` attribute.

    Only super-admins may grant the super-admin role or change an existing
    user's role, and nobody may grant a role above their own. This holds
    independently of the record-level grant.
    """
    if principal.is_super_admin:
        return

    requested = coerce_role(requested_role)
    if requested is RoleName.SUPER_ADMIN:
        raise AuthorizationDenied("Only super-admins can assign the super-admin role", collection="users")
    if requested is not None and is_higher_role(requested, principal.role):
        raise AuthorizationDenied("Cannot assign a role above your own", collection="users")

    if Operation(operation) is Operation.UPDATE and requested is not None and requested != coerce_role(current_role):
        raise AuthorizationDenied("Only super-admins can change a user's role", collection="users")


def check_membership_assignment(principal: Principal, website_ids: Sequence[WebsiteId]) -> None:
    """Non-super-admins may only hand out memberships of websites they belong to."""
    if principal.is_super_admin:
        return
    outside = [website_id for website_id in website_ids if website_id not in principal.website_ids]
    if outside:
        raise AuthorizationDenied(
            "Cannot assign websites you do not belong to",
            collection="users",
        )
