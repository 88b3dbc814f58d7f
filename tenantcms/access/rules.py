"""
Access rule table.

Every (collection, operation) pair maps each role to one of three decision
kinds. Tenant filtering is layered on afterwards: a ``FILTER`` entry
becomes ``AllowFiltered`` over the caller's own website ids. A caller whose
role is missing from a row is denied, except on reads of users and content,
which fall back to filtering by the caller's websites.

While the tenancy rollout is in its expand phase, content collections also
honour a transitional rule for callers that have not been migrated yet
(no role or no website memberships). That rule is gated by
``settings.tenancy_expand_mode`` and disappears when the flag is off.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from tenantcms.access.principal import Principal
from tenantcms.access.references import WebsiteId
from tenantcms.config import settings
from tenantcms.constants.roles import RoleName

logger = logging.getLogger(__name__)


class Collection(str, Enum):
    WEBSITES = "websites"
    USERS = "users"
    PAGES = "pages"
    MEDIA = "media"


class Operation(str, Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class DecisionKind(str, Enum):
    DENY = "deny"
    ALLOW_ALL = "allow_all"
    FILTER = "filter"


@dataclass(frozen=True)
class Denied:
    kind = DecisionKind.DENY


@dataclass(frozen=True)
class AllowAll:
    kind = DecisionKind.ALLOW_ALL


@dataclass(frozen=True)
class AllowFiltered:
    """Allowed only on records whose website lies in ``website_ids``.

    An empty set matches no records.
    """

    website_ids: frozenset[WebsiteId]
    kind = DecisionKind.FILTER


AccessDecision = Denied | AllowAll | AllowFiltered

DENIED = Denied()
ALLOW_ALL = AllowAll()

TENANT_SCOPED_COLLECTIONS = frozenset({Collection.PAGES, Collection.MEDIA})

_D, _A, _F = DecisionKind.DENY, DecisionKind.ALLOW_ALL, DecisionKind.FILTER


def _row(super_admin: DecisionKind, website_admin: DecisionKind, editor: DecisionKind, viewer: DecisionKind):
    return {
        RoleName.SUPER_ADMIN: super_admin,
        RoleName.WEBSITE_ADMIN: website_admin,
        RoleName.EDITOR: editor,
        RoleName.VIEWER: viewer,
    }


_CONTENT_RULES = {
    Operation.READ: _row(_A, _F, _F, _F),
    Operation.CREATE: _row(_A, _A, _A, _D),
    Operation.UPDATE: _row(_A, _F, _F, _D),
    Operation.DELETE: _row(_A, _F, _D, _D),
}

ACCESS_RULES: dict[tuple[Collection, Operation], dict[RoleName, DecisionKind]] = {
    # Websites are managed by super-admins only
    **{(Collection.WEBSITES, op): _row(_A, _D, _D, _D) for op in Operation},
    (Collection.USERS, Operation.READ): _row(_A, _F, _F, _F),
    (Collection.USERS, Operation.CREATE): _row(_A, _A, _D, _D),
    (Collection.USERS, Operation.UPDATE): _row(_A, _F, _D, _D),
    (Collection.USERS, Operation.DELETE): _row(_A, _D, _D, _D),
    **{(collection, op): row for collection in TENANT_SCOPED_COLLECTIONS for op, row in _CONTENT_RULES.items()},
}


def _unlisted_role_kind(collection: Collection, operation: Operation) -> DecisionKind:
    if operation is Operation.READ and collection is not Collection.WEBSITES:
        return DecisionKind.FILTER
    return DecisionKind.DENY


def _transitional_grant(principal: Principal, operation: Operation) -> bool:
    """Whether an unmigrated caller keeps open access during the expand phase."""
    if operation in (Operation.READ, Operation.UPDATE, Operation.DELETE):
        return principal.role is None or not principal.has_websites
    return False


def evaluate(
    principal: Principal | None,
    operation: Operation,
    collection: Collection,
    expand_mode: bool | None = None,
) -> AccessDecision:
    """
    Decide whether ``principal`` may perform ``operation`` on ``collection``.

    Args:
        principal: The acting user, or None for unauthenticated callers.
        operation: The operation being attempted.
        collection: The collection the operation targets.
        expand_mode: Override for ``settings.tenancy_expand_mode``.

    Returns:
        ``DENIED``, ``ALLOW_ALL`` or an ``AllowFiltered`` over the caller's
        website ids.
    """
    operation = Operation(operation)
    collection = Collection(collection)

    if principal is None:
        return DENIED

    if principal.is_super_admin:
        return ALLOW_ALL

    if expand_mode is None:
        expand_mode = settings.tenancy_expand_mode

    if expand_mode and collection in TENANT_SCOPED_COLLECTIONS and _transitional_grant(principal, operation):
        logger.debug(
            "Transitional access granted: user=%s op=%s collection=%s", principal.id, operation.value, collection.value
        )
        return ALLOW_ALL

    kind = ACCESS_RULES[(collection, operation)].get(principal.role, _unlisted_role_kind(collection, operation))
    if kind is DecisionKind.ALLOW_ALL:
        return ALLOW_ALL
    if kind is DecisionKind.FILTER:
        return AllowFiltered(frozenset(principal.website_ids))
    return DENIED
