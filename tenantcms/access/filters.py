"""
Translate access decisions into query predicates.

``Denied`` becomes an ``AuthorizationDenied`` rejection, ``AllowAll`` adds
nothing, and ``AllowFiltered`` restricts the statement to records whose
website lies in the granted set. An empty set always renders as a false
predicate.
"""

import logging
from typing import Any

from sqlalchemy import Select, exists, false, or_

from tenantcms.access.principal import Principal
from tenantcms.access.rules import AccessDecision, AllowAll, AllowFiltered, Collection, Denied, Operation
from tenantcms.exceptions import AuthorizationDenied
from tenantcms.models.user import User
from tenantcms.models.user_websites import user_websites

logger = logging.getLogger(__name__)


def require_access(
    decision: AccessDecision,
    collection: Collection,
    operation: Operation,
    principal: Principal | None = None,
) -> AccessDecision:
    """Raise ``AuthorizationDenied`` for a ``Denied`` decision, otherwise pass it through."""
    if isinstance(decision, Denied):
        logger.warning(
            "Access denied: user=%s op=%s collection=%s",
            principal.id if principal else None,
            Operation(operation).value,
            Collection(collection).value,
        )
        raise AuthorizationDenied(
            f"Not allowed to {Operation(operation).value} {Collection(collection).value}",
            collection=Collection(collection).value,
            operation=Operation(operation).value,
        )
    return decision


def website_clause(decision: AccessDecision, website_column: Any):
    """Predicate limiting ``website_column`` to a filtered grant, or None for AllowAll."""
    if isinstance(decision, AllowAll):
        return None
    if isinstance(decision, AllowFiltered):
        if not decision.website_ids:
            return false()
        return website_column.in_(list(decision.website_ids))
    return false()


def scope_content_query(stmt: Select, decision: AccessDecision, website_column: Any) -> Select:
    """Restrict a content statement to the records the decision grants."""
    clause = website_clause(decision, website_column)
    return stmt if clause is None else stmt.where(clause)


def user_clause(decision: AccessDecision, principal: Principal | None = None, include_self: bool = False):
    """
    Predicate limiting users to those sharing a website with the grant.

    With ``include_self`` the caller's own record always matches.
    """
    if isinstance(decision, AllowAll):
        return None

    if isinstance(decision, AllowFiltered) and decision.website_ids:
        clause = exists().where(
            user_websites.c.user_id == User.id,
            user_websites.c.website_id.in_(list(decision.website_ids)),
        )
    else:
        clause = false()

    if include_self and principal is not None and principal.id is not None:
        clause = or_(clause, User.id == principal.id)
    return clause


def scope_user_query(
    stmt: Select,
    decision: AccessDecision,
    principal: Principal | None = None,
    include_self: bool = False,
) -> Select:
    """Restrict a users statement to the records the decision grants."""
    clause = user_clause(decision, principal, include_self=include_self)
    return stmt if clause is None else stmt.where(clause)
