"""
User Service

Creates, reads, updates and deletes users under the access rules. Website
memberships are validated here: every referenced website must exist, the
default website must be one of the memberships, and non-super-admins can
only grant memberships and roles they are entitled to.
"""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tenantcms.access import Collection, Operation, Principal, evaluate
from tenantcms.access.filters import require_access, scope_user_query
from tenantcms.auth import hash_password
from tenantcms.exceptions import (
    AuthorizationDenied,
    ConstraintViolation,
    DuplicateResourceError,
    ResourceNotFoundError,
)
from tenantcms.hooks.user_fields import check_membership_assignment, check_role_assignment, resolve_default_website
from tenantcms.models.user import User
from tenantcms.models.website import Website
from tenantcms.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


async def get_user_by_id(user_id: int, db: AsyncSession) -> User | None:
    """Return a user with memberships freshly loaded. No access check."""
    result = await db.execute(
        select(User).where(User.id == user_id).execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_user_by_email(email: str, db: AsyncSession) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalars().first()


async def _load_websites(website_ids: list[int], db: AsyncSession) -> list[Website]:
    if not website_ids:
        return []
    result = await db.execute(select(Website).where(Website.id.in_(website_ids)))
    websites = {website.id: website for website in result.scalars().all()}
    missing = [website_id for website_id in website_ids if website_id not in websites]
    if missing:
        raise ConstraintViolation(f"Unknown website id(s): {missing}", field="websites")
    return [websites[website_id] for website_id in website_ids]


async def _commit(db: AsyncSession) -> None:
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"User write rejected by database constraint: {e.orig}")
        raise ConstraintViolation("User violates a uniqueness or reference constraint") from e


async def create_user(data: UserCreate, db: AsyncSession, current_user: Any) -> User:
    """
    Create a user.

    Super-admins and website-admins may create users. A single assigned
    website becomes the default when none is given.
    """
    principal = Principal.from_user(current_user)
    require_access(evaluate(principal, Operation.CREATE, Collection.USERS), Collection.USERS, Operation.CREATE, principal)
    check_role_assignment(principal, data.role, None, Operation.CREATE)
    check_membership_assignment(principal, data.websites)

    if await get_user_by_email(data.email, db) is not None:
        raise DuplicateResourceError("User", "email", data.email)

    default_website_id = resolve_default_website(data.websites, data.default_website, Operation.CREATE)
    websites = await _load_websites(data.websites, db)

    user = User(
        email=data.email,
        hashed_password=hash_password(data.password),
        role=data.role.value,
        default_website_id=default_website_id,
        websites=websites,
    )
    db.add(user)
    await _commit(db)
    logger.info("User created: id=%d email=%s role=%s", user.id, user.email, user.role)
    return await get_user_by_id(user.id, db)


async def list_users(
    db: AsyncSession,
    current_user: Any,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[User], int]:
    """
    List the users visible to the caller.

    Non-super-admins see users sharing at least one website with them, plus
    their own record.
    """
    principal = Principal.from_user(current_user)
    decision = require_access(
        evaluate(principal, Operation.READ, Collection.USERS), Collection.USERS, Operation.READ, principal
    )
    query = scope_user_query(select(User), decision, principal, include_self=True)

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
    result = await db.execute(query.order_by(User.id).offset(skip).limit(limit))
    return list(result.scalars().all()), total


async def get_user(user_id: int, db: AsyncSession, current_user: Any) -> User:
    principal = Principal.from_user(current_user)
    decision = require_access(
        evaluate(principal, Operation.READ, Collection.USERS), Collection.USERS, Operation.READ, principal
    )
    query = scope_user_query(select(User).where(User.id == user_id), decision, principal, include_self=True)
    user = (await db.execute(query)).scalars().first()
    if user is None:
        raise ResourceNotFoundError("User", user_id)
    return user


async def _get_for_write(user_id: int, operation: Operation, db: AsyncSession, principal: Principal | None) -> User:
    decision = require_access(evaluate(principal, operation, Collection.USERS), Collection.USERS, operation, principal)
    query = scope_user_query(select(User).where(User.id == user_id), decision, principal)
    user = (await db.execute(query)).scalars().first()
    if user is not None:
        return user
    if await get_user_by_id(user_id, db) is not None:
        raise AuthorizationDenied(f"Not allowed to {operation.value} this user", collection="users", operation=operation.value)
    raise ResourceNotFoundError("User", user_id)


async def update_user(user_id: int, data: UserUpdate, db: AsyncSession, current_user: Any) -> User:
    """
    Apply a partial update to a user.

    The default website is validated against the memberships the user will
    have after the update; a failing write leaves the record untouched.
    """
    principal = Principal.from_user(current_user)
    user = await _get_for_write(user_id, Operation.UPDATE, db, principal)
    updates = data.model_dump(exclude_unset=True)

    if "role" in updates:
        check_role_assignment(principal, updates["role"], user.role, Operation.UPDATE)
    if updates.get("websites") is not None:
        check_membership_assignment(principal, updates["websites"])

    website_ids = updates["websites"] if updates.get("websites") is not None else [w.id for w in user.websites]
    default_website_id = updates["default_website"] if "default_website" in updates else user.default_website_id
    default_website_id = resolve_default_website(website_ids, default_website_id, Operation.UPDATE)
    new_websites = await _load_websites(website_ids, db) if updates.get("websites") is not None else None

    if updates.get("email") and updates["email"] != user.email:
        if await get_user_by_email(updates["email"], db) is not None:
            raise DuplicateResourceError("User", "email", updates["email"])
        user.email = updates["email"]
    if updates.get("password"):
        user.hashed_password = hash_password(updates["password"])
    if updates.get("role") is not None:
        user.role = updates["role"].value
    if new_websites is not None:
        user.websites = new_websites
    user.default_website_id = default_website_id

    await _commit(db)
    logger.info("User updated: id=%d by user=%s", user.id, principal.id if principal else None)
    return await get_user_by_id(user.id, db)


async def delete_user(user_id: int, db: AsyncSession, current_user: Any) -> None:
    """Delete a user (super-admin only)."""
    principal = Principal.from_user(current_user)
    user = await _get_for_write(user_id, Operation.DELETE, db, principal)
    await db.delete(user)
    await db.commit()
    logger.info("User deleted: id=%d by user=%s", user_id, principal.id if principal else None)
