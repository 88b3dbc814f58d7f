"""
Tenant-scoped content service.

Shared find/create/update/delete for collections whose records carry a
``website_id`` owner (pages and media). Reads are filtered to the websites
the caller may see; writes first pass through the access rules and then
through the website field interceptor, which decides the owner that is
actually stored.
"""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tenantcms.access import Collection, Operation, Principal, evaluate
from tenantcms.access.filters import require_access, scope_content_query
from tenantcms.database import Base
from tenantcms.exceptions import AuthorizationDenied, ConstraintViolation, ResourceNotFoundError
from tenantcms.hooks.website_field import auto_populate_website
from tenantcms.models.website import Website

logger = logging.getLogger(__name__)


class TenantScopedService:
    """CRUD for one tenant-scoped model."""

    model: type[Base]
    collection: Collection
    resource_name: str

    def __init__(self, model: type[Base], collection: Collection, resource_name: str):
        self.model = model
        self.collection = collection
        self.resource_name = resource_name

    def _decide(self, principal: Principal | None, operation: Operation):
        decision = evaluate(principal, operation, self.collection)
        return require_access(decision, self.collection, operation, principal)

    async def _validate_website(self, website_id: Any, db: AsyncSession) -> None:
        if website_id is None:
            return
        if await db.get(Website, website_id) is None:
            raise ConstraintViolation(f"Website with id '{website_id}' does not exist", field="website")

    async def _commit(self, db: AsyncSession, record: Any) -> None:
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning(f"{self.resource_name} write rejected by database constraint: {e.orig}")
            raise ConstraintViolation(f"{self.resource_name} violates a database constraint") from e
        await db.refresh(record)

    async def find(
        self,
        db: AsyncSession,
        current_user: Any,
        skip: int = 0,
        limit: int = 20,
        filters: dict[str, Any] | None = None,
    ) -> tuple[list[Any], int]:
        """Return the records visible to the caller and their total count."""
        principal = Principal.from_user(current_user)
        decision = self._decide(principal, Operation.READ)

        query = scope_content_query(select(self.model), decision, self.model.website_id)
        for field, value in (filters or {}).items():
            if value is not None:
                query = query.where(getattr(self.model, field) == value)

        total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
        result = await db.execute(query.order_by(self.model.id).offset(skip).limit(limit))
        return list(result.scalars().all()), total

    async def get(self, record_id: int, db: AsyncSession, current_user: Any) -> Any:
        """Return one record; records outside the caller's websites are reported as missing."""
        principal = Principal.from_user(current_user)
        decision = self._decide(principal, Operation.READ)
        query = scope_content_query(select(self.model).where(self.model.id == record_id), decision, self.model.website_id)
        record = (await db.execute(query)).scalars().first()
        if record is None:
            raise ResourceNotFoundError(self.resource_name, record_id)
        return record

    async def _get_for_write(self, record_id: int, operation: Operation, db: AsyncSession, principal: Principal | None):
        decision = self._decide(principal, operation)
        query = scope_content_query(select(self.model).where(self.model.id == record_id), decision, self.model.website_id)
        record = (await db.execute(query)).scalars().first()
        if record is not None:
            return record
        if await db.get(self.model, record_id) is not None:
            logger.warning(
                "%s %s denied outside caller's websites: id=%s user=%s",
                self.resource_name,
                operation.value,
                record_id,
                principal.id if principal else None,
            )
            raise AuthorizationDenied(
                f"Not allowed to {operation.value} this {self.resource_name.lower()}",
                collection=self.collection.value,
                operation=operation.value,
            )
        raise ResourceNotFoundError(self.resource_name, record_id)

    def build(self, values: dict[str, Any]) -> Any:
        """Instantiate a record from validated values."""
        return self.model(**values)

    async def before_update(self, record: Any, db: AsyncSession, principal: Principal | None) -> None:
        """Called with the stored record before changes are applied."""

    async def create(self, values: dict[str, Any], db: AsyncSession, current_user: Any) -> Any:
        """
        Create a record.

        ``values`` may contain a ``website`` reference; the stored owner is
        decided by the website field interceptor.
        """
        principal = Principal.from_user(current_user)
        self._decide(principal, Operation.CREATE)

        values = dict(values)
        supplied = values.pop("website", None)
        website_id = auto_populate_website(principal, Operation.CREATE, supplied)
        await self._validate_website(website_id, db)

        record = self.build({**values, "website_id": website_id})
        db.add(record)
        await self._commit(db, record)
        logger.info(
            "%s created: id=%d website_id=%s by user=%s",
            self.resource_name,
            record.id,
            record.website_id,
            principal.id if principal else None,
        )
        return record

    async def update(self, record_id: int, values: dict[str, Any], db: AsyncSession, current_user: Any) -> Any:
        """
        Apply a partial update.

        Only super-admins can move a record to another website; for everyone
        else a supplied ``website`` is ignored and the stored owner is kept.
        """
        principal = Principal.from_user(current_user)
        record = await self._get_for_write(record_id, Operation.UPDATE, db, principal)

        values = dict(values)
        supplied = values.pop("website", None)
        website_id = auto_populate_website(principal, Operation.UPDATE, supplied, record.website_id)
        if website_id != record.website_id:
            await self._validate_website(website_id, db)

        await self.before_update(record, db, principal)
        for field, value in values.items():
            setattr(record, field, value)
        if website_id != record.website_id:
            logger.info(
                "%s %d moved from website %s to %s", self.resource_name, record.id, record.website_id, website_id
            )
        record.website_id = website_id

        await self._commit(db, record)
        return record

    async def delete(self, record_id: int, db: AsyncSession, current_user: Any) -> None:
        principal = Principal.from_user(current_user)
        record = await self._get_for_write(record_id, Operation.DELETE, db, principal)
        await db.delete(record)
        await db.commit()
        logger.info(
            "%s deleted: id=%d by user=%s", self.resource_name, record_id, principal.id if principal else None
        )
