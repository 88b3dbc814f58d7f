"""
Tenancy rollout status.

GET /api/v1/tenancy/status → counts of records still blocking the contract
phase (super-admin only).
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from tenantcms.access import Principal
from tenantcms.auth import get_current_user
from tenantcms.database import get_db
from tenantcms.exceptions import AuthorizationDenied
from tenantcms.models.user import User
from tenantcms.services.tenancy_migration_service import get_migration_status

router = APIRouter(prefix="/tenancy", tags=["Tenancy"])


class MigrationStatusResponse(BaseModel):
    websites: int
    users_unmigrated: int
    pages_unmigrated: int
    media_unmigrated: int
    expand_mode: bool
    ready_to_contract: bool


@router.get("/status", response_model=MigrationStatusResponse)
async def migration_status(
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    principal = Principal.from_user(current_user)
    if principal is None or not principal.is_super_admin:
        raise AuthorizationDenied("Only super-admins can view the tenancy migration status")

    report = await get_migration_status(db)
    return MigrationStatusResponse(
        websites=report.websites,
        users_unmigrated=report.users_unmigrated,
        pages_unmigrated=report.pages_unmigrated,
        media_unmigrated=report.media_unmigrated,
        expand_mode=report.expand_mode,
        ready_to_contract=report.ready_to_contract,
    )
