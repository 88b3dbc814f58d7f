from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tenantcms.auth import get_current_user
from tenantcms.database import get_db
from tenantcms.exceptions import AuthenticationError
from tenantcms.models.user import User
from tenantcms.schemas.common import PaginatedResponse
from tenantcms.schemas.user import UserCreate, UserResponse, UserUpdate
from tenantcms.services import user_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: User | None = Depends(get_current_user)):
    if current_user is None:
        raise AuthenticationError("Not authenticated")
    return UserResponse.from_user(current_user)


@router.get("", response_model=PaginatedResponse[UserResponse])
async def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    users, total = await user_service.list_users(db, current_user, skip=skip, limit=limit)
    return PaginatedResponse[UserResponse](
        items=[UserResponse.from_user(u) for u in users], total=total, skip=skip, limit=limit
    )


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    return UserResponse.from_user(await user_service.create_user(data, db, current_user))


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    return UserResponse.from_user(await user_service.get_user(user_id, db, current_user))


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    data: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    return UserResponse.from_user(await user_service.update_user(user_id, data, db, current_user))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_current_user),
):
    await user_service.delete_user(user_id, db, current_user)
