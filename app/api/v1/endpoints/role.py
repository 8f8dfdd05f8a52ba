from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.role import CreateRole, RoleResponse, UpdateRole
from app.core.database import get_db
from app.services.role import RoleService
from app.utils.roles import get_current_user

router = APIRouter(prefix="/role", tags=["Role"])


@router.get("/", response_model=List[RoleResponse], status_code=status.HTTP_200_OK)
async def get_roles(
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    roles = await RoleService.get_all_roles(db, current_user)
    return [RoleResponse.model_validate(role) for role in roles]


@router.post("/create", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
        role_data: CreateRole,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """
    Создание новой роли (только супер-администратор).

    Raises:
        HTTPException: 400 - Роль уже существует
        HTTPException: 401 - Действие запрещено
    """
    role = await RoleService.create_role(role_data, db, current_user)
    return RoleResponse.model_validate(role)


@router.get("/{role_id}", response_model=RoleResponse, status_code=status.HTTP_200_OK)
async def get_role(
        role_id: int,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    role = await RoleService.get_role(role_id, db, current_user)
    return RoleResponse.model_validate(role)


@router.patch("/update/{role_id}", response_model=RoleResponse, status_code=status.HTTP_200_OK)
async def update_role(
        role_id: int,
        role_data: UpdateRole,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    role = await RoleService.update_role(role_id, role_data, db, current_user)
    return RoleResponse.model_validate(role)


@router.delete("/delete/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(
        role_id: int,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """Удаление роли, не назначенной ни одному администратору."""
    await RoleService.delete_role(role_id, db, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
