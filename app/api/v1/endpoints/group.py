from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.group import CreateGroup, GroupResponse, UpdateGroup
from app.api.v1.schemas.student import StudentResponse
from app.core.database import get_db
from app.core.logger import logger
from app.services.group import GroupService
from app.services.student import StudentService
from app.utils.roles import get_current_user

router = APIRouter(prefix="/group", tags=["Group"])


@router.get("/", response_model=List[GroupResponse], status_code=status.HTTP_200_OK)
async def get_groups(
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """
    Получение списка всех групп.

    Args:
        db: Асинхронная сессия SQLAlchemy
        current_user: Информация о текущем пользователе

    Returns:
        List[GroupResponse]: Список групп
    """
    logger.info(f"[ГРУППЫ] Пользователь {current_user.get('login')} запросил список групп")
    groups = await GroupService.get_all_groups(db)
    return [GroupResponse.model_validate(group) for group in groups]


@router.post("/create", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
        group_data: CreateGroup,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """
    Создание новой группы (администраторы).

    Raises:
        HTTPException: 400 - Группа уже существует
        HTTPException: 401 - Действие запрещено
    """
    group = await GroupService.create_group(group_data, db, current_user)
    return GroupResponse.model_validate(group)


@router.get("/{group_id}", response_model=GroupResponse, status_code=status.HTTP_200_OK)
async def get_group(
        group_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    group = await GroupService.get_group(group_id, db)
    return GroupResponse.model_validate(group)


@router.get("/{group_id}/students", response_model=List[StudentResponse], status_code=status.HTTP_200_OK)
async def get_group_students(
        group_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """Получение студентов группы (преподаватели и администраторы)."""
    students = await StudentService.get_students_by_group_id(group_id, db, current_user)
    return [StudentResponse.model_validate(student) for student in students]


@router.patch("/update/{group_id}", response_model=GroupResponse, status_code=status.HTTP_200_OK)
async def update_group(
        group_id: str,
        group_data: UpdateGroup,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    group = await GroupService.update_group(group_id, group_data, db, current_user)
    return GroupResponse.model_validate(group)


@router.delete("/delete/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group(
        group_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """Удаление группы; у её студентов ссылка на группу обнуляется."""
    await GroupService.delete_group(group_id, db, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
