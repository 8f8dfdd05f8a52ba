from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.subject import CreateSubject, SubjectResponse, UpdateSubject
from app.core.database import get_db
from app.core.logger import logger
from app.services.subject import SubjectService
from app.utils.roles import get_current_user

router = APIRouter(prefix="/subject", tags=["Subject"])


@router.get("/", response_model=List[SubjectResponse], status_code=status.HTTP_200_OK)
async def get_subjects(
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """
    Получение списка всех предметов.

    Args:
        db: Асинхронная сессия SQLAlchemy
        current_user: Информация о текущем пользователе

    Returns:
        List[SubjectResponse]: Список предметов, отсортированный по названию
    """
    logger.info(f"[ПРЕДМЕТЫ] Пользователь {current_user.get('login')} запросил список предметов")
    subjects = await SubjectService.get_all_subjects(db)
    return [SubjectResponse.model_validate(subject) for subject in subjects]


@router.post("/create", response_model=SubjectResponse, status_code=status.HTTP_201_CREATED)
async def create_subject(
        subject_data: CreateSubject,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    subject = await SubjectService.create_subject(subject_data, db, current_user)
    return SubjectResponse.model_validate(subject)


@router.get("/{subject_id}", response_model=SubjectResponse, status_code=status.HTTP_200_OK)
async def get_subject(
        subject_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    subject = await SubjectService.get_subject(subject_id, db)
    return SubjectResponse.model_validate(subject)


@router.patch("/update/{subject_id}", response_model=SubjectResponse, status_code=status.HTTP_200_OK)
async def update_subject(
        subject_id: str,
        subject_data: UpdateSubject,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """
    Обновление предмета по ID.

    Raises:
        HTTPException: 400 - Предмет с таким названием уже существует
        HTTPException: 401 - Действие запрещено
        HTTPException: 404 - Предмет не найден
    """
    subject = await SubjectService.update_subject(subject_id, subject_data, db, current_user)
    return SubjectResponse.model_validate(subject)


@router.delete("/delete/{subject_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subject(
        subject_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    await SubjectService.delete_subject(subject_id, db, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
