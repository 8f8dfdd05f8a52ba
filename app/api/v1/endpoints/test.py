from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.test import (
    CreateExamTest,
    ExamTestFullResponse,
    ExamTestResponse,
    UpdateExamTest,
)
from app.core.database import get_db
from app.services.test import TestService
from app.utils.roles import get_current_user

router = APIRouter(prefix="/test", tags=["Test"])


@router.get("/", response_model=List[ExamTestResponse], status_code=status.HTTP_200_OK)
async def get_tests(
        subject_id: Optional[str] = None,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """
    Получение списка тестов, при необходимости по предмету.

    Args:
        subject_id: Фильтр по предмету
        db: Асинхронная сессия SQLAlchemy
        current_user: Информация о текущем пользователе

    Returns:
        List[ExamTestResponse]: Список тестов
    """
    tests = await TestService.get_all_tests(db, subject_id)
    return [ExamTestResponse.model_validate(test) for test in tests]


@router.post("/create", response_model=ExamTestResponse, status_code=status.HTTP_201_CREATED)
async def create_test(
        test_data: CreateExamTest,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """
    Создание теста по предмету (преподаватели и администраторы).

    Raises:
        HTTPException: 401 - Действие запрещено
        HTTPException: 404 - Предмет не найден
    """
    test = await TestService.create_test(test_data, db, current_user)
    return ExamTestResponse.model_validate(test)


@router.get("/{test_id}", response_model=ExamTestResponse, status_code=status.HTTP_200_OK)
async def get_test(
        test_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    test = await TestService.get_test(test_id, db)
    return ExamTestResponse.model_validate(test)


@router.get("/{test_id}/full", response_model=ExamTestFullResponse, status_code=status.HTTP_200_OK)
async def get_full_test(
        test_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """Тест с вопросами и вариантами ответов; студентам правильные ответы не показываются."""
    return await TestService.get_full_test(test_id, db, current_user)


@router.patch("/update/{test_id}", response_model=ExamTestResponse, status_code=status.HTTP_200_OK)
async def update_test(
        test_id: str,
        test_data: UpdateExamTest,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    test = await TestService.update_test(test_id, test_data, db, current_user)
    return ExamTestResponse.model_validate(test)


@router.delete("/delete/{test_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_test(
        test_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """Удаление теста вместе с вопросами, ответами и результатами."""
    await TestService.delete_test(test_id, db, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
