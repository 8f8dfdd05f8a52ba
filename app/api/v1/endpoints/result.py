from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.result import ResultResponse, SubmitResult
from app.core.database import get_db
from app.core.logger import logger
from app.services.result import ResultService
from app.utils.roles import get_current_user

router = APIRouter(prefix="/result", tags=["Result"])


@router.post("/submit", response_model=ResultResponse, status_code=status.HTTP_201_CREATED)
async def submit_result(
        submit_data: SubmitResult,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """
    Отправка ответов студента на тест и подсчёт результата.

    Вопрос засчитывается, если выбранные ответы в точности совпадают
    с множеством правильных ответов.

    Args:
        submit_data: ID теста и выбранные ответы по вопросам
        db: Асинхронная сессия SQLAlchemy
        current_user: Информация о текущем пользователе

    Returns:
        ResultResponse: Сохранённый результат

    Raises:
        HTTPException: 400 - Вопрос или ответ не относится к тесту
        HTTPException: 401 - Действие запрещено
        HTTPException: 404 - Тест не найден
    """
    result = await ResultService.submit_result(submit_data, db, current_user)
    logger.info(
        f"[РЕЗУЛЬТАТ] {current_user.get('login')}: {result.correct_answers}/{result.total_questions}"
    )
    return ResultResponse.model_validate(result)


@router.get("/", response_model=List[ResultResponse], status_code=status.HTTP_200_OK)
async def get_results(
        student_id: Optional[str] = None,
        test_id: Optional[str] = None,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    results = await ResultService.get_all_results(db, current_user, student_id, test_id)
    return [ResultResponse.model_validate(result) for result in results]


@router.get("/{result_id}", response_model=ResultResponse, status_code=status.HTTP_200_OK)
async def get_result(
        result_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    result = await ResultService.get_result(result_id, db, current_user)
    return ResultResponse.model_validate(result)


@router.delete("/delete/{result_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_result(
        result_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    await ResultService.delete_result(result_id, db, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
