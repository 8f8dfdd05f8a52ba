from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.result import ResultQuestionResponse
from app.core.database import get_db
from app.services.result_question import ResultQuestionService
from app.utils.roles import get_current_user

router = APIRouter(prefix="/result-question", tags=["Result question"])


@router.get("/", response_model=List[ResultQuestionResponse], status_code=status.HTTP_200_OK)
async def get_result_questions(
        result_id: Optional[str] = None,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    result_questions = await ResultQuestionService.get_all_result_questions(db, current_user, result_id)
    return [ResultQuestionResponse.model_validate(item) for item in result_questions]


@router.get("/{result_question_id}", response_model=ResultQuestionResponse, status_code=status.HTTP_200_OK)
async def get_result_question(
        result_question_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """Ответ на отдельный вопрос в результате (сотрудники или сам студент)."""
    result_question = await ResultQuestionService.get_result_question(result_question_id, db, current_user)
    return ResultQuestionResponse.model_validate(result_question)
