from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.result import ResultAnswerResponse
from app.core.database import get_db
from app.services.result_answer import ResultAnswerService
from app.utils.roles import get_current_user

router = APIRouter(prefix="/result-answer", tags=["Result answer"])


@router.get("/", response_model=List[ResultAnswerResponse], status_code=status.HTTP_200_OK)
async def get_result_answers(
        result_question_id: Optional[str] = None,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    result_answers = await ResultAnswerService.get_all_result_answers(db, current_user, result_question_id)
    return [ResultAnswerResponse.model_validate(item) for item in result_answers]


@router.get("/{result_answer_id}", response_model=ResultAnswerResponse, status_code=status.HTTP_200_OK)
async def get_result_answer(
        result_answer_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    result_answer = await ResultAnswerService.get_result_answer(result_answer_id, db, current_user)
    return ResultAnswerResponse.model_validate(result_answer)
