from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.answer import AnswerResponse, CreateAnswer, UpdateAnswer
from app.core.database import get_db
from app.services.answer import AnswerService
from app.utils.roles import get_current_user

router = APIRouter(prefix="/answer", tags=["Answer"])


@router.get("/", response_model=List[AnswerResponse], status_code=status.HTTP_200_OK)
async def get_answers(
        question_id: Optional[str] = None,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """
    Получение вариантов ответов, при необходимости по вопросу.

    Для студентов признак правильного ответа не возвращается.
    """
    answers = await AnswerService.get_all_answers(db, question_id)
    return [AnswerService.to_response(answer, current_user) for answer in answers]


@router.post("/create", response_model=AnswerResponse, status_code=status.HTTP_201_CREATED)
async def create_answer(
        answer_data: CreateAnswer,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    answer = await AnswerService.create_answer(answer_data, db, current_user)
    return AnswerService.to_response(answer, current_user)


@router.get("/{answer_id}", response_model=AnswerResponse, status_code=status.HTTP_200_OK)
async def get_answer(
        answer_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    answer = await AnswerService.get_answer(answer_id, db)
    return AnswerService.to_response(answer, current_user)


@router.patch("/update/{answer_id}", response_model=AnswerResponse, status_code=status.HTTP_200_OK)
async def update_answer(
        answer_id: str,
        answer_data: UpdateAnswer,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    answer = await AnswerService.update_answer(answer_id, answer_data, db, current_user)
    return AnswerService.to_response(answer, current_user)


@router.delete("/delete/{answer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_answer(
        answer_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    await AnswerService.delete_answer(answer_id, db, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
