from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.question import CreateQuestion, QuestionResponse, UpdateQuestion
from app.core.database import get_db
from app.services.question import QuestionService
from app.utils.roles import get_current_user

router = APIRouter(prefix="/question", tags=["Question"])


@router.get("/", response_model=List[QuestionResponse], status_code=status.HTTP_200_OK)
async def get_questions(
        test_id: Optional[str] = None,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    questions = await QuestionService.get_all_questions(db, test_id)
    return [QuestionResponse.model_validate(question) for question in questions]


@router.post("/create", response_model=QuestionResponse, status_code=status.HTTP_201_CREATED)
async def create_question(
        question_data: CreateQuestion,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """
    Добавление вопроса в тест (преподаватели и администраторы).

    Raises:
        HTTPException: 401 - Действие запрещено
        HTTPException: 404 - Тест не найден
    """
    question = await QuestionService.create_question(question_data, db, current_user)
    return QuestionResponse.model_validate(question)


@router.get("/{question_id}", response_model=QuestionResponse, status_code=status.HTTP_200_OK)
async def get_question(
        question_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    question = await QuestionService.get_question(question_id, db)
    return QuestionResponse.model_validate(question)


@router.patch("/update/{question_id}", response_model=QuestionResponse, status_code=status.HTTP_200_OK)
async def update_question(
        question_id: str,
        question_data: UpdateQuestion,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    question = await QuestionService.update_question(question_id, question_data, db, current_user)
    return QuestionResponse.model_validate(question)


@router.delete("/delete/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question(
        question_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    await QuestionService.delete_question(question_id, db, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
