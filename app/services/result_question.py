from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models import ResultQuestion
from app.core.logger import logger
from app.utils.roles import is_staff, is_staff_or_owner


class ResultQuestionService:
    @staticmethod
    async def get_all_result_questions(
            db: AsyncSession,
            current_user: dict,
            result_id: Optional[str] = None
    ) -> List[ResultQuestion]:
        is_staff(current_user)

        try:
            stmt = select(ResultQuestion)
            if result_id is not None:
                stmt = stmt.where(ResultQuestion.result_id == result_id)

            query = await db.execute(stmt)
            result_questions = query.scalars().all()

            logger.info(f"[ВОПРОСЫ РЕЗУЛЬТАТА] Получено {len(result_questions)} записей")
            return result_questions

        except SQLAlchemyError as e:
            logger.error(f"[ВОПРОСЫ РЕЗУЛЬТАТА] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching result questions"
            ) from e

    @staticmethod
    async def get_result_question(result_question_id: str, db: AsyncSession, current_user: dict) -> ResultQuestion:
        """
        Получение ответа студента на вопрос теста.

        Raises:
            HTTPException: 401 - Действие запрещено
            HTTPException: 404 - Запись не найдена
            HTTPException: 500 - Ошибка базы данных
        """
        try:
            query = await db.execute(
                select(ResultQuestion)
                .options(selectinload(ResultQuestion.result))
                .where(ResultQuestion.id == result_question_id)
            )
            result_question = query.scalars().first()

            if not result_question:
                logger.warning(f"[ВОПРОСЫ РЕЗУЛЬТАТА] Запись не найдена: ID {result_question_id}")
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Result question not found"
                )

            is_staff_or_owner(current_user, result_question.result.student_id)
            return result_question

        except SQLAlchemyError as e:
            logger.error(f"[ВОПРОСЫ РЕЗУЛЬТАТА] Ошибка базы данных для ID {result_question_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching result question"
            ) from e
