from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models import ResultAnswer, ResultQuestion
from app.core.logger import logger
from app.utils.roles import is_staff, is_staff_or_owner


class ResultAnswerService:
    @staticmethod
    async def get_all_result_answers(
            db: AsyncSession,
            current_user: dict,
            result_question_id: Optional[str] = None
    ) -> List[ResultAnswer]:
        is_staff(current_user)

        try:
            stmt = select(ResultAnswer)
            if result_question_id is not None:
                stmt = stmt.where(ResultAnswer.result_question_id == result_question_id)

            query = await db.execute(stmt)
            result_answers = query.scalars().all()

            logger.info(f"[ОТВЕТЫ РЕЗУЛЬТАТА] Получено {len(result_answers)} записей")
            return result_answers

        except SQLAlchemyError as e:
            logger.error(f"[ОТВЕТЫ РЕЗУЛЬТАТА] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching result answers"
            ) from e

    @staticmethod
    async def get_result_answer(result_answer_id: str, db: AsyncSession, current_user: dict) -> ResultAnswer:
        try:
            query = await db.execute(
                select(ResultAnswer)
                .options(selectinload(ResultAnswer.result_question).selectinload(ResultQuestion.result))
                .where(ResultAnswer.id == result_answer_id)
            )
            result_answer = query.scalars().first()

            if not result_answer:
                logger.warning(f"[ОТВЕТЫ РЕЗУЛЬТАТА] Запись не найдена: ID {result_answer_id}")
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Result answer not found"
                )

            is_staff_or_owner(current_user, result_answer.result_question.result.student_id)
            return result_answer

        except SQLAlchemyError as e:
            logger.error(f"[ОТВЕТЫ РЕЗУЛЬТАТА] Ошибка базы данных для ID {result_answer_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching result answer"
            ) from e
