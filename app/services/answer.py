from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Answer, Question
from app.core.logger import logger
from app.utils.roles import Role, is_staff
from app.api.v1.schemas.answer import AnswerResponse, CreateAnswer, UpdateAnswer


class AnswerService:
    @staticmethod
    def to_response(answer: Answer, current_user: dict) -> AnswerResponse:
        """Студентам признак верного ответа не отдаётся."""
        response = AnswerResponse.model_validate(answer)
        if current_user.get("role") == Role.STUDENT:
            response.is_true = None
        return response

    @staticmethod
    async def get_one(answer_id: str, db: AsyncSession) -> Answer:
        answer = await db.get(Answer, answer_id)

        if not answer:
            logger.warning(f"[ПОЛУЧЕНИЕ ОТВЕТА] Ответ не найден: ID {answer_id}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Answer not found"
            )

        return answer

    @staticmethod
    async def create_answer(answer_data: CreateAnswer, db: AsyncSession, current_user: dict) -> Answer:
        """
        Создание варианта ответа на вопрос.

        Args:
            answer_data: Данные варианта ответа
            db: Асинхронная сессия SQLAlchemy
            current_user: Данные из токена

        Returns:
            Answer: Созданный вариант ответа

        Raises:
            HTTPException: 401 - Действие запрещено
            HTTPException: 404 - Вопрос не найден
            HTTPException: 500 - Ошибка базы данных
        """
        is_staff(current_user)

        try:
            if not await db.get(Question, answer_data.question_id):
                logger.warning(f"[СОЗДАНИЕ ОТВЕТА] Вопрос не найден: ID {answer_data.question_id}")
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Question not found"
                )

            answer = Answer(**answer_data.model_dump())
            db.add(answer)
            await db.commit()

            logger.info(f"[СОЗДАНИЕ ОТВЕТА] Создан ответ ID {answer.id} для вопроса ID {answer.question_id}")
            return answer

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[СОЗДАНИЕ ОТВЕТА] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while creating answer"
            ) from e

    @staticmethod
    async def get_all_answers(db: AsyncSession, question_id: Optional[str] = None) -> List[Answer]:
        try:
            stmt = select(Answer)
            if question_id is not None:
                stmt = stmt.where(Answer.question_id == question_id)

            result = await db.execute(stmt)
            answers = result.scalars().all()

            logger.info(f"[ПОЛУЧЕНИЕ ОТВЕТОВ] Получено {len(answers)} ответов")
            return answers

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ ОТВЕТОВ] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching answers"
            ) from e

    @staticmethod
    async def get_answer(answer_id: str, db: AsyncSession) -> Answer:
        try:
            return await AnswerService.get_one(answer_id, db)

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ ОТВЕТА] Ошибка базы данных для ID {answer_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching answer"
            ) from e

    @staticmethod
    async def update_answer(answer_id: str, answer_data: UpdateAnswer, db: AsyncSession, current_user: dict) -> Answer:
        is_staff(current_user)

        try:
            answer = await AnswerService.get_one(answer_id, db)

            for field, value in answer_data.model_dump(exclude_none=True).items():
                setattr(answer, field, value)

            await db.commit()

            logger.info(f"[ОБНОВЛЕНИЕ ОТВЕТА] Ответ обновлен: ID {answer_id}")
            return answer

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[ОБНОВЛЕНИЕ ОТВЕТА] Ошибка базы данных для ID {answer_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while updating answer"
            ) from e

    @staticmethod
    async def delete_answer(answer_id: str, db: AsyncSession, current_user: dict) -> Answer:
        is_staff(current_user)

        try:
            answer = await AnswerService.get_one(answer_id, db)

            await db.delete(answer)
            await db.commit()

            logger.info(f"[УДАЛЕНИЕ ОТВЕТА] Ответ удален: ID {answer_id}")
            return answer

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[УДАЛЕНИЕ ОТВЕТА] Ошибка базы данных для ID {answer_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while deleting answer"
            ) from e
