from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Question, Test
from app.core.logger import logger
from app.utils.roles import is_staff
from app.api.v1.schemas.question import CreateQuestion, UpdateQuestion


class QuestionService:
    @staticmethod
    async def get_one(question_id: str, db: AsyncSession) -> Question:
        question = await db.get(Question, question_id)

        if not question:
            logger.warning(f"[ПОЛУЧЕНИЕ ВОПРОСА] Вопрос не найден: ID {question_id}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Question not found"
            )

        return question

    @staticmethod
    async def create_question(question_data: CreateQuestion, db: AsyncSession, current_user: dict) -> Question:
        """
        Создание вопроса теста.

        Raises:
            HTTPException: 401 - Действие запрещено
            HTTPException: 404 - Тест не найден
            HTTPException: 500 - Ошибка базы данных
        """
        is_staff(current_user)

        try:
            if not await db.get(Test, question_data.test_id):
                logger.warning(f"[СОЗДАНИЕ ВОПРОСА] Тест не найден: ID {question_data.test_id}")
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Test not found"
                )

            question = Question(**question_data.model_dump())
            db.add(question)
            await db.commit()

            logger.info(f"[СОЗДАНИЕ ВОПРОСА] Создан вопрос ID {question.id} для теста ID {question.test_id}")
            return question

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[СОЗДАНИЕ ВОПРОСА] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while creating question"
            ) from e

    @staticmethod
    async def get_all_questions(db: AsyncSession, test_id: Optional[str] = None) -> List[Question]:
        try:
            stmt = select(Question)
            if test_id is not None:
                stmt = stmt.where(Question.test_id == test_id)

            result = await db.execute(stmt)
            questions = result.scalars().all()

            logger.info(f"[ПОЛУЧЕНИЕ ВОПРОСОВ] Получено {len(questions)} вопросов")
            return questions

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ ВОПРОСОВ] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching questions"
            ) from e

    @staticmethod
    async def get_question(question_id: str, db: AsyncSession) -> Question:
        try:
            return await QuestionService.get_one(question_id, db)

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ ВОПРОСА] Ошибка базы данных для ID {question_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching question"
            ) from e

    @staticmethod
    async def update_question(
            question_id: str,
            question_data: UpdateQuestion,
            db: AsyncSession,
            current_user: dict
    ) -> Question:
        is_staff(current_user)

        try:
            question = await QuestionService.get_one(question_id, db)

            for field, value in question_data.model_dump(exclude_none=True).items():
                setattr(question, field, value)

            await db.commit()

            logger.info(f"[ОБНОВЛЕНИЕ ВОПРОСА] Вопрос обновлен: ID {question_id}")
            return question

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[ОБНОВЛЕНИЕ ВОПРОСА] Ошибка базы данных для ID {question_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while updating question"
            ) from e

    @staticmethod
    async def delete_question(question_id: str, db: AsyncSession, current_user: dict) -> Question:
        is_staff(current_user)

        try:
            question = await QuestionService.get_one(question_id, db)

            await db.delete(question)
            await db.commit()

            logger.info(f"[УДАЛЕНИЕ ВОПРОСА] Вопрос удален: ID {question_id}")
            return question

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[УДАЛЕНИЕ ВОПРОСА] Ошибка базы данных для ID {question_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while deleting question"
            ) from e
