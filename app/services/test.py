from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models import Test, Question
from app.core.logger import logger
from app.services.subject import SubjectService
from app.utils.roles import Role, is_staff
from app.api.v1.schemas.test import CreateExamTest, UpdateExamTest, ExamTestFullResponse


class TestService:
    @staticmethod
    async def get_one(test_id: str, db: AsyncSession) -> Test:
        result = await db.execute(
            select(Test)
            .options(selectinload(Test.subject))
            .where(Test.id == test_id)
            .execution_options(populate_existing=True)
        )
        test = result.scalars().first()

        if not test:
            logger.warning(f"[ПОЛУЧЕНИЕ ТЕСТА] Тест не найден: ID {test_id}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Test not found"
            )

        return test

    @staticmethod
    async def create_test(test_data: CreateExamTest, db: AsyncSession, current_user: dict) -> Test:
        """
        Создание теста по предмету.

        Args:
            test_data: Данные для создания теста
            db: Асинхронная сессия SQLAlchemy
            current_user: Данные из токена

        Returns:
            Test: Созданный тест

        Raises:
            HTTPException: 401 - Действие запрещено
            HTTPException: 404 - Предмет не найден
            HTTPException: 500 - Ошибка базы данных
        """
        is_staff(current_user)

        try:
            await SubjectService.get_one(test_data.subject_id, db)

            test = Test(**test_data.model_dump())
            db.add(test)
            await db.commit()

            logger.info(f"[СОЗДАНИЕ ТЕСТА] Создан тест ID {test.id}, название: {test.title}")
            return await TestService.get_one(test.id, db)

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[СОЗДАНИЕ ТЕСТА] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while creating test"
            ) from e

    @staticmethod
    async def get_all_tests(db: AsyncSession, subject_id: Optional[str] = None) -> List[Test]:
        try:
            stmt = select(Test).options(selectinload(Test.subject))
            if subject_id is not None:
                stmt = stmt.where(Test.subject_id == subject_id)

            result = await db.execute(stmt)
            tests = result.scalars().all()

            logger.info(f"[ПОЛУЧЕНИЕ ТЕСТОВ] Получено {len(tests)} тестов")
            return tests

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ ТЕСТОВ] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching tests"
            ) from e

    @staticmethod
    async def get_test(test_id: str, db: AsyncSession) -> Test:
        try:
            return await TestService.get_one(test_id, db)

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ ТЕСТА] Ошибка базы данных для ID {test_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching test"
            ) from e

    @staticmethod
    async def get_full_test(test_id: str, db: AsyncSession, current_user: dict) -> ExamTestFullResponse:
        """
        Получение теста вместе с вопросами и вариантами ответов.

        Студенты не видят, какие варианты ответов верные.

        Raises:
            HTTPException: 404 - Тест не найден
            HTTPException: 500 - Ошибка базы данных
        """
        try:
            result = await db.execute(
                select(Test)
                .options(
                    selectinload(Test.subject),
                    selectinload(Test.questions).selectinload(Question.answers)
                )
                .where(Test.id == test_id)
                .execution_options(populate_existing=True)
            )
            test = result.scalars().first()

            if not test:
                logger.warning(f"[ПОЛУЧЕНИЕ ТЕСТА] Тест не найден: ID {test_id}")
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Test not found"
                )

            response = ExamTestFullResponse.model_validate(test)
            if current_user.get("role") == Role.STUDENT:
                for question in response.questions:
                    for answer in question.answers:
                        answer.is_true = None

            logger.info(f"[ПОЛУЧЕНИЕ ТЕСТА] Тест ID {test_id} получен с {len(response.questions)} вопросами")
            return response

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ ТЕСТА] Ошибка базы данных для ID {test_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching test"
            ) from e

    @staticmethod
    async def update_test(test_id: str, test_data: UpdateExamTest, db: AsyncSession, current_user: dict) -> Test:
        is_staff(current_user)

        try:
            test = await TestService.get_one(test_id, db)
            update_data = test_data.model_dump(exclude_none=True)

            if "subject_id" in update_data:
                await SubjectService.get_one(update_data["subject_id"], db)

            for field, value in update_data.items():
                setattr(test, field, value)

            await db.commit()

            logger.info(f"[ОБНОВЛЕНИЕ ТЕСТА] Тест обновлен: ID {test_id}")
            return await TestService.get_one(test_id, db)

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[ОБНОВЛЕНИЕ ТЕСТА] Ошибка базы данных для ID {test_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while updating test"
            ) from e

    @staticmethod
    async def delete_test(test_id: str, db: AsyncSession, current_user: dict) -> Test:
        """Удаление теста вместе с вопросами, ответами и результатами."""
        is_staff(current_user)

        try:
            test = await TestService.get_one(test_id, db)

            await db.delete(test)
            await db.commit()

            logger.info(f"[УДАЛЕНИЕ ТЕСТА] Тест удален: ID {test_id}")
            return test

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[УДАЛЕНИЕ ТЕСТА] Ошибка базы данных для ID {test_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while deleting test"
            ) from e
