from typing import Dict, List, Optional, Set

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models import Result, ResultQuestion, ResultAnswer, Student, Test, Question
from app.core.logger import logger
from app.utils.roles import Role, is_admin, is_staff, is_staff_or_owner, is_student
from app.api.v1.schemas.result import SubmitResult


def _bad_submission(detail: str) -> HTTPException:
    logger.warning(f"[ОТПРАВКА РЕЗУЛЬТАТА] {detail}")
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def grade_question(chosen_ids: Set[str], question: Question) -> bool:
    """Вопрос засчитан, если выбраны ровно все верные варианты."""
    true_ids = {answer.id for answer in question.answers if answer.is_true}
    return bool(true_ids) and chosen_ids == true_ids


class ResultService:
    @staticmethod
    async def get_one(result_id: str, db: AsyncSession) -> Result:
        result = await db.get(Result, result_id)

        if not result:
            logger.warning(f"[ПОЛУЧЕНИЕ РЕЗУЛЬТАТА] Результат не найден: ID {result_id}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Result not found"
            )

        return result

    @staticmethod
    async def submit_result(submit_data: SubmitResult, db: AsyncSession, current_user: dict) -> Result:
        """
        Сдача теста студентом и подсчёт результата.

        Каждый вопрос должен принадлежать тесту, каждый выбранный ответ - своему вопросу.
        Для каждого вопроса сохраняется ResultQuestion, для каждого выбранного ответа - ResultAnswer.

        Args:
            submit_data: Идентификатор теста и выбранные ответы
            db: Асинхронная сессия SQLAlchemy
            current_user: Данные из токена

        Returns:
            Result: Сохранённый результат

        Raises:
            HTTPException: 400 - Вопрос или ответ не относится к тесту, вопрос указан дважды
            HTTPException: 401 - Действие запрещено
            HTTPException: 404 - Студент или тест не найден
            HTTPException: 500 - Ошибка базы данных
        """
        is_student(current_user)

        try:
            student = await db.get(Student, current_user["id"])
            if not student:
                logger.warning(f"[ОТПРАВКА РЕЗУЛЬТАТА] Студент не найден: ID {current_user['id']}")
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Student not found"
                )

            query = await db.execute(
                select(Test)
                .options(selectinload(Test.questions).selectinload(Question.answers))
                .where(Test.id == submit_data.test_id)
            )
            test = query.scalars().first()
            if not test:
                logger.warning(f"[ОТПРАВКА РЕЗУЛЬТАТА] Тест не найден: ID {submit_data.test_id}")
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Test not found"
                )

            questions: Dict[str, Question] = {question.id: question for question in test.questions}
            graded = []
            for item in submit_data.answers:
                question = questions.get(item.question_id)
                if question is None:
                    raise _bad_submission(f"Question {item.question_id} does not belong to test")
                if any(item.question_id == seen.id for seen, _, _ in graded):
                    raise _bad_submission(f"Question {item.question_id} answered twice")

                chosen_ids = set(item.answer_ids)
                if not chosen_ids <= {answer.id for answer in question.answers}:
                    raise _bad_submission(f"Answer does not belong to question {item.question_id}")

                graded.append((question, chosen_ids, grade_question(chosen_ids, question)))

            result = Result(
                student_id=student.id,
                test_id=test.id,
                correct_answers=sum(1 for _, _, is_correct in graded if is_correct),
                total_questions=len(questions)
            )
            db.add(result)
            await db.flush()

            for question, chosen_ids, is_correct in graded:
                result_question = ResultQuestion(result_id=result.id, question_id=question.id, is_correct=is_correct)
                db.add(result_question)
                await db.flush()

                for answer_id in sorted(chosen_ids):
                    db.add(ResultAnswer(result_question_id=result_question.id, answer_id=answer_id))

            await db.commit()

            logger.info(
                f"[ОТПРАВКА РЕЗУЛЬТАТА] Студент ID {student.id} сдал тест ID {test.id}: "
                f"{result.correct_answers}/{result.total_questions}"
            )
            return result

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[ОТПРАВКА РЕЗУЛЬТАТА] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while saving result"
            ) from e

    @staticmethod
    async def get_all_results(
            db: AsyncSession,
            current_user: dict,
            student_id: Optional[str] = None,
            test_id: Optional[str] = None
    ) -> List[Result]:
        """
        Получение списка результатов.

        Студент видит только свои результаты, остальные фильтры применяются как есть.
        """
        if current_user.get("role") == Role.STUDENT:
            student_id = current_user.get("id")
        else:
            is_staff(current_user)

        try:
            stmt = select(Result).order_by(Result.created_at)
            if student_id is not None:
                stmt = stmt.where(Result.student_id == student_id)
            if test_id is not None:
                stmt = stmt.where(Result.test_id == test_id)

            query = await db.execute(stmt)
            results = query.scalars().all()

            logger.info(f"[ПОЛУЧЕНИЕ РЕЗУЛЬТАТОВ] Получено {len(results)} результатов")
            return results

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ РЕЗУЛЬТАТОВ] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching results"
            ) from e

    @staticmethod
    async def get_result(result_id: str, db: AsyncSession, current_user: dict) -> Result:
        try:
            result = await ResultService.get_one(result_id, db)
            is_staff_or_owner(current_user, result.student_id)
            return result

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ РЕЗУЛЬТАТА] Ошибка базы данных для ID {result_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching result"
            ) from e

    @staticmethod
    async def delete_result(result_id: str, db: AsyncSession, current_user: dict) -> Result:
        is_admin(current_user)

        try:
            result = await ResultService.get_one(result_id, db)

            await db.delete(result)
            await db.commit()

            logger.info(f"[УДАЛЕНИЕ РЕЗУЛЬТАТА] Результат удален: ID {result_id}")
            return result

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[УДАЛЕНИЕ РЕЗУЛЬТАТА] Ошибка базы данных для ID {result_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while deleting result"
            ) from e
