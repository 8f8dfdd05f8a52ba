from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models import TeacherSubject, Teacher
from app.core.logger import logger
from app.services.subject import SubjectService
from app.utils.roles import is_admin
from app.api.v1.schemas.teacher_subject import CreateTeacherSubject


class TeacherSubjectService:
    @staticmethod
    async def get_one(link_id: str, db: AsyncSession) -> TeacherSubject:
        result = await db.execute(
            select(TeacherSubject)
            .options(selectinload(TeacherSubject.subject))
            .where(TeacherSubject.id == link_id)
        )
        link = result.scalars().first()

        if not link:
            logger.warning(f"[ПРЕПОДАВАТЕЛЬ-ПРЕДМЕТ] Связь не найдена: ID {link_id}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Teacher subject not found"
            )

        return link

    @staticmethod
    async def create_teacher_subject(
            link_data: CreateTeacherSubject,
            db: AsyncSession,
            current_user: dict
    ) -> TeacherSubject:
        """
        Назначение предмета преподавателю.

        Args:
            link_data: Идентификаторы преподавателя и предмета
            db: Асинхронная сессия SQLAlchemy
            current_user: Данные из токена

        Returns:
            TeacherSubject: Созданная связь

        Raises:
            HTTPException: 400 - Предмет уже назначен преподавателю
            HTTPException: 401 - Действие запрещено
            HTTPException: 404 - Преподаватель или предмет не найден
            HTTPException: 500 - Ошибка базы данных
        """
        is_admin(current_user)

        try:
            if not await db.get(Teacher, link_data.teacher_id):
                logger.warning(f"[ПРЕПОДАВАТЕЛЬ-ПРЕДМЕТ] Преподаватель не найден: ID {link_data.teacher_id}")
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Teacher not found"
                )
            await SubjectService.get_one(link_data.subject_id, db)

            existing = await db.execute(
                select(TeacherSubject).where(
                    TeacherSubject.teacher_id == link_data.teacher_id,
                    TeacherSubject.subject_id == link_data.subject_id
                )
            )
            if existing.scalars().first():
                logger.warning(
                    f"[ПРЕПОДАВАТЕЛЬ-ПРЕДМЕТ] Предмет {link_data.subject_id} уже назначен "
                    f"преподавателю {link_data.teacher_id}"
                )
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Subject already assigned to teacher"
                )

            link = TeacherSubject(**link_data.model_dump())
            db.add(link)
            await db.commit()

            logger.info(f"[ПРЕПОДАВАТЕЛЬ-ПРЕДМЕТ] Создана связь ID {link.id}")
            return await TeacherSubjectService.get_one(link.id, db)

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[ПРЕПОДАВАТЕЛЬ-ПРЕДМЕТ] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while assigning subject"
            ) from e

    @staticmethod
    async def get_all_teacher_subjects(db: AsyncSession, teacher_id: Optional[str] = None) -> List[TeacherSubject]:
        try:
            stmt = select(TeacherSubject).options(selectinload(TeacherSubject.subject))
            if teacher_id is not None:
                stmt = stmt.where(TeacherSubject.teacher_id == teacher_id)

            result = await db.execute(stmt)
            links = result.scalars().all()

            logger.info(f"[ПРЕПОДАВАТЕЛЬ-ПРЕДМЕТ] Получено {len(links)} связей")
            return links

        except SQLAlchemyError as e:
            logger.error(f"[ПРЕПОДАВАТЕЛЬ-ПРЕДМЕТ] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching teacher subjects"
            ) from e

    @staticmethod
    async def get_teacher_subject(link_id: str, db: AsyncSession) -> TeacherSubject:
        try:
            return await TeacherSubjectService.get_one(link_id, db)

        except SQLAlchemyError as e:
            logger.error(f"[ПРЕПОДАВАТЕЛЬ-ПРЕДМЕТ] Ошибка базы данных для ID {link_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching teacher subject"
            ) from e

    @staticmethod
    async def delete_teacher_subject(link_id: str, db: AsyncSession, current_user: dict) -> TeacherSubject:
        is_admin(current_user)

        try:
            link = await TeacherSubjectService.get_one(link_id, db)

            await db.delete(link)
            await db.commit()

            logger.info(f"[ПРЕПОДАВАТЕЛЬ-ПРЕДМЕТ] Связь удалена: ID {link_id}")
            return link

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[ПРЕПОДАВАТЕЛЬ-ПРЕДМЕТ] Ошибка базы данных для ID {link_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while deleting teacher subject"
            ) from e
