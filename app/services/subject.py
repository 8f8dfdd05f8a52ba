from typing import List

from fastapi import HTTPException, status
from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Subject
from app.core.logger import logger
from app.utils.roles import is_admin
from app.api.v1.schemas.subject import CreateSubject, UpdateSubject


class SubjectService:
    @staticmethod
    async def get_one(subject_id: str, db: AsyncSession) -> Subject:
        subject = await db.get(Subject, subject_id)

        if not subject:
            logger.warning(f"[ПОЛУЧЕНИЕ ПРЕДМЕТА] Предмет не найден: ID {subject_id}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Subject not found"
            )

        return subject

    @staticmethod
    async def _ensure_title_free(title: str, db: AsyncSession, exclude_id: str = None) -> None:
        result = await db.execute(select(Subject).where(func.lower(Subject.title) == title.lower()))
        existing = result.scalars().first()

        if existing and existing.id != exclude_id:
            logger.warning(f"[ПРЕДМЕТ] Предмет уже существует: {title}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Subject already exists"
            )

    @staticmethod
    async def create_subject(subject_data: CreateSubject, db: AsyncSession, current_user: dict) -> Subject:
        """
        Создание учебного предмета.

        Args:
            subject_data: Данные для создания предмета
            db: Асинхронная сессия SQLAlchemy
            current_user: Данные из токена

        Returns:
            Subject: Созданный предмет

        Raises:
            HTTPException: 400 - Предмет с таким названием уже существует
            HTTPException: 401 - Действие запрещено
            HTTPException: 500 - Ошибка базы данных
        """
        is_admin(current_user)

        try:
            await SubjectService._ensure_title_free(subject_data.title, db)

            subject = Subject(**subject_data.model_dump())
            db.add(subject)
            await db.commit()

            logger.info(f"[СОЗДАНИЕ ПРЕДМЕТА] Создан предмет ID {subject.id}, название: {subject.title}")
            return subject

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[СОЗДАНИЕ ПРЕДМЕТА] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while creating subject"
            ) from e

    @staticmethod
    async def get_all_subjects(db: AsyncSession) -> List[Subject]:
        try:
            result = await db.execute(select(Subject).order_by(Subject.title))
            subjects = result.scalars().all()

            logger.info(f"[ПОЛУЧЕНИЕ ПРЕДМЕТОВ] Получено {len(subjects)} предметов")
            return subjects

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ ПРЕДМЕТОВ] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching subjects"
            ) from e

    @staticmethod
    async def get_subject(subject_id: str, db: AsyncSession) -> Subject:
        try:
            return await SubjectService.get_one(subject_id, db)

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ ПРЕДМЕТА] Ошибка базы данных для ID {subject_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching subject"
            ) from e

    @staticmethod
    async def update_subject(
            subject_id: str,
            subject_data: UpdateSubject,
            db: AsyncSession,
            current_user: dict
    ) -> Subject:
        is_admin(current_user)

        try:
            subject = await SubjectService.get_one(subject_id, db)
            update_data = subject_data.model_dump(exclude_none=True)

            if "title" in update_data:
                await SubjectService._ensure_title_free(update_data["title"], db, exclude_id=subject.id)

            for field, value in update_data.items():
                setattr(subject, field, value)

            await db.commit()

            logger.info(f"[ОБНОВЛЕНИЕ ПРЕДМЕТА] Предмет обновлен: ID {subject_id}")
            return subject

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[ОБНОВЛЕНИЕ ПРЕДМЕТА] Ошибка базы данных для ID {subject_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while updating subject"
            ) from e

    @staticmethod
    async def delete_subject(subject_id: str, db: AsyncSession, current_user: dict) -> Subject:
        """
        Удаление предмета. Тесты предмета и связи с преподавателями удаляются каскадно.

        Raises:
            HTTPException: 401 - Действие запрещено
            HTTPException: 404 - Предмет не найден
            HTTPException: 500 - Ошибка базы данных
        """
        is_admin(current_user)

        try:
            subject = await SubjectService.get_one(subject_id, db)

            await db.delete(subject)
            await db.commit()

            logger.info(f"[УДАЛЕНИЕ ПРЕДМЕТА] Предмет удален: ID {subject_id}")
            return subject

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[УДАЛЕНИЕ ПРЕДМЕТА] Ошибка базы данных для ID {subject_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while deleting subject"
            ) from e
