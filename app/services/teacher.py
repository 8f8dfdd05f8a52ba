from typing import List

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models import Teacher, Subject
from app.core.logger import logger
from app.services.auth import AuthService
from app.services.image import ImageService
from app.utils.roles import Role, is_admin, is_super_admin, is_user_self
from app.utils.security import hash_password
from app.api.v1.schemas.teacher import CreateTeacher, UpdateTeacher


class TeacherService:
    @staticmethod
    async def get_one(teacher_id: str, db: AsyncSession) -> Teacher:
        result = await db.execute(
            select(Teacher)
            .options(selectinload(Teacher.image))
            .where(Teacher.id == teacher_id)
            .execution_options(populate_existing=True)
        )
        teacher = result.scalars().first()

        if not teacher:
            logger.warning(f"[ПОЛУЧЕНИЕ ПРЕПОДАВАТЕЛЯ] Преподаватель не найден: ID {teacher_id}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Teacher not found"
            )

        return teacher

    @staticmethod
    async def create_teacher(
            teacher_data: CreateTeacher,
            images: List[UploadFile],
            db: AsyncSession,
            current_user: dict
    ) -> Teacher:
        """
        Создание преподавателя супер-администратором.

        Args:
            teacher_data: Данные нового преподавателя
            images: Загруженные изображения профиля (используется первое)
            db: Асинхронная сессия SQLAlchemy
            current_user: Данные из токена

        Returns:
            Teacher: Созданный преподаватель

        Raises:
            HTTPException: 400 - Логин уже занят или неверное изображение
            HTTPException: 401 - Действие запрещено
            HTTPException: 500 - Ошибка базы данных
        """
        is_super_admin(current_user)

        try:
            await AuthService.ensure_login_free(Teacher, teacher_data.login, db)

            data = teacher_data.model_dump(exclude={"password"})
            teacher = Teacher(**data, hashed_password=hash_password(teacher_data.password))
            db.add(teacher)
            await db.flush()

            await ImageService.attach(teacher, images, db)
            await db.commit()

            logger.info(f"[СОЗДАНИЕ ПРЕПОДАВАТЕЛЯ] Создан преподаватель ID {teacher.id}, логин: {teacher.login}")
            return await TeacherService.get_one(teacher.id, db)

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[СОЗДАНИЕ ПРЕПОДАВАТЕЛЯ] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while creating teacher"
            ) from e

    @staticmethod
    async def get_all_teachers(db: AsyncSession, current_user: dict) -> List[Teacher]:
        is_admin(current_user)

        try:
            result = await db.execute(select(Teacher).options(selectinload(Teacher.image)))
            teachers = result.scalars().all()

            logger.info(f"[ПОЛУЧЕНИЕ ПРЕПОДАВАТЕЛЕЙ] Получено {len(teachers)} преподавателей")
            return teachers

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ ПРЕПОДАВАТЕЛЕЙ] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching teachers"
            ) from e

    @staticmethod
    async def get_teacher(teacher_id: str, db: AsyncSession, current_user: dict) -> Teacher:
        is_user_self(current_user, teacher_id, Role.TEACHER)

        try:
            teacher = await TeacherService.get_one(teacher_id, db)
            logger.info(f"[ПОЛУЧЕНИЕ ПРЕПОДАВАТЕЛЯ] Найден преподаватель: ID {teacher_id}")
            return teacher

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ ПРЕПОДАВАТЕЛЯ] Ошибка базы данных для ID {teacher_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching teacher"
            ) from e

    @staticmethod
    async def get_teacher_subjects(teacher_id: str, db: AsyncSession) -> List[Subject]:
        """
        Получение предметов, которые ведёт преподаватель.

        Raises:
            HTTPException: 404 - Преподаватель не найден
            HTTPException: 500 - Ошибка базы данных
        """
        try:
            result = await db.execute(
                select(Teacher)
                .options(selectinload(Teacher.subjects))
                .where(Teacher.id == teacher_id)
                .execution_options(populate_existing=True)
            )
            teacher = result.scalars().first()

            if not teacher:
                logger.warning(f"[ПРЕДМЕТЫ ПРЕПОДАВАТЕЛЯ] Преподаватель не найден: ID {teacher_id}")
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Teacher not found"
                )

            logger.info(f"[ПРЕДМЕТЫ ПРЕПОДАВАТЕЛЯ] Получено {len(teacher.subjects)} предметов для ID {teacher_id}")
            return teacher.subjects

        except SQLAlchemyError as e:
            logger.error(f"[ПРЕДМЕТЫ ПРЕПОДАВАТЕЛЯ] Ошибка базы данных для ID {teacher_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching teacher subjects"
            ) from e

    @staticmethod
    async def update_teacher(
            teacher_id: str,
            teacher_data: UpdateTeacher,
            images: List[UploadFile],
            db: AsyncSession,
            current_user: dict
    ) -> Teacher:
        """
        Обновление информации о преподавателе.

        Args:
            teacher_id: Идентификатор преподавателя
            teacher_data: Новые данные преподавателя
            images: Загруженные изображения профиля
            db: Асинхронная сессия SQLAlchemy
            current_user: Данные из токена

        Returns:
            Teacher: Обновленный преподаватель

        Raises:
            HTTPException: 400 - Логин уже занят
            HTTPException: 401 - Действие запрещено
            HTTPException: 404 - Преподаватель не найден
            HTTPException: 500 - Ошибка базы данных
        """
        is_user_self(current_user, teacher_id, Role.TEACHER)

        try:
            teacher = await TeacherService.get_one(teacher_id, db)
            update_data = teacher_data.model_dump(exclude_none=True)

            if "login" in update_data:
                await AuthService.ensure_login_free(Teacher, update_data["login"], db, exclude_id=teacher.id)

            if "password" in update_data:
                teacher.hashed_password = hash_password(update_data.pop("password"))

            for field, value in update_data.items():
                setattr(teacher, field, value)

            await ImageService.attach(teacher, images, db)
            await db.commit()

            logger.info(f"[ОБНОВЛЕНИЕ ПРЕПОДАВАТЕЛЯ] Преподаватель обновлен: ID {teacher_id}")
            return await TeacherService.get_one(teacher_id, db)

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[ОБНОВЛЕНИЕ ПРЕПОДАВАТЕЛЯ] Ошибка базы данных для ID {teacher_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while updating teacher"
            ) from e

    @staticmethod
    async def delete_teacher(teacher_id: str, db: AsyncSession, current_user: dict) -> Teacher:
        is_super_admin(current_user)

        try:
            teacher = await TeacherService.get_one(teacher_id, db)
            image_id = teacher.image_id

            await db.delete(teacher)
            await db.flush()

            if image_id:
                await ImageService.remove(image_id, db)

            await db.commit()

            logger.info(f"[УДАЛЕНИЕ ПРЕПОДАВАТЕЛЯ] Преподаватель удален: ID {teacher_id}")
            return teacher

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[УДАЛЕНИЕ ПРЕПОДАВАТЕЛЯ] Ошибка базы данных для ID {teacher_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while deleting teacher"
            ) from e
