from typing import List

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models import Student, Group
from app.core.logger import logger
from app.services.auth import AuthService
from app.services.image import ImageService
from app.utils.roles import Role, is_admin, is_staff, is_super_admin, is_user_self
from app.utils.security import hash_password
from app.api.v1.schemas.student import CreateStudent, UpdateStudent, UpdateStudentGroup


class StudentService:
    @staticmethod
    async def get_one(student_id: str, db: AsyncSession) -> Student:
        """
        Получение студента по ID вместе с группой и изображением.

        Args:
            student_id: Идентификатор студента
            db: Асинхронная сессия SQLAlchemy

        Returns:
            Student: Найденный студент

        Raises:
            HTTPException: 404 - Студент не найден
        """
        result = await db.execute(
            select(Student)
            .options(selectinload(Student.group), selectinload(Student.image))
            .where(Student.id == student_id)
            .execution_options(populate_existing=True)
        )
        student = result.scalars().first()

        if not student:
            logger.warning(f"[ПОЛУЧЕНИЕ СТУДЕНТА] Студент не найден: ID {student_id}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Student not found"
            )

        return student

    @staticmethod
    async def _check_group_exists(group_id: str, db: AsyncSession) -> Group:
        """Вспомогательный метод для проверки наличия группы."""
        group = await db.get(Group, group_id)

        if not group:
            logger.warning(f"[ПРОВЕРКА ГРУППЫ] Группа не найдена: ID {group_id}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Group not found"
            )

        return group

    @staticmethod
    async def create_student(
            student_data: CreateStudent,
            images: List[UploadFile],
            db: AsyncSession,
            current_user: dict
    ) -> Student:
        """
        Создание студента супер-администратором.

        Args:
            student_data: Данные нового студента
            images: Загруженные изображения профиля (используется первое)
            db: Асинхронная сессия SQLAlchemy
            current_user: Данные из токена

        Returns:
            Student: Созданный студент

        Raises:
            HTTPException: 400 - Логин уже занят или неверное изображение
            HTTPException: 401 - Действие запрещено
            HTTPException: 404 - Группа не найдена
            HTTPException: 500 - Ошибка базы данных
        """
        is_super_admin(current_user)

        try:
            await StudentService._check_group_exists(student_data.group_id, db)
            await AuthService.ensure_login_free(Student, student_data.login, db)

            data = student_data.model_dump(exclude={"password"})
            student = Student(**data, hashed_password=hash_password(student_data.password))
            db.add(student)
            await db.flush()

            await ImageService.attach(student, images, db)
            await db.commit()

            logger.info(f"[СОЗДАНИЕ СТУДЕНТА] Создан студент ID {student.id}, логин: {student.login}")
            return await StudentService.get_one(student.id, db)

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[СОЗДАНИЕ СТУДЕНТА] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while creating student"
            ) from e

    @staticmethod
    async def get_all_students(db: AsyncSession, current_user: dict) -> List[Student]:
        """
        Получение списка всех студентов (только администраторы).

        Raises:
            HTTPException: 401 - Действие запрещено
            HTTPException: 500 - Ошибка базы данных
        """
        is_admin(current_user)

        try:
            result = await db.execute(
                select(Student).options(selectinload(Student.group), selectinload(Student.image))
            )
            students = result.scalars().all()

            logger.info(f"[ПОЛУЧЕНИЕ СТУДЕНТОВ] Получено {len(students)} студентов")
            return students

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ СТУДЕНТОВ] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching students"
            ) from e

    @staticmethod
    async def get_student(student_id: str, db: AsyncSession, current_user: dict) -> Student:
        """Получение студента: сам студент или супер-администратор."""
        is_user_self(current_user, student_id, Role.STUDENT)

        try:
            student = await StudentService.get_one(student_id, db)
            logger.info(f"[ПОЛУЧЕНИЕ СТУДЕНТА] Найден студент: ID {student_id}")
            return student

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ СТУДЕНТА] Ошибка базы данных для ID {student_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching student"
            ) from e

    @staticmethod
    async def get_students_by_group_id(group_id: str, db: AsyncSession, current_user: dict) -> List[Student]:
        """
        Получение студентов группы (преподаватели и администраторы).

        Raises:
            HTTPException: 401 - Действие запрещено
            HTTPException: 404 - Группа не найдена
            HTTPException: 500 - Ошибка базы данных
        """
        is_staff(current_user)

        try:
            await StudentService._check_group_exists(group_id, db)

            result = await db.execute(
                select(Student)
                .options(selectinload(Student.group), selectinload(Student.image))
                .where(Student.group_id == group_id)
            )
            students = result.scalars().all()

            logger.info(f"[ПОЛУЧЕНИЕ СТУДЕНТОВ] Получено {len(students)} студентов для группы ID {group_id}")
            return students

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ СТУДЕНТОВ] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching students"
            ) from e

    @staticmethod
    async def update_student(
            student_id: str,
            student_data: UpdateStudent,
            images: List[UploadFile],
            db: AsyncSession,
            current_user: dict
    ) -> Student:
        """
        Обновление информации о студенте.

        Новый логин проверяется на уникальность, новый пароль хэшируется,
        новое изображение заменяет предыдущее (старое удаляется).

        Args:
            student_id: Идентификатор студента
            student_data: Новые данные студента
            images: Загруженные изображения профиля
            db: Асинхронная сессия SQLAlchemy
            current_user: Данные из токена

        Returns:
            Student: Обновленный студент

        Raises:
            HTTPException: 400 - Логин уже занят
            HTTPException: 401 - Действие запрещено
            HTTPException: 404 - Студент не найден
            HTTPException: 500 - Ошибка базы данных
        """
        is_user_self(current_user, student_id, Role.STUDENT)

        try:
            student = await StudentService.get_one(student_id, db)
            update_data = student_data.model_dump(exclude_none=True)

            if "login" in update_data:
                await AuthService.ensure_login_free(Student, update_data["login"], db, exclude_id=student.id)

            if "password" in update_data:
                student.hashed_password = hash_password(update_data.pop("password"))

            for field, value in update_data.items():
                setattr(student, field, value)

            await ImageService.attach(student, images, db)
            await db.commit()

            logger.info(f"[ОБНОВЛЕНИЕ СТУДЕНТА] Студент обновлен: ID {student_id}")
            return await StudentService.get_one(student_id, db)

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[ОБНОВЛЕНИЕ СТУДЕНТА] Ошибка базы данных для ID {student_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while updating student"
            ) from e

    @staticmethod
    async def update_student_group(
            student_id: str,
            group_data: UpdateStudentGroup,
            db: AsyncSession,
            current_user: dict
    ) -> Student:
        """Перевод студента в другую группу (только супер-администратор)."""
        is_super_admin(current_user)

        try:
            student = await StudentService.get_one(student_id, db)
            await StudentService._check_group_exists(group_data.group_id, db)

            student.group_id = group_data.group_id
            await db.commit()

            logger.info(f"[ПЕРЕВОД СТУДЕНТА] Студент ID {student_id} переведён в группу ID {group_data.group_id}")
            return await StudentService.get_one(student_id, db)

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[ПЕРЕВОД СТУДЕНТА] Ошибка базы данных для ID {student_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while changing student group"
            ) from e

    @staticmethod
    async def delete_student(student_id: str, db: AsyncSession, current_user: dict) -> Student:
        """
        Удаление студента вместе с изображением профиля.

        Args:
            student_id: Идентификатор студента
            db: Асинхронная сессия SQLAlchemy
            current_user: Данные из токена

        Returns:
            Student: Удалённый студент

        Raises:
            HTTPException: 401 - Действие запрещено
            HTTPException: 404 - Студент не найден
            HTTPException: 500 - Ошибка базы данных
        """
        is_super_admin(current_user)

        try:
            student = await StudentService.get_one(student_id, db)
            image_id = student.image_id

            await db.delete(student)
            await db.flush()

            if image_id:
                await ImageService.remove(image_id, db)

            await db.commit()

            logger.info(f"[УДАЛЕНИЕ СТУДЕНТА] Студент удален: ID {student_id}")
            return student

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[УДАЛЕНИЕ СТУДЕНТА] Ошибка базы данных для ID {student_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while deleting student"
            ) from e
