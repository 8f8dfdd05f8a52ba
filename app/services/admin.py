from typing import List

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.core.logger import logger
from app.models import Admin
from app.services.auth import AuthService
from app.services.image import ImageService
from app.services.role import RoleService
from app.utils.roles import ADMIN_ROLES, Role, is_admin, is_super_admin, is_user_self
from app.utils.security import hash_password
from app.api.v1.schemas.admin import CreateAdmin, RegisterAdmin, UpdateAdmin


def _check_admin_role(role: str) -> Role:
    if role not in [r.value for r in ADMIN_ROLES]:
        logger.warning(f"[АДМИНИСТРАТОР] Недопустимая роль администратора: {role}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Admin role must be 'admin' or 'super-admin'"
        )
    return Role(role)


class AdminService:
    @staticmethod
    async def get_one(admin_id: str, db: AsyncSession) -> Admin:
        result = await db.execute(
            select(Admin)
            .options(selectinload(Admin.role), selectinload(Admin.image))
            .where(Admin.id == admin_id)
            .execution_options(populate_existing=True)
        )
        admin = result.scalars().first()

        if not admin:
            logger.warning(f"[ПОЛУЧЕНИЕ АДМИНИСТРАТОРА] Администратор не найден: ID {admin_id}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Admin not found"
            )

        return admin

    @staticmethod
    async def register_super_admin(admin_data: RegisterAdmin, db: AsyncSession) -> Admin:
        """
        Регистрация супер-администратора по секретному ключу ADMIN_KEY.

        Args:
            admin_data: Данные регистрации, включая секретный ключ
            db: Асинхронная сессия SQLAlchemy

        Returns:
            Admin: Зарегистрированный супер-администратор

        Raises:
            HTTPException: 400 - Логин уже занят
            HTTPException: 401 - Неверный секретный ключ
            HTTPException: 500 - Ошибка базы данных
        """
        if admin_data.secret_key != settings.ADMIN_KEY:
            logger.warning(f"[РЕГИСТРАЦИЯ] Неверный секретный ключ для {admin_data.login}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid secret key"
            )

        try:
            await AuthService.ensure_login_free(Admin, admin_data.login, db)
            role = await RoleService.get_by_name(Role.SUPER_ADMIN.value, db)

            admin = Admin(
                full_name=admin_data.full_name,
                login=admin_data.login,
                hashed_password=hash_password(admin_data.password),
                role_id=role.id
            )
            db.add(admin)
            await db.commit()

            logger.info(f"[РЕГИСТРАЦИЯ] Супер-администратор {admin.login} успешно зарегистрирован")
            return await AdminService.get_one(admin.id, db)

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[РЕГИСТРАЦИЯ] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while registering admin"
            ) from e

    @staticmethod
    async def create_admin(
            admin_data: CreateAdmin,
            images: List[UploadFile],
            db: AsyncSession,
            current_user: dict
    ) -> Admin:
        """
        Создание администратора супер-администратором.

        Raises:
            HTTPException: 400 - Логин уже занят, недопустимая роль или неверное изображение
            HTTPException: 401 - Действие запрещено
            HTTPException: 500 - Ошибка базы данных
        """
        is_super_admin(current_user)
        role_name = _check_admin_role(admin_data.role)

        try:
            await AuthService.ensure_login_free(Admin, admin_data.login, db)
            role = await RoleService.get_by_name(role_name.value, db)

            data = admin_data.model_dump(exclude={"password", "role"})
            admin = Admin(**data, hashed_password=hash_password(admin_data.password), role_id=role.id)
            db.add(admin)
            await db.flush()

            await ImageService.attach(admin, images, db)
            await db.commit()

            logger.info(f"[СОЗДАНИЕ АДМИНИСТРАТОРА] Создан администратор ID {admin.id}, логин: {admin.login}")
            return await AdminService.get_one(admin.id, db)

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[СОЗДАНИЕ АДМИНИСТРАТОРА] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while creating admin"
            ) from e

    @staticmethod
    async def get_all_admins(db: AsyncSession, current_user: dict) -> List[Admin]:
        is_admin(current_user)

        try:
            result = await db.execute(
                select(Admin).options(selectinload(Admin.role), selectinload(Admin.image))
            )
            admins = result.scalars().all()

            logger.info(f"[ПОЛУЧЕНИЕ АДМИНИСТРАТОРОВ] Получено {len(admins)} администраторов")
            return admins

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ АДМИНИСТРАТОРОВ] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching admins"
            ) from e

    @staticmethod
    async def get_admin(admin_id: str, db: AsyncSession, current_user: dict) -> Admin:
        is_user_self(current_user, admin_id, Role.ADMIN)

        try:
            return await AdminService.get_one(admin_id, db)

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ АДМИНИСТРАТОРА] Ошибка базы данных для ID {admin_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching admin"
            ) from e

    @staticmethod
    async def update_admin(
            admin_id: str,
            admin_data: UpdateAdmin,
            images: List[UploadFile],
            db: AsyncSession,
            current_user: dict
    ) -> Admin:
        """
        Обновление информации об администраторе.

        Менять роль может только супер-администратор.

        Args:
            admin_id: Идентификатор администратора
            admin_data: Новые данные администратора
            images: Загруженные изображения профиля
            db: Асинхронная сессия SQLAlchemy
            current_user: Данные из токена

        Returns:
            Admin: Обновленный администратор

        Raises:
            HTTPException: 400 - Логин уже занят или недопустимая роль
            HTTPException: 401 - Действие запрещено
            HTTPException: 404 - Администратор не найден
            HTTPException: 500 - Ошибка базы данных
        """
        is_user_self(current_user, admin_id, Role.ADMIN)
        update_data = admin_data.model_dump(exclude_none=True)

        if "role" in update_data:
            is_super_admin(current_user)
            _check_admin_role(update_data["role"])

        try:
            admin = await AdminService.get_one(admin_id, db)

            if "login" in update_data:
                await AuthService.ensure_login_free(Admin, update_data["login"], db, exclude_id=admin.id)

            if "password" in update_data:
                admin.hashed_password = hash_password(update_data.pop("password"))

            if "role" in update_data:
                role = await RoleService.get_by_name(update_data.pop("role"), db)
                admin.role_id = role.id

            for field, value in update_data.items():
                setattr(admin, field, value)

            await ImageService.attach(admin, images, db)
            await db.commit()

            logger.info(f"[ОБНОВЛЕНИЕ АДМИНИСТРАТОРА] Администратор обновлен: ID {admin_id}")
            return await AdminService.get_one(admin_id, db)

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[ОБНОВЛЕНИЕ АДМИНИСТРАТОРА] Ошибка базы данных для ID {admin_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while updating admin"
            ) from e

    @staticmethod
    async def delete_admin(admin_id: str, db: AsyncSession, current_user: dict) -> Admin:
        is_super_admin(current_user)

        if current_user.get("id") == admin_id:
            logger.warning(f"[УДАЛЕНИЕ АДМИНИСТРАТОРА] Попытка удалить собственную учётную запись: ID {admin_id}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You cannot delete your own account"
            )

        try:
            admin = await AdminService.get_one(admin_id, db)
            image_id = admin.image_id

            await db.delete(admin)
            await db.flush()

            if image_id:
                await ImageService.remove(image_id, db)

            await db.commit()

            logger.info(f"[УДАЛЕНИЕ АДМИНИСТРАТОРА] Администратор удален: ID {admin_id}")
            return admin

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[УДАЛЕНИЕ АДМИНИСТРАТОРА] Ошибка базы данных для ID {admin_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while deleting admin"
            ) from e
