from typing import List

from fastapi import HTTPException, status
from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Role as RoleModel, Admin
from app.core.logger import logger
from app.utils.roles import Role, is_admin, is_super_admin
from app.api.v1.schemas.role import CreateRole, UpdateRole

ROLE_DESCRIPTIONS = {
    Role.SUPER_ADMIN: "Полный доступ, управление пользователями",
    Role.ADMIN: "Администратор учебного процесса",
    Role.TEACHER: "Преподаватель",
    Role.STUDENT: "Студент",
}
SYSTEM_ROLE_NAMES = {role.value for role in Role}


class RoleService:
    @staticmethod
    async def seed_roles(db: AsyncSession) -> int:
        """
        Создание системных ролей, если их ещё нет в базе данных.

        Returns:
            int: Количество созданных ролей
        """
        result = await db.execute(select(RoleModel.name))
        existing = set(result.scalars().all())

        created = 0
        for role in Role:
            if role.value not in existing:
                db.add(RoleModel(name=role.value, description=ROLE_DESCRIPTIONS[role]))
                created += 1

        await db.commit()
        logger.info(f"[РОЛИ] Создано системных ролей: {created}")
        return created

    @staticmethod
    async def get_by_name(name: str, db: AsyncSession) -> RoleModel:
        result = await db.execute(select(RoleModel).where(RoleModel.name == name))
        role = result.scalars().first()

        if not role:
            logger.warning(f"[ПОЛУЧЕНИЕ РОЛИ] Роль не найдена: {name}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Role not found"
            )

        return role

    @staticmethod
    async def _get_one(role_id: int, db: AsyncSession) -> RoleModel:
        role = await db.get(RoleModel, role_id)

        if not role:
            logger.warning(f"[ПОЛУЧЕНИЕ РОЛИ] Роль не найдена: ID {role_id}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Role not found"
            )

        return role

    @staticmethod
    async def _ensure_name_free(name: str, db: AsyncSession, exclude_id: int = None) -> None:
        result = await db.execute(select(RoleModel).where(func.lower(RoleModel.name) == name.lower()))
        existing = result.scalars().first()

        if existing and existing.id != exclude_id:
            logger.warning(f"[РОЛИ] Роль уже существует: {name}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Role already exists"
            )

    @staticmethod
    def _check_not_system(role: RoleModel, action: str) -> None:
        if role.name in SYSTEM_ROLE_NAMES:
            logger.warning(f"[РОЛИ] Попытка изменить системную роль {role.name}: {action}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"System roles cannot be {action}"
            )

    @staticmethod
    async def create_role(role_data: CreateRole, db: AsyncSession, current_user: dict) -> RoleModel:
        """
        Создание роли (только супер-администратор).

        Raises:
            HTTPException: 400 - Роль с таким названием уже существует
            HTTPException: 401 - Действие запрещено
            HTTPException: 500 - Ошибка базы данных
        """
        is_super_admin(current_user)

        try:
            await RoleService._ensure_name_free(role_data.name, db)

            role = RoleModel(name=role_data.name, description=role_data.description)
            db.add(role)
            await db.commit()

            logger.info(f"[СОЗДАНИЕ РОЛИ] Создана роль ID {role.id}: {role.name}")
            return role

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[СОЗДАНИЕ РОЛИ] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while creating role"
            ) from e

    @staticmethod
    async def get_all_roles(db: AsyncSession, current_user: dict) -> List[RoleModel]:
        is_admin(current_user)

        try:
            result = await db.execute(select(RoleModel).order_by(RoleModel.id))
            roles = result.scalars().all()

            logger.info(f"[ПОЛУЧЕНИЕ РОЛЕЙ] Получено {len(roles)} ролей")
            return roles

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ РОЛЕЙ] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching roles"
            ) from e

    @staticmethod
    async def get_role(role_id: int, db: AsyncSession, current_user: dict) -> RoleModel:
        is_admin(current_user)

        try:
            return await RoleService._get_one(role_id, db)

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ РОЛИ] Ошибка базы данных для ID {role_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching role"
            ) from e

    @staticmethod
    async def update_role(role_id: int, role_data: UpdateRole, db: AsyncSession, current_user: dict) -> RoleModel:
        is_super_admin(current_user)

        try:
            role = await RoleService._get_one(role_id, db)
            update_data = role_data.model_dump(exclude_none=True)

            if "name" in update_data and update_data["name"] != role.name:
                RoleService._check_not_system(role, "renamed")
                await RoleService._ensure_name_free(update_data["name"], db, exclude_id=role.id)

            for field, value in update_data.items():
                setattr(role, field, value)

            await db.commit()

            logger.info(f"[ОБНОВЛЕНИЕ РОЛИ] Роль обновлена: ID {role_id}")
            return role

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[ОБНОВЛЕНИЕ РОЛИ] Ошибка базы данных для ID {role_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while updating role"
            ) from e

    @staticmethod
    async def delete_role(role_id: int, db: AsyncSession, current_user: dict) -> RoleModel:
        """
        Удаление роли (только супер-администратор).

        Системные роли и роль, назначенную хотя бы одному администратору, удалить нельзя.

        Raises:
            HTTPException: 400 - Роль системная или используется
            HTTPException: 401 - Действие запрещено
            HTTPException: 404 - Роль не найдена
            HTTPException: 500 - Ошибка базы данных
        """
        is_super_admin(current_user)

        try:
            role = await RoleService._get_one(role_id, db)
            RoleService._check_not_system(role, "deleted")

            in_use = await db.scalar(select(func.count(Admin.id)).where(Admin.role_id == role.id))
            if in_use:
                logger.warning(f"[УДАЛЕНИЕ РОЛИ] Роль ID {role_id} назначена {in_use} администраторам")
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Role is assigned to admins"
                )

            await db.delete(role)
            await db.commit()

            logger.info(f"[УДАЛЕНИЕ РОЛИ] Роль удалена: ID {role_id}")
            return role

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[УДАЛЕНИЕ РОЛИ] Ошибка базы данных для ID {role_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while deleting role"
            ) from e
