from typing import List

from fastapi import HTTPException, status
from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Group
from app.core.logger import logger
from app.utils.roles import is_admin
from app.api.v1.schemas.group import CreateGroup, UpdateGroup


class GroupService:
    @staticmethod
    async def get_one(group_id: str, db: AsyncSession) -> Group:
        group = await db.get(Group, group_id)

        if not group:
            logger.warning(f"[ПОЛУЧЕНИЕ ГРУППЫ] Группа не найдена: ID {group_id}")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Group not found"
            )

        return group

    @staticmethod
    async def _ensure_name_free(name: str, db: AsyncSession, exclude_id: str = None) -> None:
        result = await db.execute(select(Group).where(func.lower(Group.name) == name.lower()))
        existing = result.scalars().first()

        if existing and existing.id != exclude_id:
            logger.warning(f"[ГРУППА] Группа уже существует: {name}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Group already exists"
            )

    @staticmethod
    async def create_group(group_data: CreateGroup, db: AsyncSession, current_user: dict) -> Group:
        """
        Создание новой учебной группы.

        Args:
            group_data: Данные для создания группы
            db: Асинхронная сессия SQLAlchemy
            current_user: Данные из токена

        Returns:
            Group: Созданная группа

        Raises:
            HTTPException: 400 - Группа с таким названием уже существует
            HTTPException: 401 - Действие запрещено
            HTTPException: 500 - Ошибка при создании группы
        """
        is_admin(current_user)

        try:
            await GroupService._ensure_name_free(group_data.name, db)

            new_group = Group(**group_data.model_dump())
            db.add(new_group)
            await db.commit()

            logger.info(f"[СОЗДАНИЕ ГРУППЫ] Создана группа ID {new_group.id}, название: {new_group.name}")
            return new_group

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[СОЗДАНИЕ ГРУППЫ] Ошибка при создании группы: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while creating group"
            ) from e

    @staticmethod
    async def get_all_groups(db: AsyncSession) -> List[Group]:
        try:
            result = await db.execute(select(Group).order_by(Group.name))
            groups = result.scalars().all()

            logger.info(f"[ПОЛУЧЕНИЕ ГРУПП] Получено {len(groups)} учебных групп")
            return groups

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ ГРУПП] Ошибка при получении списка групп: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching groups"
            ) from e

    @staticmethod
    async def get_group(group_id: str, db: AsyncSession) -> Group:
        try:
            return await GroupService.get_one(group_id, db)

        except SQLAlchemyError as e:
            logger.error(f"[ПОЛУЧЕНИЕ ГРУППЫ] Ошибка базы данных для ID {group_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while fetching group"
            ) from e

    @staticmethod
    async def update_group(group_id: str, group_data: UpdateGroup, db: AsyncSession, current_user: dict) -> Group:
        """
        Обновление информации об учебной группе.

        Raises:
            HTTPException: 400 - Группа с таким названием уже существует
            HTTPException: 401 - Действие запрещено
            HTTPException: 404 - Группа не найдена
            HTTPException: 500 - Ошибка при обновлении
        """
        is_admin(current_user)

        try:
            group = await GroupService.get_one(group_id, db)
            update_data = group_data.model_dump(exclude_none=True)

            if "name" in update_data:
                await GroupService._ensure_name_free(update_data["name"], db, exclude_id=group.id)

            for field, value in update_data.items():
                setattr(group, field, value)

            await db.commit()

            logger.info(f"[ОБНОВЛЕНИЕ ГРУППЫ] Группа обновлена: ID {group_id}")
            return group

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[ОБНОВЛЕНИЕ ГРУППЫ] Ошибка при обновлении группы ID {group_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while updating group"
            ) from e

    @staticmethod
    async def delete_group(group_id: str, db: AsyncSession, current_user: dict) -> Group:
        """Удаление группы. У студентов группы ссылка обнуляется."""
        is_admin(current_user)

        try:
            group = await GroupService.get_one(group_id, db)

            await db.delete(group)
            await db.commit()

            logger.info(f"[УДАЛЕНИЕ ГРУППЫ] Группа удалена: ID {group_id}")
            return group

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[УДАЛЕНИЕ ГРУППЫ] Ошибка при удалении группы ID {group_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while deleting group"
            ) from e
