from typing import Optional, Tuple, Type, Union

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from app.core.jwt import create_access_token, create_refresh_token, verify_refresh_token
from app.core.logger import logger
from app.models import Admin, Teacher, Student
from app.utils.roles import Role
from app.utils.security import verify_password, hash_token, verify_token_hash

UserModel = Union[Admin, Teacher, Student]

USER_MODELS = {
    Role.SUPER_ADMIN: Admin,
    Role.ADMIN: Admin,
    Role.TEACHER: Teacher,
    Role.STUDENT: Student,
}


def _wrong_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Login or password is wrong"
    )


def _invalid_refresh() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid refresh token"
    )


class AuthService:
    @staticmethod
    async def get_user_by_login(model_class: Type[UserModel], login: str, db: AsyncSession) -> Optional[UserModel]:
        result = await db.execute(select(model_class).where(model_class.login == login))
        return result.scalars().first()

    @staticmethod
    async def ensure_login_free(
            model_class: Type[UserModel],
            login: str,
            db: AsyncSession,
            exclude_id: Optional[str] = None
    ) -> None:
        """
        Проверка уникальности логина в таблице пользователей.

        Args:
            model_class: Модель пользователя (Admin, Teacher или Student)
            login: Проверяемый логин
            db: Асинхронная сессия SQLAlchemy
            exclude_id: ID записи, которой логин уже принадлежит (при обновлении)

        Raises:
            HTTPException: 400 - Логин уже занят
        """
        existing_user = await AuthService.get_user_by_login(model_class, login, db)

        if existing_user and existing_user.id != exclude_id:
            logger.warning(f"[РЕГИСТРАЦИЯ] Пользователь с логином {login} уже существует")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Login already registered!"
            )

    @staticmethod
    async def get_role(user: UserModel) -> Role:
        if isinstance(user, Admin):
            role = await user.awaitable_attrs.role
            try:
                return Role(role.name)
            except ValueError as e:
                logger.warning(f"[АУТЕНТИФИКАЦИЯ] Неизвестная роль '{role.name}' у пользователя {user.login}")
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Restricted action"
                ) from e
        if isinstance(user, Teacher):
            return Role.TEACHER
        return Role.STUDENT

    @staticmethod
    def create_tokens(user: UserModel, role: Role) -> Tuple[str, str]:
        """
        Создание пары токенов (access и refresh) для пользователя.

        Returns:
            Tuple[str, str]: access-токен и refresh-токен
        """
        payload = {"id": user.id, "login": user.login, "role": role.value}
        logger.info(f"[СОЗДАНИЕ ТОКЕНА] Для пользователя {user.login}, роль: {role.value}")
        return create_access_token(payload), create_refresh_token(payload)

    @staticmethod
    async def _issue_tokens(user: UserModel, role: Role, db: AsyncSession) -> Tuple[str, str]:
        access_token, refresh_token = AuthService.create_tokens(user, role)
        user.hashed_refresh_token = hash_token(refresh_token)
        await db.commit()
        return access_token, refresh_token

    @staticmethod
    async def login(
            model_class: Type[UserModel],
            login: str,
            password: str,
            db: AsyncSession
    ) -> Tuple[UserModel, Role, str, str]:
        """
        Аутентификация пользователя и выдача токенов.

        Хэш refresh-токена сохраняется в записи пользователя.

        Args:
            model_class: Модель пользователя (Admin, Teacher или Student)
            login: Логин пользователя
            password: Пароль пользователя
            db: Асинхронная сессия SQLAlchemy

        Returns:
            Tuple: пользователь, роль, access-токен, refresh-токен

        Raises:
            HTTPException: 401 - Неверный логин или пароль
            HTTPException: 500 - Ошибка базы данных
        """
        try:
            user = await AuthService.get_user_by_login(model_class, login, db)

            if not user:
                logger.warning(f"[АУТЕНТИФИКАЦИЯ] Пользователь не найден: {login}")
                raise _wrong_credentials()

            if not verify_password(password, user.hashed_password):
                logger.warning(f"[АУТЕНТИФИКАЦИЯ] Неверный пароль для пользователя: {login}")
                raise _wrong_credentials()

            role = await AuthService.get_role(user)
            access_token, refresh_token = await AuthService._issue_tokens(user, role, db)

            logger.info(f"[АУТЕНТИФИКАЦИЯ] Успешная аутентификация: {login}, роль: {role.value}")
            return user, role, access_token, refresh_token

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[АУТЕНТИФИКАЦИЯ] Ошибка аутентификации для {login}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while logging in"
            ) from e

    @staticmethod
    async def _get_refresh_owner(refresh_token: Optional[str], db: AsyncSession) -> UserModel:
        payload = verify_refresh_token(refresh_token) if refresh_token else None
        if not payload or payload["role"] not in USER_MODELS.keys():
            logger.warning("[ОБНОВЛЕНИЕ ТОКЕНА] Недействительный refresh-токен")
            raise _invalid_refresh()

        user = await db.get(USER_MODELS[Role(payload["role"])], payload["id"])
        if not user or not verify_token_hash(refresh_token, user.hashed_refresh_token):
            logger.warning(f"[ОБНОВЛЕНИЕ ТОКЕНА] Refresh-токен отозван или не найден: {payload.get('login')}")
            raise _invalid_refresh()

        return user

    @staticmethod
    async def refresh(refresh_token: Optional[str], db: AsyncSession) -> Tuple[UserModel, Role, str, str]:
        """
        Обновление пары токенов по действующему refresh-токену.

        Старый refresh-токен перестаёт быть действительным.

        Raises:
            HTTPException: 401 - Refresh-токен недействителен, истёк или уже использован
            HTTPException: 500 - Ошибка базы данных
        """
        try:
            user = await AuthService._get_refresh_owner(refresh_token, db)
            role = await AuthService.get_role(user)
            access_token, new_refresh_token = await AuthService._issue_tokens(user, role, db)

            logger.info(f"[ОБНОВЛЕНИЕ ТОКЕНА] Токены обновлены: {user.login}")
            return user, role, access_token, new_refresh_token

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[ОБНОВЛЕНИЕ ТОКЕНА] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while refreshing token"
            ) from e

    @staticmethod
    async def logout(refresh_token: Optional[str], db: AsyncSession) -> None:
        try:
            user = await AuthService._get_refresh_owner(refresh_token, db)
            user.hashed_refresh_token = None
            await db.commit()
            logger.info(f"[ВЫХОД] Пользователь вышел из системы: {user.login}")

        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[ВЫХОД] Ошибка базы данных: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error while logging out"
            ) from e
