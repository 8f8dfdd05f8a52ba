from enum import Enum
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.logger import logger
from app.core.jwt import verify_token

bearer_scheme = HTTPBearer(auto_error=False)


class Role(str, Enum):
    SUPER_ADMIN = "super-admin"
    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


ADMIN_ROLES = (Role.SUPER_ADMIN, Role.ADMIN)
STAFF_ROLES = (Role.SUPER_ADMIN, Role.ADMIN, Role.TEACHER)


def _invalid_token() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid token",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _restricted(user: dict, required: str) -> HTTPException:
    logger.warning(
        f"[АВТОРИЗАЦИЯ] Запрет доступа для пользователя '{user.get('login')}' | "
        f"Роль: {user.get('role')} | Требуется: {required}"
    )
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Restricted action"
    )


def verify_access_token(authorization: Optional[str]) -> dict:
    """
    Декодирование заголовка Authorization вида "Bearer <jwt>".

    Args:
        authorization: Значение заголовка Authorization

    Returns:
        dict: Полезная нагрузка токена (id, login, role)

    Raises:
        HTTPException: 401 - Заголовок отсутствует, токен недействителен или истёк
    """
    if not authorization:
        logger.warning("[АУТЕНТИФИКАЦИЯ] Отсутствует заголовок Authorization")
        raise _invalid_token()

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        logger.warning("[АУТЕНТИФИКАЦИЯ] Неверный формат заголовка Authorization")
        raise _invalid_token()

    user_data = verify_token(token.strip())
    if not user_data:
        logger.warning("[АУТЕНТИФИКАЦИЯ] Неверный или истекший токен")
        raise _invalid_token()

    return user_data


async def get_current_user(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> dict:
    """
    Зависимость для получения текущего пользователя и его роли из JWT-токена.

    Returns:
        dict: Данные пользователя: id, login, role

    Raises:
        HTTPException: 401 - Токен недействителен или истёк
    """
    header = f"{credentials.scheme} {credentials.credentials}" if credentials else None
    user_data = verify_access_token(header)
    logger.info(f"[АУТЕНТИФИКАЦИЯ] Пользователь аутентифицирован: {user_data.get('login')}, роль: {user_data['role']}")
    return user_data


def is_super_admin(user: dict) -> None:
    if user.get("role") != Role.SUPER_ADMIN:
        raise _restricted(user, Role.SUPER_ADMIN.value)


def is_admin(user: dict) -> None:
    if user.get("role") not in ADMIN_ROLES:
        raise _restricted(user, ", ".join(r.value for r in ADMIN_ROLES))


def is_staff(user: dict) -> None:
    if user.get("role") not in STAFF_ROLES:
        raise _restricted(user, ", ".join(r.value for r in STAFF_ROLES))


def is_user_self(user: dict, user_id: str, role: Role) -> None:
    """
    Проверка, что запрос выполняет сам владелец записи или супер-администратор.

    Args:
        user: Данные из токена
        user_id: Идентификатор записи
        role: Роль владельца записи (admin-записи принадлежат обеим админским ролям)

    Raises:
        HTTPException: 401 - Действие запрещено
    """
    if user.get("role") == Role.SUPER_ADMIN:
        return

    owner_roles = ADMIN_ROLES if role in ADMIN_ROLES else (role,)
    if user.get("id") != str(user_id) or user.get("role") not in owner_roles:
        raise _restricted(user, f"владелец записи {user_id}")


def is_student(user: dict) -> None:
    if user.get("role") != Role.STUDENT:
        raise _restricted(user, Role.STUDENT.value)


def is_staff_or_owner(user: dict, student_id: str) -> None:
    """Доступ к данным студента: преподаватели, администраторы или сам студент."""
    if user.get("role") == Role.STUDENT:
        is_user_self(user, student_id, Role.STUDENT)
    else:
        is_staff(user)
