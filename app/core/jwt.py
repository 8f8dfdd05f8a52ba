from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import uuid4

from jose import JWTError, jwt

from app.core.config import settings


def _encode(data: dict, key: str, expires_delta: timedelta) -> str:
    to_encode = data.copy()
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    to_encode["jti"] = uuid4().hex
    return jwt.encode(to_encode, key, algorithm=settings.ALGORITHM)


def _decode(token: str, key: str) -> Optional[dict]:
    try:
        payload = jwt.decode(token, key, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if not payload.get("id") or not payload.get("role"):
        return None
    return payload


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Создание access-токена.

    Args:
        data: Полезная нагрузка (id, login, role)
        expires_delta: Время жизни токена, по умолчанию ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        str: Подписанный JWT
    """
    return _encode(
        data,
        settings.ACCESS_TOKEN_KEY,
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Создание refresh-токена, подписанного отдельным ключом."""
    return _encode(
        data,
        settings.REFRESH_TOKEN_KEY,
        expires_delta or timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES),
    )


def verify_token(token: str) -> Optional[dict]:
    """
    Проверка access-токена.

    Returns:
        Optional[dict]: Полезная нагрузка или None, если токен недействителен или истёк
    """
    return _decode(token, settings.ACCESS_TOKEN_KEY)


def verify_refresh_token(token: str) -> Optional[dict]:
    return _decode(token, settings.REFRESH_TOKEN_KEY)
