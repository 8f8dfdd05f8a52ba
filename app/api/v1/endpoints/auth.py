from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.logger import logger
from app.services.auth import AuthService
from app.api.v1.schemas.auth import TokenResponse

REFRESH_COOKIE = "refresh_token"

router = APIRouter(prefix="/auth", tags=["Auth"])


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=refresh_token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
    )


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
        response: Response,
        refresh_token: Optional[str] = Cookie(None),
        db: AsyncSession = Depends(get_db)
):
    """
    Обновление access-токена по refresh-токену из cookie.

    Returns:
        TokenResponse: Новый access-токен (новый refresh-токен записывается в cookie)

    Raises:
        HTTPException: 401 - Refresh-токен недействителен или отозван
    """
    user, role, access_token, new_refresh_token = await AuthService.refresh(refresh_token, db)
    set_refresh_cookie(response, new_refresh_token)

    logger.info(f"[АВТОРИЗАЦИЯ] Токен обновлён: {user.login}, роль: {role.value}")
    return TokenResponse(token=access_token)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
        refresh_token: Optional[str] = Cookie(None),
        db: AsyncSession = Depends(get_db)
):
    """Выход из системы: сохранённый хэш refresh-токена сбрасывается, cookie удаляется."""
    await AuthService.logout(refresh_token, db)

    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(REFRESH_COOKIE)
    return response
