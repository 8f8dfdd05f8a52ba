from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.endpoints.auth import set_refresh_cookie
from app.api.v1.schemas.admin import (
    AdminLoginResponse,
    AdminResponse,
    CreateAdmin,
    RegisterAdmin,
    UpdateAdmin,
)
from app.api.v1.schemas.auth import LoginRequest
from app.core.database import get_db
from app.core.logger import logger
from app.models import Admin
from app.services.admin import AdminService
from app.services.auth import AuthService
from app.utils.roles import get_current_user

router = APIRouter(prefix="/admin", tags=["Admin"])


def create_admin_form(
        full_name: str = Form(...),
        login: str = Form(...),
        password: str = Form(...),
        email: Optional[str] = Form(None),
        phone: Optional[str] = Form(None),
        role: str = Form("admin"),
) -> CreateAdmin:
    try:
        return CreateAdmin(
            full_name=full_name,
            login=login,
            password=password,
            email=email,
            phone=phone,
            role=role,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e


def update_admin_form(
        full_name: Optional[str] = Form(None),
        login: Optional[str] = Form(None),
        password: Optional[str] = Form(None),
        email: Optional[str] = Form(None),
        phone: Optional[str] = Form(None),
        role: Optional[str] = Form(None),
) -> UpdateAdmin:
    try:
        return UpdateAdmin(
            full_name=full_name,
            login=login,
            password=password,
            email=email,
            phone=phone,
            role=role,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e


@router.post("/register", response_model=AdminResponse, status_code=status.HTTP_201_CREATED)
async def register(
        admin_data: Annotated[RegisterAdmin, Form()],
        db: AsyncSession = Depends(get_db)
):
    """
    Регистрация супер-администратора.

    Требует секретный ключ, совпадающий с переменной окружения ADMIN_KEY.

    Args:
        admin_data: ФИО, логин, пароль и секретный ключ
        db: Асинхронная сессия SQLAlchemy

    Returns:
        AdminResponse: Зарегистрированный супер-администратор

    Raises:
        HTTPException: 400 - Логин уже занят
        HTTPException: 401 - Неверный секретный ключ
    """
    admin = await AdminService.register_super_admin(admin_data, db)
    return AdminResponse.model_validate(admin)


@router.post("/login", response_model=AdminLoginResponse)
async def login(
        auth_data: LoginRequest,
        response: Response,
        db: AsyncSession = Depends(get_db)
):
    """
    Вход администратора и выдача JWT-токенов.

    Access-токен возвращается в теле ответа, refresh-токен записывается
    в http-only cookie.

    Raises:
        HTTPException: 401 - Неверный логин или пароль
    """
    user, _, access_token, refresh_token = await AuthService.login(Admin, auth_data.login, auth_data.password, db)
    set_refresh_cookie(response, refresh_token)

    admin = await AdminService.get_one(user.id, db)
    logger.info(f"[АВТОРИЗАЦИЯ] Успешный вход администратора: {auth_data.login}")
    return AdminLoginResponse(token=access_token, admin=AdminResponse.model_validate(admin))


@router.post("/create", response_model=AdminResponse, status_code=status.HTTP_201_CREATED)
async def create_admin(
        admin_data: CreateAdmin = Depends(create_admin_form),
        image: Optional[List[UploadFile]] = File(None),
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """Создание администратора (только супер-администратор)."""
    admin = await AdminService.create_admin(admin_data, image or [], db, current_user)
    return AdminResponse.model_validate(admin)


@router.get("/", response_model=List[AdminResponse], status_code=status.HTTP_200_OK)
async def get_admins(
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    admins = await AdminService.get_all_admins(db, current_user)
    return [AdminResponse.model_validate(admin) for admin in admins]


@router.get("/{admin_id}", response_model=AdminResponse, status_code=status.HTTP_200_OK)
async def get_admin(
        admin_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """Получение администратора по ID (сам администратор или супер-администратор)."""
    admin = await AdminService.get_admin(admin_id, db, current_user)
    return AdminResponse.model_validate(admin)


@router.patch("/update/{admin_id}", response_model=AdminResponse, status_code=status.HTTP_200_OK)
async def update_admin(
        admin_id: str,
        admin_data: UpdateAdmin = Depends(update_admin_form),
        image: Optional[List[UploadFile]] = File(None),
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """
    Обновление информации об администраторе по ID.

    Args:
        admin_id: Идентификатор администратора
        admin_data: Новые данные администратора
        image: Новое изображение профиля
        db: Асинхронная сессия SQLAlchemy
        current_user: Информация о текущем пользователе

    Returns:
        AdminResponse: Обновленный администратор

    Raises:
        HTTPException: 400 - Логин уже занят или недопустимая роль
        HTTPException: 401 - Действие запрещено
        HTTPException: 404 - Администратор не найден
    """
    admin = await AdminService.update_admin(admin_id, admin_data, image or [], db, current_user)
    return AdminResponse.model_validate(admin)


@router.delete("/delete/{admin_id}", response_model=AdminResponse, status_code=status.HTTP_200_OK)
async def delete_admin(
        admin_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """Удаление администратора по ID (только супер-администратор)."""
    admin = await AdminService.delete_admin(admin_id, db, current_user)
    return AdminResponse.model_validate(admin)
