from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.endpoints.auth import set_refresh_cookie
from app.api.v1.schemas.auth import LoginRequest
from app.api.v1.schemas.subject import SubjectResponse
from app.api.v1.schemas.teacher import (
    CreateTeacher,
    TeacherLoginResponse,
    TeacherResponse,
    UpdateTeacher,
)
from app.core.database import get_db
from app.core.logger import logger
from app.models import Teacher
from app.services.auth import AuthService
from app.services.teacher import TeacherService
from app.utils.roles import get_current_user

router = APIRouter(prefix="/teacher", tags=["Teacher"])


def create_teacher_form(
        full_name: str = Form(...),
        login: str = Form(...),
        password: str = Form(...),
        email: Optional[str] = Form(None),
        phone: Optional[str] = Form(None),
        telegram: Optional[str] = Form(None),
) -> CreateTeacher:
    try:
        return CreateTeacher(
            full_name=full_name,
            login=login,
            password=password,
            email=email,
            phone=phone,
            telegram=telegram,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e


def update_teacher_form(
        full_name: Optional[str] = Form(None),
        login: Optional[str] = Form(None),
        password: Optional[str] = Form(None),
        email: Optional[str] = Form(None),
        phone: Optional[str] = Form(None),
        telegram: Optional[str] = Form(None),
) -> UpdateTeacher:
    try:
        return UpdateTeacher(
            full_name=full_name,
            login=login,
            password=password,
            email=email,
            phone=phone,
            telegram=telegram,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e


@router.post("/login", response_model=TeacherLoginResponse)
async def login(
        auth_data: LoginRequest,
        response: Response,
        db: AsyncSession = Depends(get_db)
):
    """
    Вход преподавателя и выдача JWT-токенов.

    Raises:
        HTTPException: 401 - Неверный логин или пароль
    """
    user, _, access_token, refresh_token = await AuthService.login(Teacher, auth_data.login, auth_data.password, db)
    set_refresh_cookie(response, refresh_token)

    teacher = await TeacherService.get_one(user.id, db)
    logger.info(f"[АВТОРИЗАЦИЯ] Успешный вход преподавателя: {auth_data.login}")
    return TeacherLoginResponse(token=access_token, teacher=TeacherResponse.model_validate(teacher))


@router.post("/create", response_model=TeacherResponse, status_code=status.HTTP_201_CREATED)
async def create_teacher(
        teacher_data: CreateTeacher = Depends(create_teacher_form),
        image: Optional[List[UploadFile]] = File(None),
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """
    Создание нового преподавателя (только супер-администратор).

    Args:
        teacher_data: Данные преподавателя из multipart-формы
        image: Изображение профиля
        db: Асинхронная сессия SQLAlchemy
        current_user: Информация о текущем пользователе

    Returns:
        TeacherResponse: Созданный преподаватель

    Raises:
        HTTPException: 400 - Логин уже занят или неверное изображение
        HTTPException: 401 - Действие запрещено
    """
    teacher = await TeacherService.create_teacher(teacher_data, image or [], db, current_user)
    return TeacherResponse.model_validate(teacher)


@router.get("/", response_model=List[TeacherResponse], status_code=status.HTTP_200_OK)
async def get_teachers(
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    teachers = await TeacherService.get_all_teachers(db, current_user)
    return [TeacherResponse.model_validate(teacher) for teacher in teachers]


@router.get("/{teacher_id}", response_model=TeacherResponse, status_code=status.HTTP_200_OK)
async def get_teacher(
        teacher_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    teacher = await TeacherService.get_teacher(teacher_id, db, current_user)
    return TeacherResponse.model_validate(teacher)


@router.get("/{teacher_id}/subjects", response_model=List[SubjectResponse], status_code=status.HTTP_200_OK)
async def get_teacher_subjects(
        teacher_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """Получение предметов, которые ведёт преподаватель."""
    subjects = await TeacherService.get_teacher_subjects(teacher_id, db)
    return [SubjectResponse.model_validate(subject) for subject in subjects]


@router.patch("/update/{teacher_id}", response_model=TeacherResponse, status_code=status.HTTP_200_OK)
async def update_teacher(
        teacher_id: str,
        teacher_data: UpdateTeacher = Depends(update_teacher_form),
        image: Optional[List[UploadFile]] = File(None),
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """Обновление информации о преподавателе (сам преподаватель или супер-администратор)."""
    teacher = await TeacherService.update_teacher(teacher_id, teacher_data, image or [], db, current_user)
    return TeacherResponse.model_validate(teacher)


@router.delete("/delete/{teacher_id}", response_model=TeacherResponse, status_code=status.HTTP_200_OK)
async def delete_teacher(
        teacher_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """Удаление преподавателя вместе с изображением профиля (только супер-администратор)."""
    teacher = await TeacherService.delete_teacher(teacher_id, db, current_user)
    return TeacherResponse.model_validate(teacher)
