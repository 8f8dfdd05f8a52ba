from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.endpoints.auth import set_refresh_cookie
from app.api.v1.schemas.auth import LoginRequest
from app.api.v1.schemas.student import (
    CreateStudent,
    StudentLoginResponse,
    StudentResponse,
    UpdateStudent,
    UpdateStudentGroup,
)
from app.core.database import get_db
from app.core.logger import logger
from app.models import Student
from app.services.auth import AuthService
from app.services.student import StudentService
from app.utils.roles import get_current_user

router = APIRouter(prefix="/student", tags=["Student"])


def create_student_form(
        full_name: str = Form(...),
        login: str = Form(...),
        password: str = Form(...),
        group_id: str = Form(...),
        email: Optional[str] = Form(None),
        phone: Optional[str] = Form(None),
        telegram: Optional[str] = Form(None),
) -> CreateStudent:
    try:
        return CreateStudent(
            full_name=full_name,
            login=login,
            password=password,
            group_id=group_id,
            email=email,
            phone=phone,
            telegram=telegram,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e


def update_student_form(
        full_name: Optional[str] = Form(None),
        login: Optional[str] = Form(None),
        password: Optional[str] = Form(None),
        email: Optional[str] = Form(None),
        phone: Optional[str] = Form(None),
        telegram: Optional[str] = Form(None),
) -> UpdateStudent:
    try:
        return UpdateStudent(
            full_name=full_name,
            login=login,
            password=password,
            email=email,
            phone=phone,
            telegram=telegram,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e


@router.post("/login", response_model=StudentLoginResponse)
async def login(
        auth_data: LoginRequest,
        response: Response,
        db: AsyncSession = Depends(get_db)
):
    """
    Вход студента и выдача JWT-токенов.

    Args:
        auth_data: Логин и пароль
        response: Ответ, в cookie которого записывается refresh-токен
        db: Асинхронная сессия SQLAlchemy

    Returns:
        StudentLoginResponse: access-токен и данные студента

    Raises:
        HTTPException: 401 - Неверный логин или пароль
    """
    user, _, access_token, refresh_token = await AuthService.login(Student, auth_data.login, auth_data.password, db)
    set_refresh_cookie(response, refresh_token)

    student = await StudentService.get_one(user.id, db)
    logger.info(f"[АВТОРИЗАЦИЯ] Успешный вход студента: {auth_data.login}")
    return StudentLoginResponse(token=access_token, student=StudentResponse.model_validate(student))


@router.post("/create", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
        student_data: CreateStudent = Depends(create_student_form),
        image: Optional[List[UploadFile]] = File(None),
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """
    Создание нового студента (multipart-форма, изображение профиля необязательно).

    Raises:
        HTTPException: 400 - Логин уже занят или неверное изображение
        HTTPException: 401 - Действие запрещено
        HTTPException: 404 - Группа не найдена
    """
    student = await StudentService.create_student(student_data, image or [], db, current_user)
    return StudentResponse.model_validate(student)


@router.get("/", response_model=List[StudentResponse], status_code=status.HTTP_200_OK)
async def get_students(
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """Получение списка всех студентов (администраторы)."""
    students = await StudentService.get_all_students(db, current_user)
    return [StudentResponse.model_validate(student) for student in students]


@router.get("/{student_id}", response_model=StudentResponse, status_code=status.HTTP_200_OK)
async def get_student(
        student_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """Получение студента по ID (сам студент или супер-администратор)."""
    student = await StudentService.get_student(student_id, db, current_user)
    return StudentResponse.model_validate(student)


@router.patch("/update/{student_id}", response_model=StudentResponse, status_code=status.HTTP_200_OK)
async def update_student(
        student_id: str,
        student_data: UpdateStudent = Depends(update_student_form),
        image: Optional[List[UploadFile]] = File(None),
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """
    Обновление информации о студенте по ID.

    Args:
        student_id: Идентификатор студента
        student_data: Новые данные студента
        image: Новое изображение профиля
        db: Асинхронная сессия SQLAlchemy
        current_user: Информация о текущем пользователе

    Returns:
        StudentResponse: Обновленный студент

    Raises:
        HTTPException: 400 - Логин уже занят
        HTTPException: 401 - Действие запрещено
        HTTPException: 404 - Студент не найден
    """
    student = await StudentService.update_student(student_id, student_data, image or [], db, current_user)
    return StudentResponse.model_validate(student)


@router.patch("/group/{student_id}", response_model=StudentResponse, status_code=status.HTTP_200_OK)
async def update_student_group(
        student_id: str,
        group_data: UpdateStudentGroup,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """Перевод студента в другую группу (супер-администратор)."""
    student = await StudentService.update_student_group(student_id, group_data, db, current_user)
    return StudentResponse.model_validate(student)


@router.delete("/delete/{student_id}", response_model=StudentResponse, status_code=status.HTTP_200_OK)
async def delete_student(
        student_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """
    Удаление студента по ID вместе с изображением профиля.

    Returns:
        StudentResponse: Удалённый студент

    Raises:
        HTTPException: 401 - Действие запрещено
        HTTPException: 404 - Студент не найден
    """
    student = await StudentService.delete_student(student_id, db, current_user)
    return StudentResponse.model_validate(student)
