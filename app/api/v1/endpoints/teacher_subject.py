from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.schemas.teacher_subject import CreateTeacherSubject, TeacherSubjectResponse
from app.core.database import get_db
from app.services.teacher_subject import TeacherSubjectService
from app.utils.roles import get_current_user

router = APIRouter(prefix="/teacher-subject", tags=["Teacher subject"])


@router.get("/", response_model=List[TeacherSubjectResponse], status_code=status.HTTP_200_OK)
async def get_teacher_subjects(
        teacher_id: Optional[str] = None,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    links = await TeacherSubjectService.get_all_teacher_subjects(db, teacher_id)
    return [TeacherSubjectResponse.model_validate(link) for link in links]


@router.post("/create", response_model=TeacherSubjectResponse, status_code=status.HTTP_201_CREATED)
async def create_teacher_subject(
        link_data: CreateTeacherSubject,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    """
    Назначение предмета преподавателю (администраторы).

    Raises:
        HTTPException: 400 - Предмет уже назначен преподавателю
        HTTPException: 401 - Действие запрещено
        HTTPException: 404 - Преподаватель или предмет не найден
    """
    link = await TeacherSubjectService.create_teacher_subject(link_data, db, current_user)
    return TeacherSubjectResponse.model_validate(link)


@router.get("/{link_id}", response_model=TeacherSubjectResponse, status_code=status.HTTP_200_OK)
async def get_teacher_subject(
        link_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    link = await TeacherSubjectService.get_teacher_subject(link_id, db)
    return TeacherSubjectResponse.model_validate(link)


@router.delete("/delete/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_teacher_subject(
        link_id: str,
        db: AsyncSession = Depends(get_db),
        current_user: dict = Depends(get_current_user)
):
    await TeacherSubjectService.delete_teacher_subject(link_id, db, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
