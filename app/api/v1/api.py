from fastapi import APIRouter
from app.api.v1.endpoints import (
    admin,
    answer,
    auth,
    group,
    image,
    question,
    result,
    result_answer,
    result_question,
    role,
    student,
    subject,
    teacher,
    teacher_subject,
    test,
)

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(role.router)
api_router.include_router(image.router)
api_router.include_router(admin.router)
api_router.include_router(teacher.router)
api_router.include_router(subject.router)
api_router.include_router(teacher_subject.router)
api_router.include_router(group.router)
api_router.include_router(student.router)
api_router.include_router(test.router)
api_router.include_router(question.router)
api_router.include_router(answer.router)
api_router.include_router(result.router)
api_router.include_router(result_question.router)
api_router.include_router(result_answer.router)
