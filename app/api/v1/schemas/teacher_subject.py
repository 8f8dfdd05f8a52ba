from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.api.v1.schemas.subject import SubjectResponse


class TeacherSubjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    teacher_id: str
    subject_id: str
    subject: Optional[SubjectResponse] = None

class CreateTeacherSubject(BaseModel):
    teacher_id: str
    subject_id: str
