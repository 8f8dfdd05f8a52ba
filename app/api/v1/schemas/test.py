from typing import List, Optional

from pydantic import BaseModel, ConfigDict, conint, constr

from app.api.v1.schemas.question import QuestionWithAnswers
from app.api.v1.schemas.subject import SubjectResponse


class ExamTestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    time_limit: Optional[int] = None
    subject_id: str
    subject: Optional[SubjectResponse] = None

class ExamTestFullResponse(ExamTestResponse):
    questions: List[QuestionWithAnswers] = []

class CreateExamTest(BaseModel):
    title: constr(strip_whitespace=True, min_length=1)
    description: Optional[str] = None
    time_limit: Optional[conint(gt=0)] = None
    subject_id: str

class UpdateExamTest(BaseModel):
    title: Optional[constr(strip_whitespace=True, min_length=1)] = None
    description: Optional[str] = None
    time_limit: Optional[conint(gt=0)] = None
    subject_id: Optional[str] = None
