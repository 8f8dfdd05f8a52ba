from typing import List, Optional

from pydantic import BaseModel, ConfigDict, constr

from app.api.v1.schemas.answer import AnswerResponse


class QuestionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    question: str
    test_id: str

class QuestionWithAnswers(QuestionResponse):
    answers: List[AnswerResponse] = []

class CreateQuestion(BaseModel):
    question: constr(strip_whitespace=True, min_length=1)
    test_id: str

class UpdateQuestion(BaseModel):
    question: Optional[constr(strip_whitespace=True, min_length=1)] = None
