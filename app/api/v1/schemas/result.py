from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class SubmittedAnswer(BaseModel):
    question_id: str
    answer_ids: List[str] = Field(default_factory=list)

class SubmitResult(BaseModel):
    test_id: str
    answers: List[SubmittedAnswer] = Field(default_factory=list)

class ResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    student_id: str
    test_id: str
    correct_answers: int
    total_questions: int
    created_at: datetime

class ResultQuestionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    result_id: str
    question_id: str
    is_correct: bool

class ResultAnswerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    result_question_id: str
    answer_id: str
