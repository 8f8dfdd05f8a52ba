from typing import Optional

from pydantic import BaseModel, ConfigDict, constr


class AnswerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    answer: str
    question_id: str
    is_true: Optional[bool] = None

class CreateAnswer(BaseModel):
    answer: constr(strip_whitespace=True, min_length=1)
    is_true: bool = False
    question_id: str

class UpdateAnswer(BaseModel):
    answer: Optional[constr(strip_whitespace=True, min_length=1)] = None
    is_true: Optional[bool] = None
