from typing import Optional

from pydantic import BaseModel, ConfigDict, constr


class SubjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None

class CreateSubject(BaseModel):
    title: constr(strip_whitespace=True, min_length=1)
    description: Optional[str] = None

class UpdateSubject(BaseModel):
    title: Optional[constr(strip_whitespace=True, min_length=1)] = None
    description: Optional[str] = None
