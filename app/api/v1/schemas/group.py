from typing import Optional

from pydantic import BaseModel, ConfigDict, constr


class GroupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    course: Optional[int] = None
    start_date: Optional[str] = None

class CreateGroup(BaseModel):
    name: constr(strip_whitespace=True, min_length=1)
    course: Optional[int] = None
    start_date: Optional[str] = None

class UpdateGroup(BaseModel):
    name: Optional[constr(strip_whitespace=True, min_length=1)] = None
    course: Optional[int] = None
    start_date: Optional[str] = None
