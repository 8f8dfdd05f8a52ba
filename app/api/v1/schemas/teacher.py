from typing import Optional

from pydantic import BaseModel, ConfigDict, constr

from app.api.v1.schemas.image import ImageResponse


class TeacherResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    telegram: Optional[str] = None
    image_id: Optional[str] = None
    image: Optional[ImageResponse] = None

class TeacherLoginResponse(BaseModel):
    token: str
    teacher: TeacherResponse

class CreateTeacher(BaseModel):
    full_name: constr(strip_whitespace=True, min_length=1)
    login: constr(strip_whitespace=True, min_length=1)
    password: constr(min_length=4)
    email: Optional[str] = None
    phone: Optional[str] = None
    telegram: Optional[str] = None

class UpdateTeacher(BaseModel):
    full_name: Optional[constr(strip_whitespace=True, min_length=1)] = None
    login: Optional[constr(strip_whitespace=True, min_length=1)] = None
    password: Optional[constr(min_length=4)] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    telegram: Optional[str] = None
