from typing import Optional

from pydantic import BaseModel, ConfigDict, constr

from app.api.v1.schemas.image import ImageResponse
from app.api.v1.schemas.role import RoleResponse


class AdminResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[RoleResponse] = None
    image_id: Optional[str] = None
    image: Optional[ImageResponse] = None

class AdminLoginResponse(BaseModel):
    token: str
    admin: AdminResponse

class RegisterAdmin(BaseModel):
    full_name: constr(strip_whitespace=True, min_length=1)
    login: constr(strip_whitespace=True, min_length=1)
    password: constr(min_length=4)
    secret_key: str

class CreateAdmin(BaseModel):
    full_name: constr(strip_whitespace=True, min_length=1)
    login: constr(strip_whitespace=True, min_length=1)
    password: constr(min_length=4)
    email: Optional[str] = None
    phone: Optional[str] = None
    role: str = "admin"

class UpdateAdmin(BaseModel):
    full_name: Optional[constr(strip_whitespace=True, min_length=1)] = None
    login: Optional[constr(strip_whitespace=True, min_length=1)] = None
    password: Optional[constr(min_length=4)] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
