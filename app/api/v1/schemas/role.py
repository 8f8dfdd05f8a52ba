from typing import Optional

from pydantic import BaseModel, ConfigDict, constr


class RoleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None

class CreateRole(BaseModel):
    name: constr(strip_whitespace=True, min_length=1)
    description: Optional[str] = None

class UpdateRole(BaseModel):
    name: Optional[constr(strip_whitespace=True, min_length=1)] = None
    description: Optional[str] = None
