from pydantic import BaseModel, constr


class LoginRequest(BaseModel):
    login: constr(strip_whitespace=True, min_length=1)
    password: constr(min_length=1)

class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
