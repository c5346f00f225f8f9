from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from .user_schemas import UserRead


class TokenData(BaseModel):
    # Claims carried by the bearer token: {userId, email, is_admin}
    user_id: str
    email: Optional[str] = None
    is_admin: bool = False


class LoginRequest(BaseModel):
    # Plain str: an unknown or malformed email must fail like a wrong password
    email: str
    password: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    name: str = Field(..., min_length=1, max_length=255)


class AuthResponse(BaseModel):
    token: str
    user: UserRead
