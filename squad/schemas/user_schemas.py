from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field


class UserRead(BaseModel):
    """Public projection of a user. Never carries the password hash."""

    id: str
    email: str
    name: str
    is_admin: bool
    is_active: bool

    class Config:
        from_attributes = True


class UserListItem(UserRead):
    created_at: Optional[datetime] = None


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    name: str = Field(..., min_length=1, max_length=255)
    is_admin: bool = False


class UserStatusUpdate(BaseModel):
    is_active: bool


class UserResponse(BaseModel):
    user: UserRead


class UserListResponse(BaseModel):
    users: List[UserListItem]
