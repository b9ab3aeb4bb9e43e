from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.core.roles import Role


# 🔹 SUPER_ADMIN 의 사용자 생성 요청
class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=64)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: Role = Role.REGULAR
    nursery_id: int | None = None


# 🔹 부분 수정 (None 이면 기존 값 유지)
class UserUpdate(BaseModel):
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=8, max_length=64)
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    role: Role | None = None
    nursery_id: int | None = None
    is_active: bool | None = None


# 🔹 사용자 응답용 (password_hash 제외)
class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    role: Role
    nursery_id: int | None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
