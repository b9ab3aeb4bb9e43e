from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.core.roles import Role
from app.models.activity_log import ActionType
from app.models.nursery import NurseryLocation


class ScopeUpdateRequest(BaseModel):
    # None 또는 -1 이면 "전체 어린이집"
    nursery_id: Optional[int] = None


class SettingsUpdateRequest(BaseModel):
    settings: Dict[str, str] = Field(..., min_length=1)


class ActivityLogResponse(BaseModel):
    id: int
    user_id: int
    username: str
    user_role: Role
    nursery_id: Optional[int]
    nursery_name: Optional[str]
    action_type: ActionType
    resource_id: Optional[int]
    description: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ContactCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=30)
    nursery_location: str = Field(default="general", max_length=20)
    message: str = Field(..., min_length=1, max_length=5000)


class ContactResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str]
    nursery_location: str
    message: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NurseryResponse(BaseModel):
    id: int
    name: str
    location: NurseryLocation
    address: str
    phone_number: str
    email: str
    description: str
    hero_image: str

    model_config = ConfigDict(from_attributes=True)
