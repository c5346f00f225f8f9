from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

# Largest value an INTEGER column holds on every supported backend
MAX_INTEGER_COLUMN = 2_147_483_647


class AttendanceStatus(str, Enum):
    CONFIRMED = "confirmed"
    DECLINED = "declined"


class EquipmentType(str, Enum):
    BALL = "ball"
    PUMP = "pump"
    OVERBOOTS = "overboots"


class AttendanceSubmit(BaseModel):
    status: AttendanceStatus
    additional_players: Optional[int] = Field(default=0, ge=0, le=MAX_INTEGER_COLUMN)
    comment: Optional[str] = None
    equipment: Optional[List[EquipmentType]] = None

    class Config:
        use_enum_values = True

    @field_validator("equipment")
    @classmethod
    def dedupe_equipment(cls, v):
        if v is None:
            return v
        seen = []
        for item in v:
            if item not in seen:
                seen.append(item)
        return seen


class EquipmentRead(BaseModel):
    id: str
    type: str

    class Config:
        from_attributes = True


class AttendeeRead(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True


class AttendanceRead(BaseModel):
    id: str
    user_id: str
    event_id: str
    status: str
    additional_players: int = 0
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Serialized as "users", the key clients expect for the nested attendee
    users: AttendeeRead = Field(validation_alias=AliasChoices("user", "users"))
    equipment: List[EquipmentRead] = []

    class Config:
        from_attributes = True


class AttendanceResponse(BaseModel):
    attendance: AttendanceRead
