import datetime as dt
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_serializer, model_validator

from .attendance_schemas import AttendanceRead


class EventBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    date: dt.date
    time_from: dt.time
    time_to: dt.time
    location: str = Field(..., min_length=1, max_length=255)


class EventCreate(EventBase):
    pass


class EventUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    date: Optional[dt.date] = None
    time_from: Optional[dt.time] = None
    time_to: Optional[dt.time] = None
    location: Optional[str] = Field(default=None, min_length=1, max_length=255)

    @model_validator(mode="after")
    def reject_nulls(self):
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class EventRead(EventBase):
    id: str
    created_by: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True

    @field_serializer("time_from", "time_to")
    def serialize_time(self, value: dt.time) -> str:
        return value.isoformat(timespec="minutes")


class EventWithAttendances(EventRead):
    attendances: List[AttendanceRead] = []
    total_participants: int = 0


class EventResponse(BaseModel):
    event: EventRead


class EventListResponse(BaseModel):
    events: List[EventWithAttendances]


class EquipmentHolder(BaseModel):
    user_name: str
    user_id: str


class EquipmentSummaryResponse(BaseModel):
    equipment: Dict[str, List[EquipmentHolder]]


class MessageResponse(BaseModel):
    message: str
