from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime, timezone


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Columns hold naive UTC
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class EventLocation(BaseModel):
    online: bool = True
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    venue: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class DateSlot(BaseModel):
    date: str
    start_time: Optional[str] = Field(None, alias="startTime")
    end_time: Optional[str] = Field(None, alias="endTime")
    title: Optional[str] = None

    class Config:
        validate_by_name = True


class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    start_date: Optional[datetime] = Field(None, alias="startDate")
    end_date: Optional[datetime] = Field(None, alias="endDate")
    timings: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")
    registration_link: Optional[str] = Field(None, alias="registrationLink")
    max_participants: Optional[int] = Field(None, alias="maxParticipants")
    status: Optional[str] = None
    location: Optional[EventLocation] = None
    benefits: Optional[List[str]] = None
    requirements: Optional[List[str]] = None
    what_to_bring: Optional[List[str]] = Field(None, alias="whatToBring")
    gallery_images: Optional[List[str]] = Field(None, alias="galleryImages")
    date_slots: Optional[List[DateSlot]] = Field(None, alias="dateSlots")
    teacher_id: Optional[str] = Field(None, alias="teacherId")
    teacher_name: Optional[str] = Field(None, alias="teacherName")
    target_audience: Optional[str] = Field(None, alias="targetAudience")
    curriculum: Optional[str] = None
    price: Optional[float] = None
    currency: Optional[str] = None

    class Config:
        validate_by_name = True

    @field_validator("start_date", "end_date")
    @classmethod
    def _naive_utc(cls, value):
        return to_naive_utc(value)


class EventCreate(EventUpdate):
    title: str
    type: str
    start_date: datetime = Field(..., alias="startDate")
    end_date: datetime = Field(..., alias="endDate")


def event_columns(payload: EventUpdate) -> Dict[str, Any]:
    """Explicitly set fields, keyed by column name, with nested models as plain JSON."""
    data = payload.model_dump(exclude_unset=True)
    if payload.location is not None:
        data["location"] = payload.location.model_dump()
    if payload.date_slots is not None:
        data["date_slots"] = [slot.model_dump(by_alias=True) for slot in payload.date_slots]
    return data
