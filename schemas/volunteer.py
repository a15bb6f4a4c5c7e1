from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime

from schemas.event import to_naive_utc


class CustomQuestion(BaseModel):
    id: str
    title: str
    type: str = "text"
    options: Optional[List[str]] = None
    required: bool = False


class OpportunityUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    type: Optional[str] = None
    time_commitment: Optional[str] = Field(None, alias="timeCommitment")
    required_skills: Optional[List[str]] = Field(None, alias="requiredSkills")
    start_date: Optional[datetime] = Field(None, alias="startDate")
    end_date: Optional[datetime] = Field(None, alias="endDate")
    max_volunteers: Optional[int] = Field(None, alias="maxVolunteers")
    status: Optional[str] = None
    custom_questions: Optional[List[CustomQuestion]] = Field(None, alias="customQuestions")

    class Config:
        validate_by_name = True

    @field_validator("start_date", "end_date")
    @classmethod
    def _naive_utc(cls, value):
        return to_naive_utc(value)


class OpportunityCreate(OpportunityUpdate):
    title: str
    description: str
    location: str
    type: str
    time_commitment: str = Field(..., alias="timeCommitment")
    start_date: datetime = Field(..., alias="startDate")
    end_date: datetime = Field(..., alias="endDate")


class StatusUpdateRequest(BaseModel):
    """Review decision on a volunteer or teacher submission."""
    status: str
    notes: Optional[str] = None
