from pydantic import BaseModel, Field
from typing import Optional


class ContactRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None


class SubscribeRequest(BaseModel):
    email: Optional[str] = None


class MessageStatusUpdate(BaseModel):
    status: str


class AdminUserCreate(BaseModel):
    name: str
    email: str
    role: str
    avatar: Optional[str] = None


class RoleUpdate(BaseModel):
    role: str


class TrackingRequest(BaseModel):
    page: str
    page_title: Optional[str] = Field(None, alias="pageTitle")
    referrer: Optional[str] = None
    session_id: Optional[str] = Field(None, alias="sessionId")
    duration: Optional[int] = None

    class Config:
        validate_by_name = True
