from pydantic import BaseModel, Field
from typing import Optional


class FeedbackRequest(BaseModel):
    type: Optional[str] = None
    rating: Optional[int] = None
    comment: Optional[str] = None
    photo_url: Optional[str] = Field(None, alias="photoUrl")
    photo_caption: Optional[str] = Field(None, alias="photoCaption")

    class Config:
        validate_by_name = True


class FeedbackModerationRequest(BaseModel):
    status: Optional[str] = None
    admin_notes: Optional[str] = Field(None, alias="adminNotes")

    class Config:
        validate_by_name = True
