from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any


class ContentUpdate(BaseModel):
    title: Optional[str] = None
    type: Optional[str] = None
    content: Optional[Dict[str, Any]] = None
    thumbnail_url: Optional[str] = Field(None, alias="thumbnailUrl")
    layout: Optional[str] = None
    media_order: Optional[List[str]] = Field(None, alias="mediaOrder")
    is_featured: Optional[bool] = Field(None, alias="isFeatured")

    class Config:
        validate_by_name = True


class ContentCreate(ContentUpdate):
    title: str
    type: str
    content: Dict[str, Any]


class RejectContentRequest(BaseModel):
    reason: Optional[str] = None


class ResourceUpdate(BaseModel):
    title: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    thumbnail_url: Optional[str] = Field(None, alias="thumbnailUrl")
    download_url: Optional[str] = Field(None, alias="downloadUrl")
    purchase_url: Optional[str] = Field(None, alias="purchaseUrl")
    author: Optional[str] = None
    isbn: Optional[str] = None
    pages: Optional[str] = None
    video_url: Optional[str] = Field(None, alias="videoUrl")
    link_url: Optional[str] = Field(None, alias="linkUrl")
    content: Optional[str] = None
    quote: Optional[str] = None
    subtitle: Optional[str] = None
    category: Optional[str] = None
    order: Optional[int] = None
    status: Optional[str] = None

    class Config:
        validate_by_name = True


class ResourceCreate(ResourceUpdate):
    title: str
    type: str
