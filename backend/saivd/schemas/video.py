from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class VideoOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    filename: str
    filesize: int
    content_type: str
    original_url: str
    original_thumbnail_url: Optional[str] = None
    processed_url: Optional[str] = None
    processed_thumbnail_url: Optional[str] = None
    preview_thumbnail_data: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = None
    status: str
    upload_date: Optional[datetime] = None
    callback_received_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class UploadRequest(BaseModel):
    """Presigned upload request; missing fields are reported by the route."""
    model_config = ConfigDict(populate_by_name=True)

    filename: Optional[str] = None
    content_type: Optional[str] = Field(default=None, alias="contentType")
    filesize: Optional[int] = None


class ConfirmRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: Optional[str] = None
    filename: Optional[str] = None
    filesize: Optional[int] = None
    content_type: Optional[str] = Field(default=None, alias="contentType")
    preview_thumbnail_data: Optional[str] = Field(default=None, alias="previewThumbnailData")
