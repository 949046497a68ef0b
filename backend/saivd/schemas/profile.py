from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class PublicProfile(BaseModel):
    """Fields anyone may read; never includes email or keys."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    display_name: Optional[str] = None
    bio: Optional[str] = None
    photo: Optional[str] = None
    created_at: datetime


class OwnProfile(BaseModel):
    """What the signed-in user sees about themselves (no RSA fields)."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    photo: Optional[str] = None
    bio: Optional[str] = None
    numeric_user_id: Optional[int] = None
    twitter_url: Optional[str] = None
    instagram_url: Optional[str] = None
    facebook_url: Optional[str] = None
    youtube_url: Optional[str] = None
    tiktok_url: Optional[str] = None
    website_url: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = None
    bio: Optional[str] = None
    photo: Optional[str] = None
    twitter_url: Optional[str] = None
    instagram_url: Optional[str] = None
    facebook_url: Optional[str] = None
    youtube_url: Optional[str] = None
    tiktok_url: Optional[str] = None
    website_url: Optional[str] = None


class AdminUserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    numeric_user_id: Optional[int] = None
    display_name: Optional[str] = None
    email: str
    avatar_url: Optional[str] = None
    role: str


class AdminUserDetail(AdminUserSummary):
    twitter_url: Optional[str] = None
    instagram_url: Optional[str] = None
    facebook_url: Optional[str] = None
    youtube_url: Optional[str] = None
    tiktok_url: Optional[str] = None
    website_url: Optional[str] = None
    updated_at: Optional[datetime] = None


class AdminUserUpdate(BaseModel):
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    twitter_url: Optional[str] = None
    instagram_url: Optional[str] = None
    facebook_url: Optional[str] = None
    youtube_url: Optional[str] = None
    tiktok_url: Optional[str] = None
    website_url: Optional[str] = None
