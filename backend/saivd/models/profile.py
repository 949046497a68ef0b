# saivd/models/profile.py

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, Sequence, String, Text, Uuid

from saivd.infra.postgres import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Profile(Base):
    __tablename__ = "profiles"

    # Same UUID as the hosted auth user (auth subject)
    id = Column(Uuid, primary_key=True, index=True)
    email = Column(String(320), nullable=False, default="")

    display_name = Column(String(100), nullable=True)
    avatar_url = Column(Text, nullable=True)
    bio = Column(Text, nullable=True)
    photo = Column(Text, nullable=True)

    twitter_url = Column(Text, nullable=True)
    instagram_url = Column(Text, nullable=True)
    facebook_url = Column(Text, nullable=True)
    youtube_url = Column(Text, nullable=True)
    tiktok_url = Column(Text, nullable=True)
    website_url = Column(Text, nullable=True)

    # Short id used in public URLs and by the watermark service
    numeric_user_id = Column(
        Integer,
        Sequence("profiles_numeric_user_id_seq"),
        unique=True,
        index=True,
        nullable=True,
    )

    # PEM encoded; the private half never leaves the backend
    rsa_public = Column(Text, nullable=True)
    rsa_private = Column(Text, nullable=True)

    role = Column(String(20), nullable=False, default="user")

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
