# saivd/models/video.py

import enum
import uuid

from sqlalchemy import BigInteger, Column, DateTime, Integer, String, Text, Uuid

from saivd.infra.postgres import Base
from saivd.models.profile import utcnow


class VideoStatus(str, enum.Enum):
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    PROCESSED = "processed"
    FAILED = "failed"


class Video(Base):
    """One row per uploaded video; bytes live in the bucket."""
    __tablename__ = "videos"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)

    filename = Column(Text, nullable=False)
    filesize = Column(BigInteger, nullable=False)
    content_type = Column(String(100), nullable=False)

    # Storage keys (older rows may hold full bucket URLs)
    original_url = Column(Text, nullable=False)
    original_thumbnail_url = Column(Text, nullable=True)
    processed_url = Column(Text, nullable=True)
    processed_thumbnail_url = Column(Text, nullable=True)
    preview_thumbnail_data = Column(Text, nullable=True)  # base64 from the browser

    title = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=True)

    status = Column(String(20), nullable=False, default=VideoStatus.UPLOADED.value, index=True)

    upload_date = Column(DateTime(timezone=True), default=utcnow, index=True)
    callback_received_at = Column(DateTime(timezone=True), nullable=True)
    notification_sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
