# saivd/core/video.py

import math
import uuid

from sqlalchemy.orm import Session

from saivd.models.profile import utcnow
from saivd.models.video import Video, VideoStatus

SORTABLE_COLUMNS = {
    "upload_date": Video.upload_date,
    "created_at": Video.created_at,
    "updated_at": Video.updated_at,
    "filename": Video.filename,
    "filesize": Video.filesize,
    "status": Video.status,
    "title": Video.title,
}


def _as_uuid(value) -> uuid.UUID | None:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        return None


def get_user_video(db: Session, video_id, user_id) -> Video | None:
    """A video only if it belongs to user_id; malformed ids simply match nothing"""
    vid, uid = _as_uuid(video_id), _as_uuid(user_id)
    if vid is None or uid is None:
        return None
    return db.query(Video).filter(Video.id == vid, Video.user_id == uid).first()


def list_user_videos(
    db: Session,
    user_id,
    *,
    page: int = 1,
    limit: int = 20,
    sort_by: str = "upload_date",
    sort_order: str = "desc",
    content_type: str | None = None,
) -> tuple[list[Video], dict]:
    query = db.query(Video).filter(Video.user_id == _as_uuid(user_id))
    if content_type:
        query = query.filter(Video.content_type == content_type)

    total = query.count()

    column = SORTABLE_COLUMNS[sort_by]
    order = column.asc() if sort_order == "asc" else column.desc()
    videos = (
        query.order_by(order, Video.id)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": math.ceil(total / limit) if total else 0,
    }
    return videos, pagination


def create_video(
    db: Session,
    *,
    user_id,
    key: str,
    filename: str,
    filesize: int,
    content_type: str,
    preview_thumbnail_data: str | None = None,
) -> Video:
    video = Video(
        user_id=_as_uuid(user_id),
        filename=filename,
        filesize=filesize,
        content_type=content_type,
        original_url=key,
        original_thumbnail_url=None,
        preview_thumbnail_data=preview_thumbnail_data,
        status=VideoStatus.UPLOADED.value,
        upload_date=utcnow(),
    )
    db.add(video)
    db.commit()
    db.refresh(video)
    return video


def find_video_by_original_key(db: Session, user_id, original_key: str) -> Video | None:
    return (
        db.query(Video)
        .filter(Video.user_id == _as_uuid(user_id), Video.original_url == original_key)
        .first()
    )


def mark_processed(db: Session, video: Video, processed_key: str, *, via_callback: bool = False) -> Video:
    now = utcnow()
    video.processed_url = processed_key
    # Reuse the original thumbnail until the watermarked copy gets its own
    video.processed_thumbnail_url = video.original_thumbnail_url
    video.status = VideoStatus.PROCESSED.value
    video.updated_at = now
    if via_callback:
        video.callback_received_at = now
    db.commit()
    db.refresh(video)
    return video


def mark_processing(db: Session, video: Video) -> Video:
    video.status = VideoStatus.PROCESSING.value
    video.updated_at = utcnow()
    db.commit()
    db.refresh(video)
    return video


def clear_processed(db: Session, video: Video) -> Video:
    video.processed_url = None
    video.processed_thumbnail_url = None
    video.status = VideoStatus.UPLOADED.value
    video.updated_at = utcnow()
    db.commit()
    db.refresh(video)
    return video


def delete_video(db: Session, video: Video) -> None:
    db.delete(video)
    db.commit()
