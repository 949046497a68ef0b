# saivd/api/videos.py

"""Video listing, presigned upload/playback and deletion endpoints."""

import logging
import time
import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from saivd.api.deps import get_current_user
from saivd.clients.auth_client import AuthUser
from saivd.clients.watermark_client import WatermarkServiceClient, get_watermark_client
from saivd.core.config import ALLOWED_VIDEO_TYPES, MAX_FILE_SIZE, URL_EXPIRATION_SECONDS
from saivd.core.errors import error_response, not_found, success_response, validation_error
from saivd.core.profile import get_profile
from saivd.core.validation import parse_int
from saivd.core.video import (
    SORTABLE_COLUMNS,
    clear_processed,
    create_video,
    delete_video,
    get_user_video,
    list_user_videos,
)
from saivd.infra.postgres import get_db
from saivd.infra.s3 import resolve_storage_key, storage
from saivd.schemas.video import ConfirmRequest, UploadRequest, VideoOut
from saivd.services.watermark_queue import clear_watermark_queue_jobs_for_video

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/videos")


def _video_json(video) -> dict:
    return VideoOut.model_validate(video).model_dump(mode="json")


def _clear_queue_for(db: Session, user: AuthUser, video_id, client: WatermarkServiceClient) -> None:
    profile = get_profile(db, user.id)
    if profile is None or profile.numeric_user_id is None:
        return
    clear_watermark_queue_jobs_for_video(profile.numeric_user_id, str(video_id), client=client)


def _delete_object(key: str | None, what: str) -> None:
    if not key:
        return
    try:
        storage.delete(key)
    except Exception as e:
        # The row is removed regardless; a stray object is harmless
        logger.error("Error deleting %s %s from bucket: %s", what, key, e)


@router.get("")
def list_videos(
    page: str | None = None,
    limit: str | None = None,
    sortBy: str = "upload_date",
    sortOrder: str = "desc",
    contentType: str | None = None,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Caller's videos, paginated.

    Query: page (1), limit (20, max 100), sortBy (upload_date),
    sortOrder (asc|desc), contentType (optional filter).
    """
    page_num = parse_int(page, 1)
    limit_num = parse_int(limit, 20)
    if page_num is None or limit_num is None or page_num < 1 or limit_num < 1 or limit_num > 100:
        raise validation_error("Invalid pagination parameters")

    if sortBy not in SORTABLE_COLUMNS:
        raise validation_error(f"Invalid sort field. Supported: {', '.join(SORTABLE_COLUMNS)}")
    if sortOrder not in ("asc", "desc"):
        raise validation_error("Invalid sort order")

    videos, pagination = list_user_videos(
        db,
        user.id,
        page=page_num,
        limit=limit_num,
        sort_by=sortBy,
        sort_order=sortOrder,
        content_type=contentType,
    )
    return success_response({
        "videos": [_video_json(v) for v in videos],
        "pagination": pagination,
    })


@router.post("/upload")
def create_upload_url(payload: UploadRequest, user: AuthUser = Depends(get_current_user)):
    """Presigned POST for a direct browser upload to the bucket."""
    if not payload.filename or not payload.content_type or not payload.filesize:
        raise validation_error("Missing required fields")

    if payload.content_type not in ALLOWED_VIDEO_TYPES:
        raise validation_error(f"Invalid file type. Supported types: {', '.join(ALLOWED_VIDEO_TYPES)}")

    if payload.filesize > MAX_FILE_SIZE:
        raise validation_error(f"File too large. Maximum size: {MAX_FILE_SIZE // (1024 * 1024)}MB")

    extension = payload.filename.rsplit(".", 1)[-1]
    key = f"videos/{user.id}/{int(time.time() * 1000)}-{uuid.uuid4()}.{extension}"

    try:
        presigned = storage.presigned_post(key, payload.content_type, MAX_FILE_SIZE, URL_EXPIRATION_SECONDS)
    except Exception:
        logger.exception("Error creating presigned URL for %s", key)
        return error_response(500, "server_error", "Failed to create upload URL")

    return success_response({
        "uploadUrl": presigned["url"],
        "fields": presigned["fields"],
        "key": key,
    })


@router.post("/confirm")
def confirm_upload(payload: ConfirmRequest, user: AuthUser = Depends(get_current_user),
                   db: Session = Depends(get_db)):
    """Record a finished upload once the object is visible in the bucket."""
    if not payload.key or not payload.filename or not payload.filesize or not payload.content_type:
        raise validation_error("Missing required fields")

    # Only keys minted by /upload for this user
    if not payload.key.startswith(f"videos/{user.id}/"):
        raise validation_error("Invalid upload key")

    try:
        found = storage.exists(payload.key)
    except Exception as e:
        logger.error("Error verifying file %s in bucket: %s", payload.key, e)
        found = False
    if not found:
        raise not_found("Uploaded file not found or inaccessible")

    video = create_video(
        db,
        user_id=user.id,
        key=payload.key,
        filename=payload.filename,
        filesize=payload.filesize,
        content_type=payload.content_type,
        preview_thumbnail_data=payload.preview_thumbnail_data,
    )
    logger.info("Video %s confirmed for user %s", video.id, user.id)

    return success_response({
        "id": str(video.id),
        "key": payload.key,
        "filename": video.filename,
        "originalUrl": video.original_url,
        "thumbnailUrl": video.original_thumbnail_url,
        "uploadedAt": video.upload_date,
    })


@router.get("/{video_id}")
def get_video(video_id: str, user: AuthUser = Depends(get_current_user), db: Session = Depends(get_db)):
    video = get_user_video(db, video_id, user.id)
    if video is None:
        raise not_found("Video not found")
    return success_response(_video_json(video))


@router.delete("/{video_id}")
def remove_video(
    video_id: str,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: WatermarkServiceClient = Depends(get_watermark_client),
):
    """Delete the video, its bucket objects and any queued watermark jobs."""
    video = get_user_video(db, video_id, user.id)
    if video is None:
        raise not_found("Video not found")

    _delete_object(resolve_storage_key(video.original_url), "original")
    _delete_object(resolve_storage_key(video.processed_url), "watermarked")

    _clear_queue_for(db, user, video.id, client)

    delete_video(db, video)
    logger.info("Video %s deleted by user %s", video_id, user.id)

    return success_response({"message": "Video deleted successfully", "id": video_id})


@router.get("/{video_id}/play")
def playback_url(video_id: str, variant: str | None = None, user: AuthUser = Depends(get_current_user),
                 db: Session = Depends(get_db)):
    """Presigned GET for the original, or the watermarked copy with ?variant=watermarked."""
    video = get_user_video(db, video_id, user.id)
    if video is None:
        raise not_found("Video not found")

    if variant == "watermarked" and video.processed_url:
        key = resolve_storage_key(video.processed_url)
    else:
        key = resolve_storage_key(video.original_url)

    if not key:
        return error_response(500, "invalid_data", "Missing or invalid video storage key")

    try:
        url = storage.presigned_get(key)
    except Exception:
        logger.exception("Error generating playback URL for %s", key)
        return error_response(500, "server_error", "Failed to generate playback URL")

    return success_response({"playbackUrl": url})


@router.delete("/{video_id}/watermarked")
def remove_watermarked(
    video_id: str,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: WatermarkServiceClient = Depends(get_watermark_client),
):
    """Drop only the watermarked copy; the original and the row stay."""
    video = get_user_video(db, video_id, user.id)
    if video is None:
        raise not_found("Video not found")

    if not video.processed_url:
        raise not_found("Watermarked video not found")

    processed_key = resolve_storage_key(video.processed_url)
    if not processed_key:
        return error_response(500, "invalid_data", "Missing or invalid processed video storage key")

    _delete_object(processed_key, "watermarked")
    clear_processed(db, video)
    _clear_queue_for(db, user, video.id, client)

    return success_response({"message": "Watermarked video deleted successfully", "id": video_id})
