# saivd/api/watermark.py

import hmac
import json
import logging

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from saivd.api.deps import get_current_user
from saivd.clients.auth_client import AuthUser
from saivd.clients.watermark_client import (
    WatermarkServiceClient,
    WatermarkServiceError,
    get_watermark_client,
)
from saivd.core import config
from saivd.core.crypto import verify_signature
from saivd.core.errors import error_response, not_found, success_response
from saivd.core.profile import ensure_rsa_keys, get_profile, get_profile_by_numeric_id
from saivd.core.video import (
    find_video_by_original_key,
    get_user_video,
    mark_processed,
    mark_processing,
)
from saivd.core.watermark import normalize_watermark_path, original_key_for, watermarked_key_for
from saivd.infra.postgres import get_db
from saivd.infra.s3 import resolve_storage_key
from saivd.models.profile import utcnow
from saivd.schemas.video import VideoOut
from saivd.schemas.watermark import WatermarkCompletePayload
from saivd.services.email import send_watermark_complete_email

logger = logging.getLogger(__name__)

router = APIRouter()

SIGNATURE_HEADER = "x-signature"


def _config_error():
    return error_response(500, "config_error", "WATERMARK_SERVICE_URL is not configured on the server")


# ══════════════════════════════════════════════════════════════════════════════
# Dispatch and status (signed-in user)
# ══════════════════════════════════════════════════════════════════════════════


@router.post("/api/videos/{video_id}/watermark")
def request_watermark(
    video_id: str,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: WatermarkServiceClient = Depends(get_watermark_client),
):
    """Send the video to the external watermark service."""
    if not client.configured:
        return _config_error()

    video = get_user_video(db, video_id, user.id)
    if video is None:
        logger.warning("Watermark: video %s not found or not owned by %s", video_id, user.id)
        raise not_found("Video not found")

    profile = get_profile(db, user.id)
    if profile is None or profile.numeric_user_id is None:
        logger.error("Watermark: missing profile or numeric_user_id for user %s", user.id)
        return error_response(400, "missing_profile_data", "User profile is missing required numeric user ID")

    try:
        rsa_private = ensure_rsa_keys(db, profile)
    except Exception:
        db.rollback()
        logger.exception("Watermark: error backfilling RSA keys for profile %s", profile.id)
        return error_response(500, "rsa_generation_error", "Failed to generate RSA keys for user profile")

    input_location = resolve_storage_key(video.original_url) or video.original_url
    body = {
        "input_location": input_location,
        "output_location": watermarked_key_for(input_location),
        "local_key": rsa_private,
        "client_key": rsa_private,
        "user_id": profile.numeric_user_id,
        "videoId": str(video.id),
    }

    try:
        payload = client.request_watermark(body)
    except WatermarkServiceError as e:
        logger.error("Watermark service error (status %s): %s", e.status_code, e)
        return error_response(502, "watermark_error", str(e) or "Failed to create watermarked video")
    except Exception as e:
        logger.error("Watermark service unreachable: %s", e)
        return error_response(502, "watermark_error", "Failed to reach the watermark service")

    if payload.get("status") == "success" and payload.get("path"):
        video = mark_processed(db, video, normalize_watermark_path(str(payload["path"])))
        return success_response(VideoOut.model_validate(video).model_dump(mode="json"))

    if payload.get("status") in ("error", "failed"):
        logger.error("Watermark service rejected job for video %s: %s", video.id, payload)
        return error_response(502, "watermark_error", payload.get("message") or "Failed to create watermarked video")

    # Queued: completion arrives through the webhook or the status poll
    video = mark_processing(db, video)
    return success_response(
        {"video": VideoOut.model_validate(video).model_dump(mode="json"), "job": payload},
        status=202,
    )


@router.get("/api/videos/watermark/status")
def watermark_status(
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: WatermarkServiceClient = Depends(get_watermark_client),
):
    """
    The caller's watermark queue. Successful jobs with a concrete path are
    applied to the matching video as they are seen.
    """
    if not client.configured:
        return _config_error()

    profile = get_profile(db, user.id)
    if profile is None or profile.numeric_user_id is None:
        return success_response({"jobs": []})

    try:
        queue = client.queue_status(profile.numeric_user_id)
    except WatermarkServiceError as e:
        logger.error("Failed to fetch watermark queue status: %s", e)
        return error_response(502, "watermark_status_error", "Failed to fetch watermark queue status")
    except Exception as e:
        logger.error("Watermark status service unreachable: %s", e)
        return error_response(502, "watermark_status_error", "Failed to fetch watermark queue status")

    jobs = []
    for job in queue.jobs:
        path_key = normalize_watermark_path(job.path) if job.path and job.path not in ("None", "Error") else None
        jobs.append({
            "jobId": job.job_id,
            "videoId": job.video_id,
            "timestamp": job.timestamp,
            "status": job.status,
            "message": job.message,
            "path": job.path,
            "pathKey": path_key,
        })

        if job.status != "success" or not path_key:
            continue

        try:
            video = None
            if job.video_id:
                video = get_user_video(db, job.video_id.strip(), user.id)
            if video is None:
                video = find_video_by_original_key(db, user.id, original_key_for(path_key))
            if video is None:
                logger.debug("No video for completed job %s", job.job_id)
                continue
            if video.processed_url != path_key:
                mark_processed(db, video, path_key)
        except Exception as e:
            db.rollback()
            logger.error("Failed to update video for completed job %s: %s", job.job_id, e)

    return success_response({"jobs": jobs})


# ══════════════════════════════════════════════════════════════════════════════
# Service-to-service callbacks
# ══════════════════════════════════════════════════════════════════════════════


@router.post("/api/webhooks/watermark-complete")
async def watermark_complete(request: Request, db: Session = Depends(get_db)):
    """
    Completion webhook. Authenticated by an HMAC-SHA256 of the raw body in
    the x-signature header; updates the video and emails the owner once.
    """
    secret = config.WATERMARK_CALLBACK_HMAC_SECRET
    if not secret:
        return error_response(500, "config_error", "Webhook not configured")

    raw_body = await request.body()
    if not verify_signature(raw_body, request.headers.get(SIGNATURE_HEADER), secret):
        logger.warning("Watermark webhook rejected: invalid HMAC signature")
        return error_response(401, "invalid_signature", "Invalid signature")

    try:
        body = WatermarkCompletePayload.model_validate(json.loads(raw_body))
    except (ValueError, ValidationError):
        return error_response(400, "invalid_payload", "Malformed callback body")

    # Lookups, commits and SMTP all block
    return await run_in_threadpool(_apply_completion, db, body)


def _apply_completion(db: Session, body: WatermarkCompletePayload):
    first = WatermarkCompletePayload.first
    status = first(body.status)
    path_value = first(body.path)
    callback_user_id = first(body.user_id)
    job_id = first(body.jobID)

    if callback_user_id is None or str(callback_user_id).strip() == "":
        return error_response(400, "invalid_payload", "Missing user_id in callback")

    if status != "success":
        logger.info("Watermark webhook: non-success callback job=%s user=%s status=%s message=%s",
                    job_id, callback_user_id, status, first(body.message) or "(none)")
        return {"received": True}

    if not path_value or path_value == "Error":
        return error_response(400, "invalid_payload", "Invalid or missing path for success callback")

    try:
        numeric_user_id = int(str(callback_user_id).strip())
    except ValueError:
        return error_response(400, "invalid_payload", "Invalid user_id format")

    path_key = normalize_watermark_path(path_value)
    logger.info("Watermark webhook: success job=%s user=%s path=%s", job_id, numeric_user_id, path_key)

    profile = get_profile_by_numeric_id(db, numeric_user_id)
    if profile is None:
        logger.warning("Watermark webhook: user not found for numeric_user_id %s", numeric_user_id)
        return error_response(404, "not_found", "User not found")

    video = None
    callback_video_id = (first(body.videoId) or "").strip()
    if callback_video_id:
        video = get_user_video(db, callback_video_id, profile.id)
    if video is None:
        video = find_video_by_original_key(db, profile.id, original_key_for(path_key))
    if video is None:
        logger.warning("Watermark webhook: video not found (user=%s videoId=%s)", profile.id, callback_video_id)
        return error_response(404, "not_found", "Video not found for this user and path")

    video = mark_processed(db, video, path_key, via_callback=True)
    logger.info("Watermark webhook: video %s updated (%s)", video.id, video.filename)

    if video.notification_sent_at is None and video.filename and profile.email:
        try:
            send_watermark_complete_email(profile.email, video.filename, profile.display_name)
            video.notification_sent_at = utcnow()
            db.commit()
            logger.info("Watermark webhook: completion email sent for video %s", video.id)
        except Exception as e:
            db.rollback()
            logger.error("Watermark webhook: failed to send completion email for video %s: %s", video.id, e)

    return {"received": True}


@router.post("/api/callbacks/watermark")
def watermark_callback(payload: dict, token: str | None = None):
    """
    Per-job callback with a shared token in ?token=. Only acknowledged and
    logged; video state is updated by the completion webhook.
    """
    if not token:
        logger.error("Missing token in watermarking callback")
        return error_response(401, "invalid_token", "Missing token")

    expected = config.WATERMARK_CALLBACK_TOKEN
    if expected and not _tokens_match(token, expected):
        logger.warning("Watermarking callback with unknown token")
        return error_response(401, "invalid_token", "Invalid token")

    if not payload.get("jobId") or not payload.get("status"):
        logger.error("Invalid payload in watermarking callback: %s", payload)
        return error_response(400, "invalid_payload", "Missing required fields")

    logger.info(
        "Watermarking callback received: job=%s status=%s result=%s error=%s",
        payload.get("jobId"), payload.get("status"), payload.get("result"), payload.get("error"),
    )
    return {"success": True, "message": "Callback received successfully"}


def _tokens_match(given: str, expected: str) -> bool:
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))
