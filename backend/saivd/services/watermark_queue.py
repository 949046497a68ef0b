# saivd/services/watermark_queue.py

import logging

from saivd.clients.watermark_client import (
    WatermarkServiceClient,
    WatermarkServiceError,
    get_watermark_client,
)

logger = logging.getLogger(__name__)


def clear_watermark_queue_jobs_for_video(
    numeric_user_id: int,
    video_id: str,
    client: WatermarkServiceClient | None = None,
) -> None:
    """
    Remove the user's queued watermark jobs that reference video_id.

    Best effort: fetches the user's queue, picks jobs whose videoId equals the
    trimmed video_id and clears them in one request. Every failure is logged;
    nothing is raised to the caller.
    """
    client = client or get_watermark_client()
    if not client.configured:
        logger.warning("clear_watermark_queue_jobs_for_video: WATERMARK_SERVICE_URL not set")
        return

    target = str(video_id or "").strip()
    if not target:
        return

    try:
        try:
            status = client.queue_status(numeric_user_id)
        except WatermarkServiceError as e:
            logger.warning(
                "queue_status unusable while clearing jobs for video %s: %s (status %s)",
                target, e, e.status_code,
            )
            return

        job_ids = [
            job.job_id
            for job in status.jobs
            if (job.video_id or "").strip() == target
        ]
        if not job_ids:
            return

        resp = client.clear_queue(numeric_user_id, job_ids)
        if not resp.ok:
            logger.warning(
                "clear_queue failed for video %s (status %s, %d jobs): %s",
                target, resp.status_code, len(job_ids), (resp.text or "")[:200],
            )
            return

        logger.info("Cleared %d watermark job(s) for video %s", len(job_ids), target)
    except Exception as e:
        logger.error("clear_watermark_queue_jobs_for_video error for video %s: %s", target, e)
