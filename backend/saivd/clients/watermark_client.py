# saivd/clients/watermark_client.py

import logging
from dataclasses import dataclass, field

import requests

from saivd.core.config import WATERMARK_SERVICE_TIMEOUT, WATERMARK_SERVICE_URL

logger = logging.getLogger(__name__)


class WatermarkServiceError(Exception):
    """The watermark service answered with a non-2xx status or an unreadable body."""

    def __init__(self, message: str, status_code: int | None = None, payload=None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


@dataclass
class QueueJob:
    job_id: str
    video_id: str | None = None
    timestamp: str | None = None
    status: str | None = None
    message: str | None = None
    path: str | None = None


@dataclass
class QueueStatus:
    jobs: list[QueueJob] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict | None) -> "QueueStatus":
        """
        The service reports the queue as parallel arrays keyed by field name:
        {"jobID": [...], "videoId": [...], "status": [...], "path": [...], ...}
        Shorter arrays are padded with None.
        """
        if not isinstance(payload, dict):
            return cls()
        job_ids = payload.get("jobID") or []
        if not isinstance(job_ids, list):
            return cls()

        def column(name):
            values = payload.get(name)
            return values if isinstance(values, list) else []

        def pick(values, i):
            value = values[i] if i < len(values) else None
            return None if value is None else str(value)

        video_ids, timestamps = column("videoId"), column("timestamp")
        statuses, messages, paths = column("status"), column("message"), column("path")

        jobs = [
            QueueJob(
                job_id=str(job_id),
                video_id=pick(video_ids, i),
                timestamp=pick(timestamps, i),
                status=pick(statuses, i),
                message=pick(messages, i),
                path=pick(paths, i),
            )
            for i, job_id in enumerate(job_ids)
        ]
        return cls(jobs=jobs)


class WatermarkServiceClient:
    """HTTP client for the external watermarking service."""

    def __init__(self, base_url: str = WATERMARK_SERVICE_URL, session: requests.Session | None = None,
                 timeout: float = WATERMARK_SERVICE_TIMEOUT):
        self.base_url = (base_url or "").rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    def _json(self, resp: requests.Response):
        try:
            return resp.json()
        except ValueError as e:
            raise WatermarkServiceError(
                "Watermark service returned an invalid response",
                status_code=resp.status_code,
            ) from e

    def request_watermark(self, body: dict) -> dict:
        """Submit a job. Returns the service's JSON reply."""
        logger.info("Requesting watermarking for user %s: %s -> %s",
                    body.get("user_id"), body.get("input_location"), body.get("output_location"))
        resp = self.session.post(self.base_url, json=body, timeout=self.timeout)
        payload = self._json(resp)
        if not resp.ok:
            message = payload.get("message") if isinstance(payload, dict) else None
            raise WatermarkServiceError(
                message or f"Watermark service error ({resp.status_code})",
                status_code=resp.status_code,
                payload=payload,
            )
        if not isinstance(payload, dict):
            raise WatermarkServiceError("Watermark service returned an invalid response",
                                        status_code=resp.status_code)
        return payload

    def queue_status(self, numeric_user_id: int) -> QueueStatus:
        resp = self.session.get(f"{self.base_url}/queue_status/{numeric_user_id}", timeout=self.timeout)
        if not resp.ok:
            raise WatermarkServiceError(
                f"queue_status failed ({resp.status_code})", status_code=resp.status_code
            )
        if not resp.text:
            return QueueStatus()
        return QueueStatus.from_payload(self._json(resp))

    def clear_queue(self, user_id: int, job_ids: list[str]) -> requests.Response:
        return self.session.post(
            f"{self.base_url}/clear_queue",
            json={"user_id": user_id, "job_ids": job_ids},
            headers={"Connection": "close"},
            timeout=self.timeout,
        )


def get_watermark_client() -> WatermarkServiceClient:
    return WatermarkServiceClient()
