from typing import Optional

from pydantic import BaseModel


class WatermarkCompletePayload(BaseModel):
    """Webhook body from the watermark service: one-element parallel arrays."""
    timestamp: Optional[list[Optional[str]]] = None
    jobID: Optional[list[int | str]] = None
    status: Optional[list[Optional[str]]] = None
    message: Optional[list[Optional[str]]] = None
    path: Optional[list[Optional[str]]] = None
    user_id: Optional[list[int | str]] = None
    videoId: Optional[list[Optional[str]]] = None

    @staticmethod
    def first(values):
        return values[0] if values else None
