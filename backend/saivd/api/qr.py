# saivd/api/qr.py

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from saivd.core.errors import error_response
from saivd.core.profile import get_profile_by_numeric_id
from saivd.core.validation import parse_positive_int
from saivd.infra.postgres import get_db
from saivd.services.qr_codes import generate_and_upload_user_qr_code, get_user_qr_code_image

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/profile/{user_id}/qr")
def profile_qr_code(user_id: str, db: Session = Depends(get_db)):
    """PNG QR code pointing at the creator's public profile page"""
    numeric_user_id = parse_positive_int(user_id)
    if numeric_user_id is None:
        return error_response(400, "validation_error", "Invalid user ID")

    if get_profile_by_numeric_id(db, numeric_user_id) is None:
        return error_response(404, "not_found", "User not found")

    try:
        generate_and_upload_user_qr_code(numeric_user_id)
    except Exception:
        logger.exception("Failed to generate QR code for user %s", numeric_user_id)
        return error_response(500, "qr_error", "Failed to generate QR code")

    png = get_user_qr_code_image(numeric_user_id)
    if png is None:
        return error_response(500, "qr_error", "Failed to load QR code")

    return Response(content=png, media_type="image/png", headers={"Cache-Control": "public, max-age=60"})
