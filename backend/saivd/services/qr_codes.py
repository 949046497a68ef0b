# saivd/services/qr_codes.py

import io
import logging

import qrcode

from saivd.core.config import PUBLIC_APP_URL
from saivd.infra.s3 import ObjectStorage, storage

logger = logging.getLogger(__name__)


def get_user_public_profile_url(numeric_user_id: int, base_url: str = PUBLIC_APP_URL) -> str:
    if not base_url:
        raise RuntimeError("App base URL is not configured. Set PUBLIC_APP_URL.")
    return f"{base_url.rstrip('/')}/profile/{numeric_user_id}"


def get_user_qr_code_key(numeric_user_id: int) -> str:
    return f"qr-codes/{numeric_user_id}.png"


def render_qr_png(content: str) -> bytes:
    qr = qrcode.QRCode(border=1, box_size=6)
    qr.add_data(content)
    qr.make(fit=True)
    image = qr.make_image()

    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def generate_and_upload_user_qr_code(numeric_user_id: int, store: ObjectStorage = storage) -> str:
    """Render the profile-link QR code and overwrite it in the bucket. Returns the key."""
    png = render_qr_png(get_user_public_profile_url(numeric_user_id))
    key = get_user_qr_code_key(numeric_user_id)
    store.put_bytes(key, png, "image/png")
    return key


def get_user_qr_code_image(numeric_user_id: int, store: ObjectStorage = storage) -> bytes | None:
    key = get_user_qr_code_key(numeric_user_id)
    try:
        return store.get_bytes(key)
    except Exception as e:
        logger.error("Error fetching QR code %s from bucket: %s", key, e)
        return None
