# saivd/core/config.py

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the repo root (two levels above backend/saivd/)
_root = Path(__file__).resolve().parent.parent.parent.parent
load_dotenv(_root / ".env")

# =========================
# DATABASE
# =========================

DB_USER = os.getenv("DB_USER", "saivd")
DB_PASS = os.getenv("DB_PASS", "saivd")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME", "saivd")

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)

# =========================
# HOSTED AUTH
# =========================

SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
AUTH_ACCESS_COOKIE = os.getenv("AUTH_ACCESS_COOKIE", "sb-access-token")
AUTH_REFRESH_COOKIE = os.getenv("AUTH_REFRESH_COOKIE", "sb-refresh-token")
AUTH_TIMEOUT = float(os.getenv("AUTH_TIMEOUT", "10"))

# =========================
# OBJECT STORE (S3-compatible)
# =========================

WASABI_REGION = os.getenv("WASABI_REGION", "us-east-1")
WASABI_ENDPOINT = os.getenv("WASABI_ENDPOINT", "https://s3.wasabisys.com")
WASABI_ACCESS_KEY_ID = os.getenv("WASABI_ACCESS_KEY_ID")
WASABI_SECRET_ACCESS_KEY = os.getenv("WASABI_SECRET_ACCESS_KEY")
WASABI_BUCKET_NAME = os.getenv("WASABI_BUCKET_NAME", "")

MAX_FILE_SIZE = 500 * 1024 * 1024  # 500 MB
ALLOWED_VIDEO_TYPES = ["video/mp4", "video/quicktime", "video/x-msvideo", "video/webm"]
URL_EXPIRATION_SECONDS = 3600

# =========================
# WATERMARK SERVICE
# =========================

WATERMARK_SERVICE_URL = os.getenv("WATERMARK_SERVICE_URL", "").rstrip("/")
WATERMARK_SERVICE_TIMEOUT = float(os.getenv("WATERMARK_SERVICE_TIMEOUT", "30"))
WATERMARK_CALLBACK_TOKEN = os.getenv("WATERMARK_CALLBACK_TOKEN", "")
WATERMARK_CALLBACK_HMAC_SECRET = os.getenv("WATERMARK_CALLBACK_HMAC_SECRET", "")

# =========================
# EMAIL (SES SMTP)
# =========================

SES_SMTP_HOST = os.getenv("SES_SMTP_HOST", "")
SES_SMTP_PORT = int(os.getenv("SES_SMTP_PORT", "587"))
SES_SMTP_USER = os.getenv("SES_SMTP_USER", "")
SES_SMTP_PASS = os.getenv("SES_SMTP_PASS", "")
SES_FROM_EMAIL = os.getenv("SES_FROM_EMAIL", "")
SES_FROM_NAME = os.getenv("SES_FROM_NAME", "SAIVD")

# =========================
# APP
# =========================

PUBLIC_APP_URL = os.getenv("PUBLIC_APP_URL", "http://localhost:3000").rstrip("/")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
PUBLIC_KEY_RATE_LIMIT = os.getenv("PUBLIC_KEY_RATE_LIMIT", "10/minute")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
