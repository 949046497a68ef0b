# saivd/main.py

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from saivd.api import admin, profile, qr, users, videos, watermark
from saivd.api.deps import session_cookie_middleware
from saivd.core.config import CORS_ORIGINS
from saivd.core.errors import ApiError, error_response
from saivd.core.rate_limit import limiter
from saivd.utils.logger import setup_logger

setup_logger()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="SAIVD Backend",
    version="1.0.0",
    description="Creator video uploads with invisible watermarking",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.middleware("http")(session_cookie_middleware)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return error_response(exc.status_code, exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return error_response(400, "validation_error", message)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "server_error", "Server error")


# Register routers (watermark first: /api/videos/watermark/status)
app.include_router(watermark.router, tags=["Watermark"])
app.include_router(videos.router, tags=["Videos"])
app.include_router(profile.router, tags=["Profile"])
app.include_router(users.router, tags=["Users"])
app.include_router(qr.router, tags=["QR"])
app.include_router(admin.router, tags=["Admin"])


@app.get("/health")
def health_check():
    return {"status": "ok"}
