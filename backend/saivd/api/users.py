# saivd/api/users.py

import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from saivd.api.deps import get_current_user
from saivd.clients.auth_client import AuthUser
from saivd.core.errors import error_response, success_response
from saivd.core.profile import get_profile_by_numeric_id
from saivd.core.rate_limit import PUBLIC_KEY_LIMIT, limiter
from saivd.core.validation import parse_positive_int
from saivd.infra.postgres import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

# Public-key lookups come from other frontends and backends
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "86400",
}


@router.get("/user")
def current_user(user: AuthUser = Depends(get_current_user)):
    """Basic info about the signed-in user"""
    return success_response({
        "user": {
            "id": user.id,
            "email": user.email,
            "name": user.user_metadata.get("name"),
            "avatar_url": user.user_metadata.get("avatar_url"),
        }
    })


@router.options("/users/{numeric_user_id}/public-key")
def public_key_preflight(numeric_user_id: str):
    return Response(status_code=204, headers=CORS_HEADERS)


@router.get("/users/{numeric_user_id}/public-key")
@limiter.limit(PUBLIC_KEY_LIMIT)
def get_user_public_key(request: Request, numeric_user_id: str, db: Session = Depends(get_db)):
    """Creator's RSA public key (PEM) for watermark verification"""
    id_num = parse_positive_int(numeric_user_id)
    if id_num is None:
        return error_response(400, "validation_error", "Invalid numeric user ID", headers=CORS_HEADERS)

    try:
        profile = get_profile_by_numeric_id(db, id_num)
    except Exception:
        logger.exception("Unexpected error in GET /api/users/%s/public-key", numeric_user_id)
        return error_response(500, "server_error", "Server error", headers=CORS_HEADERS)

    if profile is None:
        return error_response(404, "not_found", "User not found", headers=CORS_HEADERS)

    if not profile.rsa_public:
        return error_response(404, "not_found", "Public key not available for this user", headers=CORS_HEADERS)

    return success_response(
        {"public_key_pem": profile.rsa_public},
        headers={**CORS_HEADERS, "Cache-Control": "public, max-age=300"},
    )
