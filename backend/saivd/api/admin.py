# saivd/api/admin.py

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from saivd.api.deps import get_optional_user
from saivd.clients.auth_client import AuthUser
from saivd.core.errors import plain_error, success_response
from saivd.core.profile import (
    ADMIN_EDITABLE_FIELDS,
    get_profile,
    is_admin,
    list_profiles,
    update_profile,
)
from saivd.core.validation import is_valid_url, is_valid_uuid, parse_int
from saivd.infra.postgres import get_db
from saivd.schemas.profile import AdminUserDetail, AdminUserSummary, AdminUserUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/users")

MAX_URL_LENGTH = 2048


def _admin_check(user: AuthUser | None, db: Session) -> JSONResponse | None:
    """None when the caller is an admin, else the 401/403 response"""
    if user is None:
        return plain_error(401, "Authentication required")
    if not is_admin(get_profile(db, user.id)):
        logger.warning("Non-admin user %s called the admin API", user.id)
        return plain_error(403, "Admin access required")
    return None


@router.get("")
def list_users(
    page: str | None = None,
    limit: str | None = None,
    user: AuthUser | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Paginated profile list. Out-of-range paging is clamped, not rejected."""
    page_num = max(parse_int(page, 1) or 1, 1)
    limit_num = min(max(parse_int(limit, 20) or 20, 1), 100)

    denied = _admin_check(user, db)
    if denied is not None:
        return denied

    try:
        profiles, pagination = list_profiles(db, page=page_num, limit=limit_num)
    except SQLAlchemyError:
        logger.exception("Error fetching admin user list")
        return plain_error(500, "Failed to fetch users")

    return JSONResponse(content={
        "success": True,
        "data": [AdminUserSummary.model_validate(p).model_dump(mode="json") for p in profiles],
        "pagination": pagination,
    })


@router.get("/{user_id}")
def get_user(user_id: str, user: AuthUser | None = Depends(get_optional_user), db: Session = Depends(get_db)):
    if not is_valid_uuid(user_id):
        return plain_error(400, "Invalid user ID format")

    denied = _admin_check(user, db)
    if denied is not None:
        return denied

    profile = get_profile(db, user_id)
    if profile is None:
        return plain_error(404, "User not found")
    return success_response(AdminUserDetail.model_validate(profile).model_dump(mode="json"))


@router.put("/{user_id}")
def update_user(
    user_id: str,
    payload: AdminUserUpdate,
    user: AuthUser | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Edit another user's display name, avatar and social links."""
    if not is_valid_uuid(user_id):
        return plain_error(400, "Invalid user ID format")

    changes = payload.model_dump(exclude_unset=True)

    display_name = changes.get("display_name")
    if display_name and not 2 <= len(display_name) <= 50:
        return plain_error(400, "Display name must be between 2 and 50 characters")

    for name in ADMIN_EDITABLE_FIELDS:
        if name == "display_name" or name not in changes:
            continue
        value = changes[name]
        if not value:
            changes[name] = None
        elif len(value) > MAX_URL_LENGTH or not is_valid_url(value):
            return plain_error(400, f"Invalid URL for {name}")

    denied = _admin_check(user, db)
    if denied is not None:
        return denied

    profile = get_profile(db, user_id)
    if profile is None:
        return plain_error(404, "User not found")

    try:
        profile = update_profile(db, profile, changes, fields=ADMIN_EDITABLE_FIELDS)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error updating profile %s via admin", user_id)
        return plain_error(500, "Failed to update profile")

    logger.info("Admin %s updated profile %s", user.id, user_id)
    return success_response(AdminUserDetail.model_validate(profile).model_dump(mode="json"))
