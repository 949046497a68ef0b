# saivd/api/profile.py

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from saivd.api.deps import get_optional_user
from saivd.clients.auth_client import AuthUser
from saivd.core.errors import plain_error, success_response
from saivd.core.profile import SOCIAL_FIELDS, create_profile, get_profile, update_profile
from saivd.core.validation import is_valid_url, is_valid_uuid, sanitize_string
from saivd.infra.postgres import get_db
from saivd.schemas.profile import OwnProfile, ProfileUpdate, PublicProfile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profile")

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@router.get("")
def get_own_profile(user: AuthUser | None = Depends(get_optional_user), db: Session = Depends(get_db)):
    """Signed-in user's profile; created on first visit."""
    if user is None:
        return plain_error(401, "Authentication required")

    try:
        profile = get_profile(db, user.id)
        if profile is None:
            logger.info("Profile not found, creating new profile for user %s", user.id)
            profile = create_profile(db, user.id, user.email, user.user_metadata)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error loading or creating profile for user %s", user.id)
        return plain_error(500, "Failed to fetch profile")

    return success_response(OwnProfile.model_validate(profile).model_dump(mode="json"))


@router.put("")
def update_own_profile(
    payload: ProfileUpdate,
    user: AuthUser | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    if user is None:
        return plain_error(401, "Authentication required")

    changes = payload.model_dump(exclude_unset=True)

    display_name = changes.get("display_name")
    if display_name is not None:
        if len(display_name.strip()) < 2:
            return plain_error(400, "Display name must be at least 2 characters")
        changes["display_name"] = sanitize_string(display_name, max_length=100)

    bio = changes.get("bio")
    if bio is not None:
        if len(bio) > 500:
            return plain_error(400, "Bio cannot exceed 500 characters")
        changes["bio"] = sanitize_string(bio, max_length=500)

    for name in SOCIAL_FIELDS + ("photo",):
        value = changes.get(name)
        if value:
            if not is_valid_url(value):
                return plain_error(400, f"Invalid URL for {name}")
        elif name in changes:
            changes[name] = None  # empty string clears the link

    profile = get_profile(db, user.id)
    if profile is None:
        return plain_error(404, "Profile not found")

    try:
        profile = update_profile(db, profile, changes)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error updating profile for user %s", user.id)
        return plain_error(500, "Failed to update profile")

    return success_response(OwnProfile.model_validate(profile).model_dump(mode="json"))


@router.get("/{user_id}")
def get_public_profile(user_id: str, db: Session = Depends(get_db)):
    """
    Public profile by auth user id. No authentication; only the public
    field set is returned.
    """
    if not is_valid_uuid(user_id):
        logger.info("Invalid user ID format provided: %s", user_id)
        return plain_error(400, "Invalid user ID format")

    try:
        try:
            profile = get_profile(db, user_id)
        except SQLAlchemyError:
            # Log for debugging but don't expose details
            logger.exception("Database error fetching profile %s", user_id)
            return plain_error(404, "User not found")

        if profile is None:
            logger.info("Profile not found for user ID: %s", user_id)
            return plain_error(404, "User not found")

        data = PublicProfile.model_validate(profile).model_dump(mode="json")
    except Exception:
        logger.exception("Unexpected error in profile API")
        return plain_error(500, "Server error")

    return success_response(data, headers=NO_CACHE_HEADERS)
