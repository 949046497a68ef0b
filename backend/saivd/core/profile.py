# saivd/core/profile.py

import logging
import math
import uuid

from sqlalchemy.orm import Session

from saivd.core.crypto import generate_rsa_keypair
from saivd.models.profile import Profile, utcnow

logger = logging.getLogger(__name__)

SOCIAL_FIELDS = (
    "twitter_url",
    "instagram_url",
    "facebook_url",
    "youtube_url",
    "tiktok_url",
    "website_url",
)

EDITABLE_FIELDS = ("display_name", "bio", "photo") + SOCIAL_FIELDS

ADMIN_EDITABLE_FIELDS = ("display_name", "avatar_url") + SOCIAL_FIELDS

ADMIN_ROLE = "admin"


def get_profile(db: Session, user_id) -> Profile | None:
    """Get a profile by auth user id (UUID or its string form)"""
    if isinstance(user_id, str):
        user_id = uuid.UUID(user_id)
    return db.query(Profile).filter(Profile.id == user_id).first()


def get_profile_by_numeric_id(db: Session, numeric_user_id: int) -> Profile | None:
    return db.query(Profile).filter(Profile.numeric_user_id == numeric_user_id).first()


def create_profile(db: Session, user_id: str, email: str | None, user_metadata: dict | None = None) -> Profile:
    """Create the profile for a first sign-in, with a fresh RSA key pair"""
    user_metadata = user_metadata or {}
    email = email or ""

    display_name = user_metadata.get("display_name") or (email.split("@")[0] if email else None)
    public_pem, private_pem = generate_rsa_keypair()

    profile = Profile(
        id=uuid.UUID(str(user_id)),
        email=email,
        display_name=display_name,
        avatar_url=user_metadata.get("avatar_url"),
        rsa_public=public_pem,
        rsa_private=private_pem,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info("Created profile for user %s", user_id)
    return profile


def update_profile(db: Session, profile: Profile, changes: dict, fields=EDITABLE_FIELDS) -> Profile:
    """Apply edits; keys outside fields are ignored"""
    for name, value in changes.items():
        if name in fields:
            setattr(profile, name, value)
    profile.updated_at = utcnow()
    db.commit()
    db.refresh(profile)
    return profile


def ensure_rsa_keys(db: Session, profile: Profile) -> str:
    """Return the private PEM, generating and storing a key pair if missing"""
    if profile.rsa_private:
        return profile.rsa_private

    logger.info("Profile %s missing RSA keys, generating new keypair", profile.id)
    public_pem, private_pem = generate_rsa_keypair()
    profile.rsa_public = public_pem
    profile.rsa_private = private_pem
    profile.updated_at = utcnow()
    db.commit()
    return private_pem


def is_admin(profile: Profile | None) -> bool:
    return profile is not None and profile.role == ADMIN_ROLE


def list_profiles(db: Session, *, page: int = 1, limit: int = 20) -> tuple[list[Profile], dict]:
    """All profiles ordered by numeric id, for the admin user list"""
    query = db.query(Profile)
    total = query.count()
    profiles = (
        query.order_by(Profile.numeric_user_id.asc(), Profile.id)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": math.ceil(total / limit) if total else 0,
    }
    return profiles, pagination
