"""
User profile CRUD
"""
import logging

from sqlalchemy.orm import Session

from flickxir.exceptions import ConflictError, NotFoundError, ValidationError
from flickxir.models import UserProfile
from flickxir.utils.validators import is_valid_phone, is_valid_pincode

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "first_name", "last_name", "email", "phone", "address",
    "city", "state", "pincode", "gender", "avatar_url",
)


def _clean(data: dict) -> dict:
    values = {key: data[key] for key in PROFILE_FIELDS if key in data and data[key] is not None}
    if values.get("phone") and not is_valid_phone(values["phone"]):
        raise ValidationError("Please enter a valid 10-digit phone number")
    if values.get("pincode") and not is_valid_pincode(values["pincode"]):
        raise ValidationError("Please enter a valid 6-digit pincode")
    return values


def get_user_profile(db: Session, user_id: int) -> UserProfile:
    profile = db.query(UserProfile).filter(UserProfile.user_id == user_id).first()
    if not profile:
        raise NotFoundError("Profile for user", user_id)
    return profile


def profile_exists(db: Session, user_id: int) -> bool:
    return db.query(UserProfile.profile_id).filter(UserProfile.user_id == user_id).first() is not None


def create_user_profile(db: Session, profile_data: dict) -> UserProfile:
    user_id = profile_data.get("user_id")
    if user_id is None:
        raise ValidationError("user_id is required")
    if profile_exists(db, user_id):
        raise ConflictError(f"Profile for user {user_id} already exists")

    profile = UserProfile(user_id=user_id, **_clean(profile_data))
    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info(f"Created profile for user {user_id}")
    return profile


def update_user_profile(db: Session, user_id: int, updates: dict) -> UserProfile:
    profile = get_user_profile(db, user_id)
    for key, value in _clean(updates).items():
        setattr(profile, key, value)
    db.commit()
    db.refresh(profile)
    return profile


def upsert_user_profile(db: Session, profile_data: dict) -> UserProfile:
    """Insert the profile, or update it when one already exists for the user"""
    user_id = profile_data.get("user_id")
    if user_id is None:
        raise ValidationError("user_id is required")
    if profile_exists(db, user_id):
        return update_user_profile(db, user_id, profile_data)
    return create_user_profile(db, profile_data)
