"""
Account sign-up, sign-in and session handling
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from flickxir.config import SESSION_TTL_HOURS, PASSWORD_RESET_TTL_MINUTES
from flickxir.exceptions import AuthenticationError, ConflictError, FlickxirError, ValidationError
from flickxir.models import User, AuthSession, PasswordReset
from flickxir.services import user_profile_service
from flickxir.utils.security import hash_password, verify_password, generate_token
from flickxir.utils.validators import password_error, validate_sign_up

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def sign_up(db: Session, email: str, password: str, first_name: str, last_name: str,
            phone: str = "", address: str = "") -> User:
    """Create an account and its profile.

    The account survives a failed profile insert; the failure is logged and
    the profile can be created later through the profile endpoints.
    """
    errors = validate_sign_up(email, password, first_name, last_name, phone)
    if errors:
        raise ValidationError("Invalid sign-up details", errors=list(errors.values()))

    email = _normalize_email(email)
    if db.query(User).filter(User.email == email).first():
        raise ConflictError("An account with this email already exists")

    user = User(
        email=email,
        password=hash_password(password),
        full_name=f"{first_name.strip()} {last_name.strip()}".strip(),
        phone=phone,
    )
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except SQLAlchemyError:
        db.rollback()
        raise

    try:
        user_profile_service.create_user_profile(db, {
            "user_id": user.user_id,
            "first_name": first_name.strip(),
            "last_name": last_name.strip(),
            "email": email,
            "phone": phone,
            "address": address or "",
        })
    except (FlickxirError, SQLAlchemyError) as e:
        db.rollback()
        logger.error(f"Account {user.user_id} created but profile creation failed: {e}")

    logger.info(f"Signed up user {user.user_id}")
    return user


def sign_in(db: Session, email: str, password: str) -> Tuple[str, User]:
    user = db.query(User).filter(User.email == _normalize_email(email)).first()
    if not user or not verify_password(password or "", user.password):
        raise AuthenticationError("Invalid email or password")

    session = AuthSession(
        token=generate_token(),
        user_id=user.user_id,
        expires_at=_utcnow() + timedelta(hours=SESSION_TTL_HOURS),
    )
    db.add(session)
    db.commit()
    logger.info(f"User {user.user_id} signed in")
    return session.token, user


def sign_out(db: Session, token: str):
    deleted = db.query(AuthSession).filter(AuthSession.token == token).delete()
    db.commit()
    if deleted:
        logger.info("Session closed")


def get_user_for_token(db: Session, token: Optional[str]) -> User:
    if not token:
        raise AuthenticationError("Not authenticated")
    session = db.query(AuthSession).filter(AuthSession.token == token).first()
    if not session:
        raise AuthenticationError("Invalid session")
    if _as_utc(session.expires_at) <= _utcnow():
        db.delete(session)
        db.commit()
        raise AuthenticationError("Session expired")
    return session.user


def request_password_reset(db: Session, email: str) -> Optional[str]:
    """Issue a reset token; unknown addresses get None so callers cannot tell which accounts exist"""
    user = db.query(User).filter(User.email == _normalize_email(email)).first()
    if not user:
        logger.info("Password reset requested for unknown email")
        return None

    reset = PasswordReset(
        token=generate_token(),
        user_id=user.user_id,
        expires_at=_utcnow() + timedelta(minutes=PASSWORD_RESET_TTL_MINUTES),
    )
    db.add(reset)
    db.commit()
    # TODO: hand the token to a mail sender once one is configured
    logger.info(f"Password reset token issued for user {user.user_id}")
    return reset.token


def _set_password(db: Session, user: User, new_password: str):
    message = password_error(new_password)
    if message:
        raise ValidationError(message)
    user.password = hash_password(new_password)
    # every existing session is invalidated by a password change
    db.query(AuthSession).filter(AuthSession.user_id == user.user_id).delete()


def reset_password(db: Session, token: str, new_password: str):
    reset = db.query(PasswordReset).filter(PasswordReset.token == token).first()
    if not reset or reset.used or _as_utc(reset.expires_at) <= _utcnow():
        raise AuthenticationError("Reset link is invalid or has expired")

    _set_password(db, reset.user, new_password)
    reset.used = True
    db.commit()
    logger.info(f"Password reset for user {reset.user_id}")


def update_password(db: Session, user: User, new_password: str):
    _set_password(db, user, new_password)
    db.commit()
    logger.info(f"Password updated for user {user.user_id}")
