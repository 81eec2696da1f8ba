"""
Form validation rules shared by the sign-up, address, profile and donation flows
"""
import re

from email_validator import EmailNotValidError, validate_email

PHONE_PATTERN = r"^[0-9]{10}$"
PINCODE_PATTERN = r"^[0-9]{6}$"

PHONE_RE = re.compile(PHONE_PATTERN)
PINCODE_RE = re.compile(PINCODE_PATTERN)

MIN_PASSWORD_LENGTH = 6
# bcrypt only hashes the first 72 bytes and refuses longer input
MAX_PASSWORD_BYTES = 72


def is_valid_email(email: str) -> bool:
    if not email:
        return False
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_valid_phone(phone: str) -> bool:
    return bool(phone) and bool(PHONE_RE.match(phone))


def is_valid_pincode(pincode: str) -> bool:
    return bool(pincode) and bool(PINCODE_RE.match(pincode))


def password_error(password: str):
    """Return the message for a password that cannot be used, else None"""
    if not password:
        return "Password is required"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
    return None


def missing_fields(data: dict, required: list) -> list:
    """Return the required keys whose value is absent or blank"""
    missing = []
    for field in required:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing


def validate_sign_up(email: str, password: str, first_name: str, last_name: str, phone: str) -> dict:
    """Return a field -> message mapping; empty when the form is valid"""
    errors = {}
    if not (first_name or "").strip():
        errors["first_name"] = "First name is required"
    if not (last_name or "").strip():
        errors["last_name"] = "Last name is required"
    if not (email or "").strip():
        errors["email"] = "Email is required"
    elif not is_valid_email(email.strip()):
        errors["email"] = "Please enter a valid email address"
    message = password_error(password)
    if message:
        errors["password"] = message
    if not (phone or "").strip():
        errors["phone"] = "Phone number is required"
    elif not is_valid_phone(phone):
        errors["phone"] = "Please enter a valid 10-digit phone number"
    return errors
