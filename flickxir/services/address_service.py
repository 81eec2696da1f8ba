"""
Saved delivery addresses
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from flickxir.exceptions import NotFoundError, ValidationError
from flickxir.models import Address
from flickxir.utils.validators import missing_fields, is_valid_phone, is_valid_pincode

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ["name", "phone", "address_line1", "city", "state", "pincode"]
ADDRESS_FIELDS = REQUIRED_FIELDS + ["address_line2", "is_default"]


def _validate(values: dict):
    missing = missing_fields(values, [f for f in REQUIRED_FIELDS if f in values])
    if missing:
        raise ValidationError("Please fill in all required fields", errors=[f"{f} is required" for f in missing])
    if "phone" in values and not is_valid_phone(values["phone"]):
        raise ValidationError("Please enter a valid 10-digit phone number")
    if "pincode" in values and not is_valid_pincode(values["pincode"]):
        raise ValidationError("Please enter a valid 6-digit pincode")


def _clear_default(db: Session, user_id: int, keep_id: Optional[int] = None):
    query = db.query(Address).filter(Address.user_id == user_id, Address.is_default == True)  # noqa: E712
    if keep_id is not None:
        query = query.filter(Address.address_id != keep_id)
    query.update({Address.is_default: False}, synchronize_session="fetch")


def get_user_addresses(db: Session, user_id: int) -> List[Address]:
    """Default address first, then newest first"""
    return (
        db.query(Address)
        .filter(Address.user_id == user_id)
        .order_by(Address.is_default.desc(), Address.created_at.desc(), Address.address_id.desc())
        .all()
    )


def get_default_address(db: Session, user_id: int) -> Optional[Address]:
    return (
        db.query(Address)
        .filter(Address.user_id == user_id, Address.is_default == True)  # noqa: E712
        .first()
    )


def get_address(db: Session, user_id: int, address_id: int) -> Address:
    address = (
        db.query(Address)
        .filter(Address.address_id == address_id, Address.user_id == user_id)
        .first()
    )
    if not address:
        raise NotFoundError("Address", address_id)
    return address


def select_checkout_address(addresses: List[Address]) -> Optional[Address]:
    """Pick the default-flagged address, else the first one"""
    for address in addresses:
        if address.is_default:
            return address
    return addresses[0] if addresses else None


def add_address(db: Session, user_id: int, address_data: dict) -> Address:
    values = {key: address_data.get(key) for key in ADDRESS_FIELDS}
    values["address_line2"] = values.get("address_line2") or ""
    values["is_default"] = bool(values.get("is_default"))
    _validate(values)

    try:
        if values["is_default"]:
            _clear_default(db, user_id)
        address = Address(user_id=user_id, **values)
        db.add(address)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error adding address for user {user_id}")
        raise
    db.refresh(address)
    return address


def update_address(db: Session, user_id: int, address_id: int, updates: dict) -> Address:
    address = get_address(db, user_id, address_id)
    values = {key: updates[key] for key in ADDRESS_FIELDS if key in updates and updates[key] is not None}
    _validate(values)

    try:
        if values.get("is_default"):
            _clear_default(db, user_id, keep_id=address_id)
        for key, value in values.items():
            setattr(address, key, value)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error updating address {address_id}")
        raise
    db.refresh(address)
    return address


def delete_address(db: Session, user_id: int, address_id: int):
    address = get_address(db, user_id, address_id)
    db.delete(address)
    db.commit()


def set_default_address(db: Session, user_id: int, address_id: int) -> Address:
    """Make one address the default, clearing the flag on the others in the same transaction"""
    address = get_address(db, user_id, address_id)
    try:
        _clear_default(db, user_id, keep_id=address_id)
        address.is_default = True
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error setting default address {address_id}")
        raise
    db.refresh(address)
    return address
