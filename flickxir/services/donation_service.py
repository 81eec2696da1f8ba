"""
Medicine donations

Two flows exist: a donor picks catalog products to donate (Donation with
DonationItem lines), or describes a single medicine they hold, which must not
expire within six months (MedicineDonation).
"""
import calendar
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from flickxir.exceptions import NotFoundError, ValidationError
from flickxir.models import Donation, DonationItem, MedicineDonation, Product, DONATION_STATUSES
from flickxir.utils.validators import missing_fields, is_valid_email

logger = logging.getLogger(__name__)

MEDICINE_DONATION_FIELDS = [
    "medicine_name", "medicine_type", "quantity", "expiry_date",
    "condition", "donor_name", "donor_email", "donor_phone",
    "pickup_address", "city", "state", "pincode",
]
DONOR_FIELDS = ["name", "email", "phone", "address"]
MIN_SHELF_LIFE_MONTHS = 6


def add_months(day: date, months: int) -> date:
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def _parse_date(value) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError as e:
        raise ValidationError(f"Invalid expiry date: {value}") from e


def create_medicine_donation(db: Session, donation: dict, today: Optional[date] = None) -> MedicineDonation:
    missing = missing_fields(donation, MEDICINE_DONATION_FIELDS)
    if missing:
        raise ValidationError(f"{missing[0]} is required", errors=[f"{f} is required" for f in missing])
    if not is_valid_email(donation["donor_email"]):
        raise ValidationError("Please enter a valid email address")
    if int(donation["quantity"]) < 1:
        raise ValidationError("Quantity must be at least 1")

    expiry_date = _parse_date(donation["expiry_date"])
    if expiry_date <= add_months(today or date.today(), MIN_SHELF_LIFE_MONTHS):
        raise ValidationError("Medicine must have at least 6 months expiry date")

    record = MedicineDonation(
        medicine_name=donation["medicine_name"],
        medicine_type=donation["medicine_type"],
        quantity=int(donation["quantity"]),
        expiry_date=expiry_date,
        condition=donation["condition"],
        donor_name=donation["donor_name"],
        donor_email=donation["donor_email"].strip().lower(),
        donor_phone=donation["donor_phone"],
        pickup_address=donation["pickup_address"],
        city=donation["city"],
        state=donation["state"],
        pincode=donation["pincode"],
        notes=donation.get("notes") or "",
        status="pending",
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info(f"Medicine donation {record.medicine_donation_id} received from {record.donor_email}")
    return record


def get_donations_by_user(db: Session, donor_email: str) -> List[MedicineDonation]:
    return (
        db.query(MedicineDonation)
        .filter(MedicineDonation.donor_email == donor_email.strip().lower())
        .order_by(MedicineDonation.created_at.desc(), MedicineDonation.medicine_donation_id.desc())
        .all()
    )


def update_donation_status(db: Session, donation_id: int, status: str) -> MedicineDonation:
    if status not in DONATION_STATUSES:
        raise ValidationError(f"Unknown donation status: {status}")
    record = db.get(MedicineDonation, donation_id)
    if not record:
        raise NotFoundError("Donation", donation_id)
    record.status = status
    db.commit()
    db.refresh(record)
    return record


def create_donation(db: Session, user_id: Optional[int], donor: dict, items: List[dict]) -> Donation:
    """Record a donation of catalog products; each line snapshots the product's name and price"""
    if not items:
        raise ValidationError("Please select at least one medicine to donate.")
    if missing_fields(donor, DONOR_FIELDS):
        raise ValidationError("Please fill in all required fields.")

    donation = Donation(
        user_id=user_id,
        donor_name=donor["name"],
        donor_email=donor["email"].strip().lower(),
        donor_phone=donor["phone"],
        donor_address=donor["address"],
        message=donor.get("message") or "",
        status="pending",
    )
    total_items = 0
    for line in items:
        quantity = int(line.get("quantity") or 0)
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        product = db.get(Product, line["product_id"])
        if product is None:
            raise NotFoundError("Product", line["product_id"])
        donation.items.append(DonationItem(
            product_id=product.product_id,
            product_name=product.name,
            product_price=product.price,
            quantity=quantity,
        ))
        total_items += quantity
    donation.total_items = total_items

    try:
        db.add(donation)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating donation")
        raise
    db.refresh(donation)
    logger.info(f"Donation {donation.donation_id} of {total_items} items received")
    return donation


def get_user_item_donations(db: Session, user_id: int) -> List[Donation]:
    return (
        db.query(Donation)
        .options(joinedload(Donation.items))
        .filter(Donation.user_id == user_id)
        .order_by(Donation.created_at.desc(), Donation.donation_id.desc())
        .all()
    )
