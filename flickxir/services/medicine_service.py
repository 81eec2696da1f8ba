"""
Medicine catalog CRUD
"""
import logging
from typing import List

from sqlalchemy import or_
from sqlalchemy.orm import Session

from flickxir.exceptions import NotFoundError, ValidationError
from flickxir.models import Medicine
from flickxir.services.storage_service import StorageService, UploadedFile

logger = logging.getLogger(__name__)

MEDICINE_FIELDS = ("name", "description", "manufacturer", "dosage_form", "price", "image_url")


def create_medicine(db: Session, data: dict) -> Medicine:
    values = {key: data[key] for key in MEDICINE_FIELDS if data.get(key) is not None}
    if not (values.get("name") or "").strip():
        raise ValidationError("Medicine name is required")
    medicine = Medicine(**values)
    db.add(medicine)
    db.commit()
    db.refresh(medicine)
    return medicine


def get_all_medicines(db: Session) -> List[Medicine]:
    return db.query(Medicine).order_by(Medicine.created_at.desc(), Medicine.medicine_id.desc()).all()


def get_medicine_by_id(db: Session, medicine_id: int) -> Medicine:
    medicine = db.get(Medicine, medicine_id)
    if not medicine:
        raise NotFoundError("Medicine", medicine_id)
    return medicine


def update_medicine(db: Session, medicine_id: int, updates: dict) -> Medicine:
    medicine = get_medicine_by_id(db, medicine_id)
    for key in MEDICINE_FIELDS:
        if key in updates:
            setattr(medicine, key, updates[key])
    if not (medicine.name or "").strip():
        raise ValidationError("Medicine name is required")
    db.commit()
    db.refresh(medicine)
    return medicine


def delete_medicine(db: Session, medicine_id: int):
    medicine = get_medicine_by_id(db, medicine_id)
    db.delete(medicine)
    db.commit()


def search_medicines(db: Session, search_term: str, limit: int = 20) -> List[Medicine]:
    pattern = f"%{search_term}%"
    return (
        db.query(Medicine)
        .filter(or_(Medicine.name.ilike(pattern), Medicine.description.ilike(pattern)))
        .order_by(Medicine.name)
        .limit(limit)
        .all()
    )


def upload_medicine_image(storage: StorageService, file: UploadedFile) -> str:
    """Store a medicine image in the product images bucket and return its public URL"""
    url = storage.upload_medicine_image(file)
    logger.info(f"Uploaded medicine image {file.filename}")
    return url
