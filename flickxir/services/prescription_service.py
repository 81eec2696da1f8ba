"""
Prescription upload, mocked extraction and review
"""
import copy
import logging
import time
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from flickxir.config import PRESCRIPTION_PROCESSING_DELAY
from flickxir.exceptions import NotFoundError, ValidationError, StorageError
from flickxir.models import Prescription, Product, PRESCRIPTION_STATUSES
from flickxir.services.storage_service import StorageService, UploadedFile

logger = logging.getLogger(__name__)

# Stand-in for a real extraction model: every document yields the same result
MOCK_EXTRACTION = {
    "medicines": [
        {"name": "Paracetamol 500mg", "dosage": "1 tablet 3 times daily", "quantity": 30, "in_stock": True, "price": 25},
        {"name": "Amoxicillin 250mg", "dosage": "1 capsule twice daily", "quantity": 20, "in_stock": True, "price": 45},
        {"name": "Vitamin C 1000mg", "dosage": "1 tablet daily", "quantity": 60, "in_stock": False, "price": 120},
    ],
    "patient_name": "John Doe",
    "doctor_name": "Dr. Smith",
    "prescription_date": "2025-01-15",
    "total_amount": 190,
}


def reconcile_with_catalog(db: Session, medicines: List[dict]) -> List[dict]:
    """Overlay stock and price from catalog products whose name matches an extracted medicine"""
    reconciled = []
    for medicine in medicines:
        entry = dict(medicine)
        product = (
            db.query(Product)
            .filter(func.lower(Product.name) == medicine["name"].lower(), Product.is_active == True)  # noqa: E712
            .first()
        )
        if product is not None:
            entry["product_id"] = product.product_id
            entry["in_stock"] = bool(product.in_stock) and (product.stock_quantity or 0) >= medicine["quantity"]
            entry["price"] = float(product.price)
        reconciled.append(entry)
    return reconciled


def process_prescription(db: Session, file: Optional[UploadedFile], delay: float = None) -> dict:
    """Run the mocked extraction over an uploaded prescription.

    Returns the extracted data and a stock status of "available" when every
    medicine is in stock, else "partial".
    """
    if file is None:
        raise ValidationError("Please upload a prescription first")

    delay = PRESCRIPTION_PROCESSING_DELAY if delay is None else delay
    if delay > 0:
        time.sleep(delay)

    extracted = copy.deepcopy(MOCK_EXTRACTION)
    extracted["medicines"] = reconcile_with_catalog(db, extracted["medicines"])
    stock_status = "available" if all(m["in_stock"] for m in extracted["medicines"]) else "partial"
    logger.info(f"Processed prescription {file.filename}: {stock_status}")
    return {"extracted_data": extracted, "stock_status": stock_status}


def upload_prescription(db: Session, storage: StorageService, user_id: int, file: UploadedFile,
                        extracted_data: Optional[dict] = None, stock_status: Optional[str] = None,
                        total_amount=None) -> Prescription:
    """Store the document then insert the record; the stored object is removed if the insert fails"""
    path, url = storage.upload_prescription(file, user_id)

    if total_amount is None and extracted_data:
        total_amount = extracted_data.get("total_amount")

    prescription = Prescription(
        user_id=user_id,
        file_name=path,
        file_url=url,
        status="pending",
        extracted_data=extracted_data,
        stock_status=stock_status,
        total_amount=Decimal(str(total_amount)) if total_amount is not None else None,
    )
    try:
        db.add(prescription)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Saving prescription for user {user_id} failed, removing {path}")
        storage.delete_prescription(path)
        raise

    db.refresh(prescription)
    logger.info(f"Prescription {prescription.prescription_id} uploaded by user {user_id}")
    return prescription


def get_user_prescriptions(db: Session, user_id: int) -> List[Prescription]:
    return (
        db.query(Prescription)
        .filter(Prescription.user_id == user_id)
        .order_by(Prescription.created_at.desc(), Prescription.prescription_id.desc())
        .all()
    )


def get_prescription_by_id(db: Session, prescription_id: int, user_id: Optional[int] = None) -> Prescription:
    query = db.query(Prescription).filter(Prescription.prescription_id == prescription_id)
    if user_id is not None:
        query = query.filter(Prescription.user_id == user_id)
    prescription = query.first()
    if not prescription:
        raise NotFoundError("Prescription", prescription_id)
    return prescription


def get_all_prescriptions(db: Session, status: Optional[str] = None) -> List[Prescription]:
    query = db.query(Prescription).order_by(Prescription.created_at.desc(), Prescription.prescription_id.desc())
    if status:
        query = query.filter(Prescription.status == status)
    return query.all()


def update_prescription_status(db: Session, prescription_id: int, status: str,
                               admin_notes: Optional[str] = None) -> Prescription:
    if status not in PRESCRIPTION_STATUSES:
        raise ValidationError(f"Unknown prescription status: {status}")
    prescription = get_prescription_by_id(db, prescription_id)
    prescription.status = status
    if admin_notes:
        prescription.admin_notes = admin_notes
    db.commit()
    db.refresh(prescription)
    return prescription


def delete_prescription(db: Session, storage: StorageService, prescription_id: int,
                        user_id: Optional[int] = None):
    """Delete the record, detaching any orders that used it, then remove the stored document"""
    prescription = get_prescription_by_id(db, prescription_id, user_id)
    file_name = prescription.file_name
    try:
        db.delete(prescription)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error deleting prescription {prescription_id}")
        raise

    if file_name:
        try:
            storage.delete_prescription(file_name)
        except StorageError as e:
            logger.warning(f"Failed to delete file {file_name}: {e}")
    logger.info(f"Deleted prescription {prescription_id}")
