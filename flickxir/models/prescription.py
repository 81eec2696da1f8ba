"""
Prescription model
"""
from sqlalchemy import Column, Integer, String, DateTime, DECIMAL, ForeignKey, Text, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from flickxir.utils.database import Base

PRESCRIPTION_STATUSES = ("pending", "approved", "rejected")


class Prescription(Base):
    __tablename__ = "prescriptions"

    prescription_id = Column(Integer, primary_key=True, index=True)
    file_name = Column(String(500), nullable=False)
    file_url = Column(String(1000), nullable=False)
    status = Column(String(20), default="pending")
    extracted_data = Column(JSON)
    stock_status = Column(String(20))
    total_amount = Column(DECIMAL(10, 2))
    admin_notes = Column(Text)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="prescriptions")
    # deleting a prescription nulls Order.prescription_id
    orders = relationship("Order", back_populates="prescription")

    def __repr__(self):
        return f"<Prescription(id={self.prescription_id}, user_id={self.user_id}, status={self.status})>"
