"""
Donation models: catalog-item donations and single medicine donations
"""
from sqlalchemy import Column, Integer, String, DateTime, Date, DECIMAL, ForeignKey, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from flickxir.utils.database import Base

DONATION_STATUSES = ("pending", "approved", "collected", "rejected")


class Donation(Base):
    __tablename__ = "donations"

    donation_id = Column(Integer, primary_key=True, index=True)
    donor_name = Column(String(200), nullable=False)
    donor_email = Column(String(255), nullable=False)
    donor_phone = Column(String(20), nullable=False)
    donor_address = Column(Text, nullable=False)
    message = Column(Text, default="")
    status = Column(String(20), default="pending")
    total_items = Column(Integer, default=0)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="donations")
    items = relationship(
        "DonationItem",
        back_populates="donation",
        cascade="all, delete-orphan",
        order_by="DonationItem.donation_item_id",
    )

    def __repr__(self):
        return f"<Donation(id={self.donation_id}, items={self.total_items}, status={self.status})>"


class DonationItem(Base):
    __tablename__ = "donation_items"

    donation_item_id = Column(Integer, primary_key=True, index=True)
    quantity = Column(Integer, nullable=False, default=1)
    product_name = Column(String(200), nullable=False)
    product_price = Column(DECIMAL(10, 2))
    donation_id = Column(Integer, ForeignKey("donations.donation_id"))
    product_id = Column(Integer, ForeignKey("products.product_id", ondelete="SET NULL"), nullable=True)

    donation = relationship("Donation", back_populates="items")

    def __repr__(self):
        return f"<DonationItem(id={self.donation_item_id}, product={self.product_name}, quantity={self.quantity})>"


class MedicineDonation(Base):
    __tablename__ = "medicine_donations"

    medicine_donation_id = Column(Integer, primary_key=True, index=True)
    medicine_name = Column(String(200), nullable=False)
    medicine_type = Column(String(100), nullable=False)
    quantity = Column(Integer, nullable=False)
    expiry_date = Column(Date, nullable=False)
    condition = Column(String(100), nullable=False)
    donor_name = Column(String(200), nullable=False)
    donor_email = Column(String(255), nullable=False, index=True)
    donor_phone = Column(String(20), nullable=False)
    pickup_address = Column(Text, nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    pincode = Column(String(10), nullable=False)
    notes = Column(Text, default="")
    status = Column(String(20), default="pending")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<MedicineDonation(id={self.medicine_donation_id}, medicine={self.medicine_name}, status={self.status})>"
