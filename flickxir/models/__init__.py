"""
SQLAlchemy models for the Flickxir storefront
"""

# Import all models to make them available when importing from models
from .user import User, AuthSession, PasswordReset, UserProfile
from .product import Product, Category, Medicine
from .cart import Cart, CartItem
from .order import Order, OrderItem, ORDER_STATUSES
from .address import Address
from .prescription import Prescription, PRESCRIPTION_STATUSES
from .donation import Donation, DonationItem, MedicineDonation, DONATION_STATUSES

__all__ = [
    "User",
    "AuthSession",
    "PasswordReset",
    "UserProfile",
    "Product",
    "Category",
    "Medicine",
    "Cart",
    "CartItem",
    "Order",
    "OrderItem",
    "Address",
    "Prescription",
    "Donation",
    "DonationItem",
    "MedicineDonation",
    "ORDER_STATUSES",
    "PRESCRIPTION_STATUSES",
    "DONATION_STATUSES",
]
