"""
Request and response schemas

Response models read straight from the SQLAlchemy objects (from_attributes).
"""
from datetime import date, datetime
from typing import List, Optional, Any, Dict

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from flickxir.utils.validators import PHONE_PATTERN, PINCODE_PATTERN


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Auth

class SignUpRequest(BaseModel):
    email: EmailStr
    password: str
    first_name: str
    last_name: str
    phone: str = Field(..., pattern=PHONE_PATTERN)
    address: str = ""


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


class UserOut(ORMModel):
    user_id: int
    email: str
    full_name: Optional[str] = ""
    phone: Optional[str] = ""
    is_admin: bool = False


class SessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetConfirm(BaseModel):
    token: str
    new_password: str


class PasswordUpdate(BaseModel):
    new_password: str


class MessageResponse(BaseModel):
    message: str


# Profiles

class ProfileIn(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = Field(None, pattern=PINCODE_PATTERN)
    gender: Optional[str] = None


class ProfileOut(ORMModel):
    profile_id: int
    user_id: int
    first_name: Optional[str] = ""
    last_name: Optional[str] = ""
    email: Optional[str] = None
    phone: Optional[str] = ""
    address: Optional[str] = ""
    city: Optional[str] = ""
    state: Optional[str] = ""
    pincode: Optional[str] = ""
    gender: Optional[str] = ""
    avatar_url: Optional[str] = None


# Catalog

class CategoryIn(BaseModel):
    name: str
    description: str = ""


class CategoryOut(ORMModel):
    category_id: int
    name: str
    description: Optional[str] = None


class ProductIn(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    price: float = Field(..., ge=0)
    mrp: Optional[float] = Field(None, ge=0)
    stock_quantity: int = Field(0, ge=0)
    in_stock: Optional[bool] = None
    featured: bool = False
    requires_prescription: bool = False
    is_active: bool = True
    category_id: Optional[int] = None
    image_urls: List[str] = Field(default_factory=list)


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    mrp: Optional[float] = Field(None, ge=0)
    stock_quantity: Optional[int] = Field(None, ge=0)
    in_stock: Optional[bool] = None
    featured: Optional[bool] = None
    requires_prescription: Optional[bool] = None
    is_active: Optional[bool] = None
    category_id: Optional[int] = None
    image_urls: Optional[List[str]] = None


class ProductOut(ORMModel):
    product_id: int
    name: str
    description: Optional[str] = ""
    price: float
    mrp: Optional[float] = None
    image_urls: Optional[List[str]] = None
    stock_quantity: int = 0
    in_stock: bool = True
    featured: bool = False
    requires_prescription: bool = False
    is_active: bool = True
    category_id: Optional[int] = None
    category: Optional[CategoryOut] = None


class AvailabilityOut(BaseModel):
    product_id: int
    quantity: int
    available: bool


class MedicineIn(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    manufacturer: Optional[str] = None
    dosage_form: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    image_url: Optional[str] = None


class MedicineUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    manufacturer: Optional[str] = None
    dosage_form: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    image_url: Optional[str] = None


class MedicineOut(ORMModel):
    medicine_id: int
    name: str
    description: Optional[str] = ""
    manufacturer: Optional[str] = None
    dosage_form: Optional[str] = None
    price: Optional[float] = None
    image_url: Optional[str] = None


class UploadResponse(BaseModel):
    url: str


class UploadManyResponse(BaseModel):
    urls: List[str]


# Cart

class CartItemIn(BaseModel):
    product_id: int
    quantity: int = Field(1, ge=1)


class CartItemUpdate(BaseModel):
    quantity: int


class CartItemOut(ORMModel):
    cart_item_id: int
    product_id: int
    quantity: int
    product: ProductOut


class CartTotalsOut(BaseModel):
    subtotal: float
    discount: float
    shipping: float
    total: float
    item_count: int


class CartOut(BaseModel):
    cart_id: int
    items: List[CartItemOut]
    totals: CartTotalsOut


class CartValidationOut(BaseModel):
    valid: bool
    errors: List[str]


# Orders

class CheckoutRequest(BaseModel):
    shipping_address: Optional[str] = None
    address_id: Optional[int] = None
    billing_address: Optional[str] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    prescription_id: Optional[int] = None


class OrderItemOut(ORMModel):
    order_item_id: int
    product_id: Optional[int] = None
    product_name: str
    quantity: int
    unit_price: float
    total_price: float


class OrderOut(ORMModel):
    order_id: int
    order_number: str
    status: str
    total_amount: float
    discount_amount: float
    shipping_amount: float
    final_amount: float
    shipping_address: Optional[str] = ""
    billing_address: Optional[str] = ""
    payment_method: Optional[str] = None
    notes: Optional[str] = ""
    prescription_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItemOut] = Field(default_factory=list)


class OrderStatusUpdate(BaseModel):
    status: str


class TrackingStep(BaseModel):
    status: str
    label: str
    description: str
    timestamp: Optional[datetime] = None
    completed: bool


class TrackingOut(BaseModel):
    order_id: int
    order_number: str
    status: str
    timeline: List[TrackingStep]


# Addresses

class AddressIn(BaseModel):
    name: str
    phone: str = Field(..., pattern=PHONE_PATTERN)
    address_line1: str
    address_line2: str = ""
    city: str
    state: str
    pincode: str = Field(..., pattern=PINCODE_PATTERN)
    is_default: bool = False


class AddressUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = Field(None, pattern=PINCODE_PATTERN)
    is_default: Optional[bool] = None


class AddressOut(ORMModel):
    address_id: int
    name: str
    phone: str
    address_line1: str
    address_line2: Optional[str] = ""
    city: str
    state: str
    pincode: str
    is_default: bool = False
    created_at: Optional[datetime] = None


# Prescriptions

class ProcessedPrescriptionOut(BaseModel):
    extracted_data: Dict[str, Any]
    stock_status: str


class PrescriptionOut(ORMModel):
    prescription_id: int
    user_id: int
    file_name: str
    file_url: str
    status: str
    extracted_data: Optional[Dict[str, Any]] = None
    stock_status: Optional[str] = None
    total_amount: Optional[float] = None
    admin_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PrescriptionStatusUpdate(BaseModel):
    status: str
    admin_notes: Optional[str] = None


# Donations

class MedicineDonationIn(BaseModel):
    medicine_name: str
    medicine_type: str
    quantity: int = Field(..., ge=1)
    expiry_date: date
    condition: str
    donor_name: str
    donor_email: EmailStr
    donor_phone: str = Field(..., pattern=PHONE_PATTERN)
    pickup_address: str
    city: str
    state: str
    pincode: str = Field(..., pattern=PINCODE_PATTERN)
    notes: str = ""


class MedicineDonationOut(ORMModel):
    medicine_donation_id: int
    medicine_name: str
    medicine_type: str
    quantity: int
    expiry_date: date
    condition: str
    donor_name: str
    donor_email: str
    status: str
    created_at: Optional[datetime] = None


class DonationStatusUpdate(BaseModel):
    status: str


class DonorIn(BaseModel):
    name: str
    email: EmailStr
    phone: str = Field(..., pattern=PHONE_PATTERN)
    address: str
    message: str = ""


class DonationItemIn(BaseModel):
    product_id: int
    quantity: int = Field(1, ge=1)


class DonationIn(BaseModel):
    donor: DonorIn
    items: List[DonationItemIn]


class DonationItemOut(ORMModel):
    donation_item_id: int
    product_id: Optional[int] = None
    product_name: str
    product_price: Optional[float] = None
    quantity: int


class DonationOut(ORMModel):
    donation_id: int
    donor_name: str
    donor_email: str
    status: str
    total_items: int
    message: Optional[str] = ""
    created_at: Optional[datetime] = None
    items: List[DonationItemOut] = Field(default_factory=list)


# Storage

class StoredFileOut(BaseModel):
    name: str
    size: Optional[int] = None
    last_modified: Optional[datetime] = None


class FileMetadataOut(StoredFileOut):
    content_type: Optional[str] = None
    etag: Optional[str] = None


class BucketInfoOut(BaseModel):
    name: str
    file_count: int
    total_size: int
