"""
Main FastAPI application
"""
import json
import logging
from typing import List, Optional

from fastapi import FastAPI, Depends, File, Form, Query, UploadFile, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from flickxir import schemas
from flickxir.config import (
    APP_NAME,
    APP_VERSION,
    ALLOWED_ORIGINS,
    ALLOWED_METHODS,
    ALLOWED_HEADERS,
)
from flickxir.exceptions import FlickxirError, PermissionDeniedError, ValidationError
from flickxir.models import User
from flickxir.services import (
    address_service,
    auth_service,
    donation_service,
    medicine_service,
    order_service,
    prescription_service,
    product_service,
    user_profile_service,
)
from flickxir.services.storage_service import StorageService, UploadedFile
from flickxir.utils.database import get_db, create_tables
from flickxir.utils.storage import MinioClient

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=APP_NAME,
    version=APP_VERSION,
    description="Online pharmacy storefront API",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=ALLOWED_METHODS,
    allow_headers=ALLOWED_HEADERS,
)

bearer_scheme = HTTPBearer(auto_error=False)
_storage: Optional[StorageService] = None


@app.on_event("startup")
async def startup_event():
    """Create database tables on startup"""
    create_tables()


@app.exception_handler(FlickxirError)
async def flickxir_error_handler(request, exc: FlickxirError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "errors": exc.errors},
    )


# -------- Dependencies --------

def get_storage() -> StorageService:
    global _storage
    if _storage is None:
        _storage = StorageService(MinioClient())
    return _storage


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    token = credentials.credentials if credentials else None
    return auth_service.get_user_for_token(db, token)


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise PermissionDeniedError("Admin access required")
    return user


def to_uploaded(file: UploadFile) -> UploadedFile:
    return UploadedFile(
        filename=file.filename or "upload",
        content_type=file.content_type or "application/octet-stream",
        data=file.file.read(),
    )


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {APP_NAME}",
        "version": APP_VERSION,
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


# -------- Auth --------

@app.post("/auth/signup", response_model=schemas.UserOut, status_code=status.HTTP_201_CREATED)
def sign_up(payload: schemas.SignUpRequest, db: Session = Depends(get_db)):
    return auth_service.sign_up(db, **payload.model_dump())


@app.post("/auth/signin", response_model=schemas.SessionResponse)
def sign_in(payload: schemas.SignInRequest, db: Session = Depends(get_db)):
    token, user = auth_service.sign_in(db, payload.email, payload.password)
    return {"access_token": token, "user": user}


@app.post("/auth/signout", response_model=schemas.MessageResponse)
def sign_out(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
):
    if credentials:
        auth_service.sign_out(db, credentials.credentials)
    return {"message": "Signed out"}


@app.get("/auth/me", response_model=schemas.UserOut)
def current_user(user: User = Depends(get_current_user)):
    return user


@app.post("/auth/password-reset", response_model=schemas.MessageResponse)
def request_password_reset(payload: schemas.PasswordResetRequest, db: Session = Depends(get_db)):
    auth_service.request_password_reset(db, payload.email)
    return {"message": "If an account exists for this email, a reset link has been sent"}


@app.post("/auth/password-reset/confirm", response_model=schemas.MessageResponse)
def confirm_password_reset(payload: schemas.PasswordResetConfirm, db: Session = Depends(get_db)):
    auth_service.reset_password(db, payload.token, payload.new_password)
    return {"message": "Password has been reset"}


@app.put("/auth/password", response_model=schemas.MessageResponse)
def update_password(
    payload: schemas.PasswordUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    auth_service.update_password(db, user, payload.new_password)
    return {"message": "Password updated, please sign in again"}


# -------- Profile --------

@app.get("/profile", response_model=schemas.ProfileOut)
def get_profile(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return user_profile_service.get_user_profile(db, user.user_id)


@app.get("/profile/exists")
def profile_exists(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"exists": user_profile_service.profile_exists(db, user.user_id)}


@app.put("/profile", response_model=schemas.ProfileOut)
def save_profile(payload: schemas.ProfileIn, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    data = payload.model_dump(exclude_none=True)
    data["user_id"] = user.user_id
    return user_profile_service.upsert_user_profile(db, data)


@app.patch("/profile", response_model=schemas.ProfileOut)
def update_profile(payload: schemas.ProfileIn, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return user_profile_service.update_user_profile(db, user.user_id, payload.model_dump(exclude_none=True))


@app.post("/profile/avatar", response_model=schemas.ProfileOut)
def upload_avatar(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
):
    url = storage.upload_avatar(to_uploaded(file), user.user_id)
    return user_profile_service.upsert_user_profile(db, {"user_id": user.user_id, "avatar_url": url})


# -------- Catalog --------

@app.get("/categories", response_model=List[schemas.CategoryOut])
def get_categories(db: Session = Depends(get_db)):
    return product_service.get_categories(db)


@app.post("/categories", response_model=schemas.CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(payload: schemas.CategoryIn, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return product_service.create_category(db, payload.name, payload.description)


@app.get("/categories/{category_id}/products", response_model=List[schemas.ProductOut])
def get_products_by_category(category_id: int, limit: int = Query(10, ge=1, le=100), db: Session = Depends(get_db)):
    return product_service.get_products_by_category(db, category_id, limit)


@app.get("/products", response_model=List[schemas.ProductOut])
def get_products(
    category: Optional[int] = None,
    search: Optional[str] = None,
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    in_stock: Optional[bool] = None,
    sort_by: Optional[str] = None,
    sort_order: str = Query("asc", pattern="^(asc|desc)$"),
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=200),
    db: Session = Depends(get_db),
):
    return product_service.get_products(
        db,
        category=category,
        search=search,
        min_price=min_price,
        max_price=max_price,
        in_stock=in_stock,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )


@app.get("/products/featured", response_model=List[schemas.ProductOut])
def get_featured_products(limit: int = Query(8, ge=1, le=100), db: Session = Depends(get_db)):
    return product_service.get_featured_products(db, limit)


@app.get("/products/search", response_model=List[schemas.ProductOut])
def search_products(q: str = Query(..., min_length=1), limit: int = Query(20, ge=1, le=100), db: Session = Depends(get_db)):
    return product_service.search_products(db, q, limit)


@app.get("/products/{product_id}", response_model=schemas.ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return product_service.get_product_by_id(db, product_id)


@app.get("/products/{product_id}/availability", response_model=schemas.AvailabilityOut)
def check_availability(product_id: int, quantity: int = Query(1, ge=1), db: Session = Depends(get_db)):
    available = product_service.check_product_availability(db, product_id, quantity)
    return {"product_id": product_id, "quantity": quantity, "available": available}


@app.post("/products", response_model=schemas.ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(payload: schemas.ProductIn, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return product_service.create_product(db, payload.model_dump())


@app.patch("/products/{product_id}", response_model=schemas.ProductOut)
def update_product(
    product_id: int,
    payload: schemas.ProductUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return product_service.update_product(db, product_id, payload.model_dump(exclude_unset=True))


@app.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    product_service.delete_product(db, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.post("/products/{product_id}/image", response_model=schemas.UploadResponse)
def upload_product_image(
    product_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
    admin: User = Depends(require_admin),
):
    return {"url": product_service.upload_product_image(db, storage, product_id, to_uploaded(file))}


@app.post("/products/{product_id}/images", response_model=schemas.UploadManyResponse)
def upload_product_images(
    product_id: int,
    files: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
    admin: User = Depends(require_admin),
):
    urls = product_service.upload_product_images(db, storage, product_id, [to_uploaded(f) for f in files])
    return {"urls": urls}


# -------- Medicines --------

@app.get("/medicines", response_model=List[schemas.MedicineOut])
def get_medicines(db: Session = Depends(get_db)):
    return medicine_service.get_all_medicines(db)


@app.get("/medicines/search", response_model=List[schemas.MedicineOut])
def search_medicines(q: str = Query(..., min_length=1), limit: int = Query(20, ge=1, le=100), db: Session = Depends(get_db)):
    return medicine_service.search_medicines(db, q, limit)


@app.get("/medicines/{medicine_id}", response_model=schemas.MedicineOut)
def get_medicine(medicine_id: int, db: Session = Depends(get_db)):
    return medicine_service.get_medicine_by_id(db, medicine_id)


@app.post("/medicines", response_model=schemas.MedicineOut, status_code=status.HTTP_201_CREATED)
def create_medicine(payload: schemas.MedicineIn, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return medicine_service.create_medicine(db, payload.model_dump())


@app.patch("/medicines/{medicine_id}", response_model=schemas.MedicineOut)
def update_medicine(
    medicine_id: int,
    payload: schemas.MedicineUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return medicine_service.update_medicine(db, medicine_id, payload.model_dump(exclude_unset=True))


@app.delete("/medicines/{medicine_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_medicine(medicine_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    medicine_service.delete_medicine(db, medicine_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.post("/medicines/images", response_model=schemas.UploadResponse)
def upload_medicine_image(
    file: UploadFile = File(...),
    storage: StorageService = Depends(get_storage),
    admin: User = Depends(require_admin),
):
    return {"url": medicine_service.upload_medicine_image(storage, to_uploaded(file))}


# -------- Cart --------

def cart_response(cart) -> schemas.CartOut:
    totals = order_service.get_cart_total(cart)
    return schemas.CartOut(
        cart_id=cart.cart_id,
        items=[schemas.CartItemOut.model_validate(item) for item in cart.items],
        totals=schemas.CartTotalsOut(**totals._asdict()),
    )


@app.get("/cart", response_model=schemas.CartOut)
def get_cart(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return cart_response(order_service.get_user_cart(db, user.user_id))


@app.post("/cart/items", response_model=schemas.CartOut)
def add_to_cart(payload: schemas.CartItemIn, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    order_service.add_to_cart(db, user.user_id, payload.product_id, payload.quantity)
    return cart_response(order_service.get_user_cart(db, user.user_id))


@app.patch("/cart/items/{cart_item_id}", response_model=schemas.CartOut)
def update_cart_item(
    cart_item_id: int,
    payload: schemas.CartItemUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    order_service.update_cart_item_quantity(db, user.user_id, cart_item_id, payload.quantity)
    return cart_response(order_service.get_user_cart(db, user.user_id))


@app.delete("/cart/items/{cart_item_id}", response_model=schemas.CartOut)
def remove_cart_item(cart_item_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    order_service.remove_from_cart(db, user.user_id, cart_item_id)
    return cart_response(order_service.get_user_cart(db, user.user_id))


@app.delete("/cart", response_model=schemas.CartOut)
def clear_cart(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    order_service.clear_cart(db, user.user_id)
    return cart_response(order_service.get_user_cart(db, user.user_id))


@app.get("/cart/validation", response_model=schemas.CartValidationOut)
def validate_cart(
    prescription_id: Optional[int] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    prescription = None
    if prescription_id is not None:
        prescription = prescription_service.get_prescription_by_id(db, prescription_id, user.user_id)
    cart = order_service.get_user_cart(db, user.user_id)
    valid, errors = order_service.validate_cart_for_checkout(db, cart, prescription)
    return {"valid": valid, "errors": errors}


# -------- Orders --------

@app.post("/orders", response_model=schemas.OrderOut, status_code=status.HTTP_201_CREATED)
def create_order(payload: schemas.CheckoutRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return order_service.create_order(db, user.user_id, **payload.model_dump())


@app.get("/orders", response_model=List[schemas.OrderOut])
def get_orders(
    limit: Optional[int] = Query(None, ge=1),
    order_status: Optional[str] = Query(None, alias="status"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return order_service.get_user_orders(db, user.user_id, limit=limit, status=order_status)


@app.get("/orders/{order_id}", response_model=schemas.OrderOut)
def get_order(order_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return order_service.get_order_by_id(db, order_id, user.user_id)


@app.post("/orders/{order_id}/cancel", response_model=schemas.OrderOut)
def cancel_order(order_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return order_service.cancel_order(db, order_id, user.user_id)


@app.get("/orders/{order_id}/tracking", response_model=schemas.TrackingOut)
def get_order_tracking(order_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return order_service.get_order_tracking(db, order_id, user.user_id)


@app.get("/admin/orders", response_model=List[schemas.OrderOut])
def get_all_orders(
    order_status: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return order_service.get_all_orders(db, order_status)


@app.patch("/admin/orders/{order_id}/status", response_model=schemas.OrderOut)
def update_order_status(
    order_id: int,
    payload: schemas.OrderStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return order_service.update_order_status(db, order_id, payload.status)


# -------- Addresses --------

@app.get("/addresses", response_model=List[schemas.AddressOut])
def get_addresses(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return address_service.get_user_addresses(db, user.user_id)


@app.get("/addresses/default", response_model=Optional[schemas.AddressOut])
def get_default_address(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return address_service.get_default_address(db, user.user_id)


@app.get("/addresses/checkout", response_model=Optional[schemas.AddressOut])
def get_checkout_address(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return address_service.select_checkout_address(address_service.get_user_addresses(db, user.user_id))


@app.post("/addresses", response_model=schemas.AddressOut, status_code=status.HTTP_201_CREATED)
def add_address(payload: schemas.AddressIn, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return address_service.add_address(db, user.user_id, payload.model_dump())


@app.patch("/addresses/{address_id}", response_model=schemas.AddressOut)
def update_address(
    address_id: int,
    payload: schemas.AddressUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return address_service.update_address(db, user.user_id, address_id, payload.model_dump(exclude_unset=True))


@app.delete("/addresses/{address_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_address(address_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    address_service.delete_address(db, user.user_id, address_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.post("/addresses/{address_id}/default", response_model=schemas.AddressOut)
def set_default_address(address_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return address_service.set_default_address(db, user.user_id, address_id)


# -------- Prescriptions --------

@app.post("/prescriptions/process", response_model=schemas.ProcessedPrescriptionOut)
def process_prescription(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return prescription_service.process_prescription(db, to_uploaded(file))


@app.post("/prescriptions", response_model=schemas.PrescriptionOut, status_code=status.HTTP_201_CREATED)
def upload_prescription(
    file: UploadFile = File(...),
    extracted_data: Optional[str] = Form(None),
    stock_status: Optional[str] = Form(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
):
    data = None
    if extracted_data:
        try:
            data = json.loads(extracted_data)
        except json.JSONDecodeError as e:
            raise ValidationError("extracted_data must be valid JSON") from e
    return prescription_service.upload_prescription(
        db, storage, user.user_id, to_uploaded(file), extracted_data=data, stock_status=stock_status
    )


@app.get("/prescriptions", response_model=List[schemas.PrescriptionOut])
def get_prescriptions(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return prescription_service.get_user_prescriptions(db, user.user_id)


@app.get("/prescriptions/{prescription_id}", response_model=schemas.PrescriptionOut)
def get_prescription(prescription_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    owner = None if user.is_admin else user.user_id
    return prescription_service.get_prescription_by_id(db, prescription_id, owner)


@app.delete("/prescriptions/{prescription_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_prescription(
    prescription_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage),
):
    owner = None if user.is_admin else user.user_id
    prescription_service.delete_prescription(db, storage, prescription_id, owner)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/admin/prescriptions", response_model=List[schemas.PrescriptionOut])
def get_all_prescriptions(
    prescription_status: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return prescription_service.get_all_prescriptions(db, prescription_status)


@app.patch("/admin/prescriptions/{prescription_id}/status", response_model=schemas.PrescriptionOut)
def update_prescription_status(
    prescription_id: int,
    payload: schemas.PrescriptionStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return prescription_service.update_prescription_status(db, prescription_id, payload.status, payload.admin_notes)


# -------- Donations --------

@app.post("/donations/medicine", response_model=schemas.MedicineDonationOut, status_code=status.HTTP_201_CREATED)
def create_medicine_donation(payload: schemas.MedicineDonationIn, db: Session = Depends(get_db)):
    return donation_service.create_medicine_donation(db, payload.model_dump())


@app.get("/donations/medicine", response_model=List[schemas.MedicineDonationOut])
def get_my_medicine_donations(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return donation_service.get_donations_by_user(db, user.email)


@app.patch("/admin/donations/medicine/{donation_id}/status", response_model=schemas.MedicineDonationOut)
def update_donation_status(
    donation_id: int,
    payload: schemas.DonationStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return donation_service.update_donation_status(db, donation_id, payload.status)


@app.post("/donations", response_model=schemas.DonationOut, status_code=status.HTTP_201_CREATED)
def create_donation(payload: schemas.DonationIn, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    items = [item.model_dump() for item in payload.items]
    return donation_service.create_donation(db, user.user_id, payload.donor.model_dump(), items)


@app.get("/donations", response_model=List[schemas.DonationOut])
def get_my_donations(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return donation_service.get_user_item_donations(db, user.user_id)


# -------- Storage administration --------

@app.get("/admin/storage/{bucket}", response_model=schemas.BucketInfoOut)
def get_bucket_info(bucket: str, storage: StorageService = Depends(get_storage), admin: User = Depends(require_admin)):
    info = storage.get_bucket_info(bucket)
    if info is None:
        raise ValidationError(f"Bucket {bucket} does not exist")
    return info


@app.post("/admin/storage/{bucket}", response_model=schemas.MessageResponse)
def create_bucket(bucket: str, storage: StorageService = Depends(get_storage), admin: User = Depends(require_admin)):
    created = storage.create_bucket(bucket)
    return {"message": f"Created bucket {bucket}" if created else f"Bucket {bucket} already exists"}


@app.delete("/admin/storage/{bucket}", response_model=schemas.MessageResponse)
def delete_bucket(bucket: str, storage: StorageService = Depends(get_storage), admin: User = Depends(require_admin)):
    deleted = storage.delete_bucket(bucket)
    return {"message": f"Deleted bucket {bucket}" if deleted else f"Bucket {bucket} does not exist"}


@app.get("/admin/storage/{bucket}/files", response_model=List[schemas.StoredFileOut])
def list_files(
    bucket: str,
    folder: str = "",
    storage: StorageService = Depends(get_storage),
    admin: User = Depends(require_admin),
):
    return storage.list_files(bucket, folder)


@app.get("/admin/storage/{bucket}/metadata", response_model=schemas.FileMetadataOut)
def get_file_metadata(
    bucket: str,
    path: str,
    storage: StorageService = Depends(get_storage),
    admin: User = Depends(require_admin),
):
    return storage.get_file_metadata(bucket, path)


@app.get("/admin/storage/{bucket}/download")
def download_file(
    bucket: str,
    path: str,
    storage: StorageService = Depends(get_storage),
    admin: User = Depends(require_admin),
):
    data = storage.download_file(bucket, path)
    filename = path.rsplit("/", 1)[-1]
    return Response(
        content=data,
        media_type="application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
