"""
Application settings loaded from the environment (.env supported)
"""
import os
from decimal import Decimal

from dotenv import load_dotenv

load_dotenv()


def _split(value: str) -> list:
    return [item.strip() for item in value.split(",") if item.strip()]


APP_NAME = os.getenv("APP_NAME", "Flickxir API")
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./flickxir.db")

ALLOWED_ORIGINS = _split(os.getenv("ALLOWED_ORIGINS", "http://localhost:3000"))
ALLOWED_METHODS = _split(os.getenv("ALLOWED_METHODS", "GET,POST,PUT,PATCH,DELETE"))
ALLOWED_HEADERS = _split(os.getenv("ALLOWED_HEADERS", "*"))

# Accounts whose e-mail is listed here get the admin dashboard routes
ADMIN_EMAILS = [email.lower() for email in _split(os.getenv("ADMIN_EMAILS", "admin@flickxir.com"))]
SESSION_TTL_HOURS = int(os.getenv("SESSION_TTL_HOURS", "168"))
PASSWORD_RESET_TTL_MINUTES = int(os.getenv("PASSWORD_RESET_TTL_MINUTES", "60"))

# Object storage
MINIO_ENDPOINT = os.getenv("MINIO_ENDPOINT", f"localhost:{os.getenv('MINIO_PORT', '9000')}")
MINIO_ACCESS_KEY = os.getenv("MINIO_ACCESS_KEY")
MINIO_SECRET_KEY = os.getenv("MINIO_SECRET_KEY")
MINIO_SECURE = os.getenv("MINIO_SECURE", "false").lower() in ("1", "true", "yes")
MINIO_PUBLIC_URL = os.getenv(
    "MINIO_PUBLIC_URL",
    f"{'https' if MINIO_SECURE else 'http'}://{MINIO_ENDPOINT}",
)
STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "flickxir-uploads")
BUCKETS = {
    "products": os.getenv("PRODUCTS_BUCKET", STORAGE_BUCKET),
    "prescriptions": os.getenv("PRESCRIPTIONS_BUCKET", STORAGE_BUCKET),
    "avatars": os.getenv("AVATARS_BUCKET", STORAGE_BUCKET),
}

# Checkout
SHIPPING_FEE = Decimal(os.getenv("SHIPPING_FEE", "50"))
FREE_SHIPPING_THRESHOLD = Decimal(os.getenv("FREE_SHIPPING_THRESHOLD", "500"))

# Seconds the mocked prescription extraction takes
PRESCRIPTION_PROCESSING_DELAY = float(os.getenv("PRESCRIPTION_PROCESSING_DELAY", "3"))
