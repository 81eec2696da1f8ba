"""Shared pytest fixtures: in-memory database, in-memory object store, API client."""
import io
import os
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_EMAILS"] = "admin@flickxir.com"
os.environ["PRESCRIPTION_PROCESSING_DELAY"] = "0"
os.environ["MINIO_PUBLIC_URL"] = "http://storage.test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from flickxir.main import app, get_storage
from flickxir.services import auth_service, product_service
from flickxir.services.storage_service import StorageService
from flickxir.utils.database import create_tables, get_db
from flickxir.utils.storage import MinioClient

PASSWORD = "secret123"


class FakeMinioResponse:
    def __init__(self, data: bytes):
        self.data = data
        self.closed = False

    def read(self):
        return self.data

    def close(self):
        self.closed = True

    def release_conn(self):
        pass


class FakeMinio:
    """Keeps buckets and objects in dictionaries, mimicking the minio.Minio calls we make"""

    def __init__(self):
        self.buckets = {}

    def bucket_exists(self, bucket_name):
        return bucket_name in self.buckets

    def make_bucket(self, bucket_name):
        self.buckets[bucket_name] = {}

    def remove_bucket(self, bucket_name):
        del self.buckets[bucket_name]

    def put_object(self, bucket_name, object_name, data, length, content_type=None, metadata=None):
        self.buckets[bucket_name][object_name] = SimpleNamespace(
            object_name=object_name,
            data=data.read(length),
            size=length,
            content_type=content_type,
            metadata=metadata,
            last_modified=datetime.now(timezone.utc),
            etag=f"etag-{len(self.buckets[bucket_name])}",
        )

    def remove_object(self, bucket_name, object_name):
        self.buckets[bucket_name].pop(object_name, None)

    def list_objects(self, bucket_name, prefix=None, recursive=False):
        return [obj for name, obj in sorted(self.buckets[bucket_name].items()) if name.startswith(prefix or "")]

    def stat_object(self, bucket_name, object_name):
        return self.buckets[bucket_name][object_name]

    def get_object(self, bucket_name, object_name):
        return FakeMinioResponse(self.buckets[bucket_name][object_name].data)


@pytest.fixture
def db():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    create_tables(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def minio():
    return FakeMinio()


@pytest.fixture
def storage(minio):
    return StorageService(MinioClient(client=minio, public_url="http://storage.test"))


@pytest.fixture
def client(db, storage):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_account(db, email, first_name="Asha", last_name="Rao"):
    return auth_service.sign_up(db, email, PASSWORD, first_name, last_name, phone="9876543210")


def headers_for(db, email):
    token, _ = auth_service.sign_in(db, email, PASSWORD)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user(db):
    return create_account(db, "asha@example.com")


@pytest.fixture
def auth_headers(db, user):
    return headers_for(db, user.email)


@pytest.fixture
def admin(db):
    return create_account(db, "admin@flickxir.com", "Store", "Admin")


@pytest.fixture
def admin_headers(db, admin):
    return headers_for(db, admin.email)


@pytest.fixture
def category(db):
    return product_service.create_category(db, "Medicines", "Prescription and OTC medicines")


@pytest.fixture
def make_product(db, category):
    def _make(name="Paracetamol 500mg", price="40.00", mrp=None, stock=100, **extra):
        data = {
            "name": name,
            "description": f"{name} strip",
            "price": Decimal(price),
            "mrp": Decimal(mrp) if mrp else None,
            "stock_quantity": stock,
            "category_id": category.category_id,
        }
        data.update(extra)
        return product_service.create_product(db, data)

    return _make


def upload(name="file.png", content_type="image/png", data=b"\x89PNG fake image"):
    return {"file": (name, io.BytesIO(data), content_type)}
