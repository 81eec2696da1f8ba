"""
Product catalog and category operations
"""
import logging
from decimal import Decimal
from typing import Optional, List

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from flickxir.exceptions import NotFoundError, ValidationError, ConflictError
from flickxir.models import Product, Category
from flickxir.services.storage_service import StorageService, UploadedFile

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = {
    "name": Product.name,
    "price": Product.price,
    "created_at": Product.created_at,
    "stock_quantity": Product.stock_quantity,
}

PRODUCT_FIELDS = (
    "name", "description", "price", "mrp", "image_urls", "stock_quantity",
    "in_stock", "featured", "requires_prescription", "is_active", "category_id",
)


def _matches(term: str):
    pattern = f"%{term}%"
    return or_(Product.name.ilike(pattern), Product.description.ilike(pattern))


def _check_category(db: Session, category_id: Optional[int]):
    if category_id is not None and db.get(Category, category_id) is None:
        raise ValidationError(f"Category {category_id} does not exist")


def create_product(db: Session, data: dict) -> Product:
    values = {key: data[key] for key in PRODUCT_FIELDS if key in data and data[key] is not None}
    if not (values.get("name") or "").strip():
        raise ValidationError("Product name is required")
    if values.get("price") is None or Decimal(str(values["price"])) < 0:
        raise ValidationError("Product price must be zero or more")
    _check_category(db, values.get("category_id"))

    values.setdefault("stock_quantity", 0)
    values.setdefault("image_urls", [])
    values.setdefault("in_stock", values["stock_quantity"] > 0)

    product = Product(**values)
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info(f"Created product {product.product_id} ({product.name})")
    return product


def update_product(db: Session, product_id: int, updates: dict) -> Product:
    product = get_product_by_id(db, product_id)
    values = {key: updates[key] for key in PRODUCT_FIELDS if key in updates}
    if "price" in values and (values["price"] is None or Decimal(str(values["price"])) < 0):
        raise ValidationError("Product price must be zero or more")
    if "category_id" in values:
        _check_category(db, values["category_id"])
    for key, value in values.items():
        setattr(product, key, value)
    if "stock_quantity" in values and "in_stock" not in values:
        product.in_stock = (product.stock_quantity or 0) > 0
    db.commit()
    db.refresh(product)
    return product


def delete_product(db: Session, product_id: int):
    product = get_product_by_id(db, product_id)
    db.delete(product)
    db.commit()
    logger.info(f"Deleted product {product_id}")


def get_products(db: Session, category: Optional[int] = None, search: Optional[str] = None,
                 min_price=None, max_price=None, in_stock: Optional[bool] = None,
                 sort_by: Optional[str] = None, sort_order: str = "asc",
                 page: Optional[int] = None, limit: Optional[int] = None,
                 include_inactive: bool = False) -> List[Product]:
    query = db.query(Product).options(joinedload(Product.category))

    if not include_inactive:
        query = query.filter(Product.is_active == True)  # noqa: E712
    if category is not None:
        query = query.filter(Product.category_id == category)
    if search:
        query = query.filter(_matches(search))
    if min_price is not None:
        query = query.filter(Product.price >= min_price)
    if max_price is not None:
        query = query.filter(Product.price <= max_price)
    if in_stock is not None:
        query = query.filter(Product.in_stock == in_stock)

    if sort_by:
        column = SORTABLE_COLUMNS.get(sort_by)
        if column is None:
            raise ValidationError(f"Cannot sort by {sort_by}")
        query = query.order_by(column.desc() if sort_order == "desc" else column.asc(), Product.product_id)
    else:
        query = query.order_by(Product.created_at.desc(), Product.product_id.desc())

    if page and limit:
        query = query.offset((page - 1) * limit).limit(limit)
    elif limit:
        query = query.limit(limit)

    return query.all()


def get_product_by_id(db: Session, product_id: int) -> Product:
    product = (
        db.query(Product)
        .options(joinedload(Product.category))
        .filter(Product.product_id == product_id)
        .first()
    )
    if not product:
        raise NotFoundError("Product", product_id)
    return product


def get_products_by_category(db: Session, category_id: int, limit: int = 10) -> List[Product]:
    return (
        db.query(Product)
        .filter(Product.category_id == category_id, Product.in_stock == True, Product.is_active == True)  # noqa: E712
        .order_by(Product.product_id)
        .limit(limit)
        .all()
    )


def search_products(db: Session, search_term: str, limit: int = 20) -> List[Product]:
    return (
        db.query(Product)
        .filter(_matches(search_term), Product.in_stock == True, Product.is_active == True)  # noqa: E712
        .order_by(Product.name)
        .limit(limit)
        .all()
    )


def get_featured_products(db: Session, limit: int = 8) -> List[Product]:
    return (
        db.query(Product)
        .filter(Product.featured == True, Product.in_stock == True, Product.is_active == True)  # noqa: E712
        .order_by(Product.product_id)
        .limit(limit)
        .all()
    )


def get_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.name).all()


def create_category(db: Session, name: str, description: str = "") -> Category:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Category name is required")
    if db.query(Category).filter(Category.name == name).first():
        raise ConflictError(f"Category {name} already exists")
    category = Category(name=name, description=description)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def check_product_availability(db: Session, product_id: int, quantity: int = 1) -> bool:
    product = db.get(Product, product_id)
    if not product:
        raise NotFoundError("Product", product_id)
    return bool(product.in_stock) and (product.stock_quantity or 0) >= quantity


def update_product_stock(db: Session, product_id: int, quantity: int, is_addition: bool = True,
                         commit: bool = True) -> Product:
    """Add or remove stock; stock never drops below zero and in_stock follows it"""
    product = db.get(Product, product_id)
    if not product:
        raise NotFoundError("Product", product_id)

    current = product.stock_quantity or 0
    new_stock = current + quantity if is_addition else max(0, current - quantity)
    product.stock_quantity = new_stock
    product.in_stock = new_stock > 0

    if commit:
        db.commit()
        db.refresh(product)
    return product


def upload_product_image(db: Session, storage: StorageService, product_id: int, file: UploadedFile) -> str:
    product = get_product_by_id(db, product_id)
    url = storage.upload_product_image(file, product_id)
    # reassign so the JSON column is flagged dirty
    product.image_urls = list(product.image_urls or []) + [url]
    db.commit()
    return url


def upload_product_images(db: Session, storage: StorageService, product_id: int,
                          files: List[UploadedFile]) -> List[str]:
    product = get_product_by_id(db, product_id)
    urls = storage.upload_multiple_product_images(files, product_id)
    if urls:
        product.image_urls = list(product.image_urls or []) + urls
        db.commit()
    return urls
