"""
Cart management, checkout and order tracking
"""
import logging
import secrets
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from flickxir.exceptions import NotFoundError, ValidationError
from flickxir.models import Cart, CartItem, Order, OrderItem, Product, Prescription, ORDER_STATUSES
from flickxir.services import address_service, product_service
from flickxir.utils.pricing import calculate_cart_totals, CartTotals, round_money

logger = logging.getLogger(__name__)

CANCELLABLE_STATUSES = ("pending", "confirmed")
# A prescription that has not been rejected can back a prescription-only item
USABLE_PRESCRIPTION_STATUSES = ("pending", "approved")

TRACKING_STEPS = [
    ("pending", "Order Placed", "Your order has been placed successfully"),
    ("confirmed", "Order Confirmed", "Your order has been confirmed and is being processed"),
    ("processing", "Processing", "Your order is being prepared for shipping"),
    ("shipped", "Shipped", "Your order has been shipped and is on its way"),
    ("delivered", "Delivered", "Your order has been delivered successfully"),
]


# =====================================================
# CART MANAGEMENT
# =====================================================

def get_user_cart(db: Session, user_id: int) -> Cart:
    """Get or create the user's cart, with items and their products loaded"""
    cart = (
        db.query(Cart)
        .options(joinedload(Cart.items).joinedload(CartItem.product))
        .filter(Cart.user_id == user_id)
        .first()
    )
    if cart is None:
        cart = Cart(user_id=user_id)
        db.add(cart)
        db.commit()
        db.refresh(cart)
        logger.info(f"Created cart {cart.cart_id} for user {user_id}")
    return cart


def get_cart_item(db: Session, user_id: int, cart_item_id: int) -> CartItem:
    item = (
        db.query(CartItem)
        .join(Cart)
        .filter(CartItem.cart_item_id == cart_item_id, Cart.user_id == user_id)
        .first()
    )
    if not item:
        raise NotFoundError("Cart item", cart_item_id)
    return item


def add_to_cart(db: Session, user_id: int, product_id: int, quantity: int = 1) -> CartItem:
    if quantity < 1:
        raise ValidationError("Quantity must be at least 1")

    cart = get_user_cart(db, user_id)
    existing = next((item for item in cart.items if item.product_id == product_id), None)
    new_quantity = quantity + (existing.quantity if existing else 0)

    if not product_service.check_product_availability(db, product_id, new_quantity):
        raise ValidationError("Product is not available in requested quantity")

    if existing:
        existing.quantity = new_quantity
        item = existing
    else:
        item = CartItem(cart_id=cart.cart_id, product_id=product_id, quantity=quantity)
        db.add(item)
    db.commit()
    db.refresh(item)
    return item


def update_cart_item_quantity(db: Session, user_id: int, cart_item_id: int, quantity: int) -> Optional[CartItem]:
    """Set a line's quantity; zero or less removes the line and returns None"""
    if quantity <= 0:
        remove_from_cart(db, user_id, cart_item_id)
        return None

    item = get_cart_item(db, user_id, cart_item_id)
    if not product_service.check_product_availability(db, item.product_id, quantity):
        raise ValidationError("Product is not available in requested quantity")
    item.quantity = quantity
    db.commit()
    db.refresh(item)
    return item


def remove_from_cart(db: Session, user_id: int, cart_item_id: int):
    item = get_cart_item(db, user_id, cart_item_id)
    db.delete(item)
    db.commit()


def clear_cart(db: Session, user_id: int):
    cart = get_user_cart(db, user_id)
    cart.items.clear()
    db.commit()


def get_cart_total(cart: Optional[Cart]) -> CartTotals:
    items = cart.items if cart is not None else []
    return calculate_cart_totals(
        (item.product.price, item.product.mrp, item.quantity) for item in items
    )


def validate_cart_for_checkout(db: Session, cart: Cart, prescription: Optional[Prescription] = None
                               ) -> Tuple[bool, List[str]]:
    errors = []
    if not cart or not cart.items:
        return False, ["Cart is empty"]

    for item in cart.items:
        product = item.product
        if not product_service.check_product_availability(db, item.product_id, item.quantity):
            errors.append(f"{product.name} is not available in requested quantity")
        if product.requires_prescription and (
            prescription is None or prescription.status not in USABLE_PRESCRIPTION_STATUSES
        ):
            errors.append(f"{product.name} requires a prescription")

    return len(errors) == 0, errors


# =====================================================
# ORDER MANAGEMENT
# =====================================================

def _generate_order_number() -> str:
    return f"FLX{datetime.now(timezone.utc):%Y%m%d}{secrets.token_hex(3).upper()}"


def _resolve_shipping_address(db: Session, user_id: int, shipping_address: Optional[str],
                              address_id: Optional[int]) -> str:
    if shipping_address and shipping_address.strip():
        return shipping_address.strip()
    if address_id is not None:
        return address_service.get_address(db, user_id, address_id).as_text()
    address = address_service.select_checkout_address(address_service.get_user_addresses(db, user_id))
    if address is None:
        raise ValidationError("Please select or create an address to continue.")
    return address.as_text()


def create_order(db: Session, user_id: int, shipping_address: Optional[str] = None,
                 address_id: Optional[int] = None, billing_address: Optional[str] = None,
                 payment_method: Optional[str] = None, notes: Optional[str] = None,
                 prescription_id: Optional[int] = None) -> Order:
    """Turn the user's cart into an order.

    Order rows, stock decrements and the cart clean-up are committed together.
    """
    cart = get_user_cart(db, user_id)
    if not cart.items:
        raise ValidationError("Cart is empty")

    # lock the products being bought until the order commits
    product_ids = [item.product_id for item in cart.items]
    db.query(Product).filter(Product.product_id.in_(product_ids)).with_for_update().all()

    prescription = None
    if prescription_id is not None:
        prescription = (
            db.query(Prescription)
            .filter(Prescription.prescription_id == prescription_id, Prescription.user_id == user_id)
            .first()
        )
        if prescription is None:
            raise NotFoundError("Prescription", prescription_id)

    valid, errors = validate_cart_for_checkout(db, cart, prescription)
    if not valid:
        raise ValidationError("Cart cannot be checked out", errors=errors)

    shipping_text = _resolve_shipping_address(db, user_id, shipping_address, address_id)
    totals = get_cart_total(cart)

    order = Order(
        order_number=_generate_order_number(),
        user_id=user_id,
        status="pending",
        total_amount=totals.subtotal,
        discount_amount=totals.discount,
        shipping_amount=totals.shipping,
        final_amount=totals.total,
        shipping_address=shipping_text,
        billing_address=billing_address or shipping_text,
        payment_method=payment_method or "pending",
        notes=notes or "",
        prescription_id=prescription.prescription_id if prescription else None,
    )
    try:
        db.add(order)
        for item in cart.items:
            order.items.append(OrderItem(
                product_id=item.product_id,
                product_name=item.product.name,
                quantity=item.quantity,
                unit_price=item.product.price,
                total_price=round_money(item.product.price * item.quantity),
            ))
            product_service.update_product_stock(db, item.product_id, item.quantity, is_addition=False, commit=False)
        cart.items.clear()
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error creating order for user {user_id}")
        raise

    db.refresh(order)
    logger.info(f"Order {order.order_number} created for user {user_id}: {order.final_amount}")
    return order


def get_user_orders(db: Session, user_id: int, limit: Optional[int] = None,
                    status: Optional[str] = None) -> List[Order]:
    query = (
        db.query(Order)
        .options(joinedload(Order.items))
        .filter(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.order_id.desc())
    )
    if status:
        query = query.filter(Order.status == status)
    if limit:
        query = query.limit(limit)
    return query.all()


def get_all_orders(db: Session, status: Optional[str] = None) -> List[Order]:
    query = db.query(Order).order_by(Order.created_at.desc(), Order.order_id.desc())
    if status:
        query = query.filter(Order.status == status)
    return query.all()


def get_order_by_id(db: Session, order_id: int, user_id: Optional[int] = None) -> Order:
    """Fetch an order; when user_id is given the order must belong to that user"""
    query = db.query(Order).options(joinedload(Order.items)).filter(Order.order_id == order_id)
    if user_id is not None:
        query = query.filter(Order.user_id == user_id)
    order = query.first()
    if not order:
        raise NotFoundError("Order", order_id)
    return order


def update_order_status(db: Session, order_id: int, status: str) -> Order:
    if status not in ORDER_STATUSES:
        raise ValidationError(f"Unknown order status: {status}")
    order = get_order_by_id(db, order_id)
    order.status = status
    db.commit()
    db.refresh(order)
    logger.info(f"Order {order_id} moved to {status}")
    return order


def cancel_order(db: Session, order_id: int, user_id: int) -> Order:
    order = get_order_by_id(db, order_id, user_id)
    if order.status not in CANCELLABLE_STATUSES:
        raise ValidationError("Order cannot be cancelled in current status")

    try:
        order.status = "cancelled"
        for item in order.items:
            if item.product_id is not None:
                product_service.update_product_stock(db, item.product_id, item.quantity, is_addition=True, commit=False)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error cancelling order {order_id}")
        raise

    db.refresh(order)
    logger.info(f"Order {order_id} cancelled by user {user_id}")
    return order


# =====================================================
# ORDER TRACKING
# =====================================================

def build_tracking(order: Order) -> dict:
    reached = [step for step, _, _ in TRACKING_STEPS]
    if order.status in reached:
        reached = reached[: reached.index(order.status) + 1]
    else:
        # cancelled orders only ever reached "placed"
        reached = ["pending"]

    timeline = []
    for step, label, description in TRACKING_STEPS:
        completed = step in reached
        # only placement and the latest change have a recorded time
        if step == "pending":
            timestamp = order.created_at
        elif step == order.status:
            timestamp = order.updated_at
        else:
            timestamp = None
        timeline.append({
            "status": step,
            "label": label,
            "description": description,
            "timestamp": timestamp,
            "completed": completed,
        })

    return {
        "order_id": order.order_id,
        "order_number": order.order_number,
        "status": order.status,
        "timeline": timeline,
    }


def get_order_tracking(db: Session, order_id: int, user_id: int) -> dict:
    return build_tracking(get_order_by_id(db, order_id, user_id))
