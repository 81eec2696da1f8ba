"""
Cart total calculation
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import NamedTuple, Iterable

from flickxir.config import SHIPPING_FEE, FREE_SHIPPING_THRESHOLD

ZERO = Decimal("0.00")


class CartTotals(NamedTuple):
    """Result of a cart total calculation."""

    subtotal: Decimal
    discount: Decimal
    shipping: Decimal
    total: Decimal
    item_count: int


def round_money(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def shipping_for(subtotal: Decimal, fee: Decimal = None, threshold: Decimal = None) -> Decimal:
    """Flat fee unless the subtotal is above the free-shipping threshold"""
    fee = SHIPPING_FEE if fee is None else fee
    threshold = FREE_SHIPPING_THRESHOLD if threshold is None else threshold
    if subtotal <= 0:
        return ZERO
    return ZERO if subtotal > threshold else round_money(fee)


def calculate_cart_totals(lines: Iterable, fee: Decimal = None, threshold: Decimal = None) -> CartTotals:
    """Compute totals for (price, mrp, quantity) lines.

    Discount is what the customer saves against MRP and is informational only:
    the charged total is subtotal plus shipping.
    """
    subtotal = ZERO
    discount = ZERO
    item_count = 0
    for price, mrp, quantity in lines:
        price = Decimal(str(price))
        subtotal += price * quantity
        item_count += quantity
        if mrp is not None and Decimal(str(mrp)) > price:
            discount += (Decimal(str(mrp)) - price) * quantity

    subtotal = round_money(subtotal)
    shipping = shipping_for(subtotal, fee, threshold)
    return CartTotals(
        subtotal=subtotal,
        discount=round_money(discount),
        shipping=shipping,
        total=round_money(subtotal + shipping),
        item_count=item_count,
    )
