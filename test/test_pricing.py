from decimal import Decimal

from flickxir.utils.pricing import calculate_cart_totals, round_money, shipping_for


def test_shipping_charged_below_threshold():
    totals = calculate_cart_totals([(Decimal("100.00"), None, 2)])

    assert totals.subtotal == Decimal("200.00")
    assert totals.shipping == Decimal("50.00")
    assert totals.total == Decimal("250.00")
    assert totals.item_count == 2


def test_shipping_free_above_threshold():
    totals = calculate_cart_totals([(Decimal("250.50"), None, 2)])

    assert totals.subtotal == Decimal("501.00")
    assert totals.shipping == Decimal("0.00")
    assert totals.total == Decimal("501.00")


def test_threshold_itself_still_pays_shipping():
    assert shipping_for(Decimal("500.00")) == Decimal("50.00")
    assert shipping_for(Decimal("500.01")) == Decimal("0.00")


def test_empty_cart_has_no_shipping():
    totals = calculate_cart_totals([])

    assert totals.subtotal == Decimal("0.00")
    assert totals.shipping == Decimal("0.00")
    assert totals.total == Decimal("0.00")
    assert totals.item_count == 0


def test_discount_is_informational():
    totals = calculate_cart_totals([
        (Decimal("80.00"), Decimal("100.00"), 3),
        (Decimal("30.00"), Decimal("25.00"), 1),  # mrp below price gives no discount
    ])

    assert totals.subtotal == Decimal("270.00")
    assert totals.discount == Decimal("60.00")
    assert totals.total == totals.subtotal + totals.shipping


def test_custom_fee_and_threshold():
    totals = calculate_cart_totals([(Decimal("90.00"), None, 1)], fee=Decimal("25"), threshold=Decimal("80"))

    assert totals.shipping == Decimal("0.00")

    totals = calculate_cart_totals([(Decimal("70.00"), None, 1)], fee=Decimal("25"), threshold=Decimal("80"))

    assert totals.shipping == Decimal("25.00")


def test_round_money_half_up():
    assert round_money(Decimal("10.005")) == Decimal("10.01")
    assert round_money(Decimal("10.004")) == Decimal("10.00")
