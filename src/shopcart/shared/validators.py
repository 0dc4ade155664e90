"""Argument validation shared by ledgers, promotions and the cart.

Each helper returns the normalized value or raises InvalidInput before
any state is touched.
"""

from shopcart.exceptions import InvalidInput
from shopcart.shared.money import ZERO, to_decimal


def require_text(value, field):
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput({field: [f"{field.capitalize()} cannot be empty"]})
    return value


def require_reference(reference):
    return require_text(reference, "reference")


def require_code(code):
    return require_text(code, "code")


def require_positive_price(price):
    amount = to_decimal(price, "price")
    if amount <= ZERO:
        raise InvalidInput({"price": ["Price must be strictly positive"]})
    return amount


def require_positive_quantity(quantity, field="quantity"):
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidInput({field: [f"Expected a whole number of units, got {quantity!r}"]})
    if quantity <= 0:
        raise InvalidInput({field: [f"{field.capitalize()} must be a positive integer"]})
    return quantity
