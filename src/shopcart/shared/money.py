"""Exact monetary arithmetic helpers.

Amounts are ``decimal.Decimal`` end to end. Floats are accepted at the
boundary but converted through their shortest string form, so ``0.1``
becomes ``Decimal("0.1")`` and not its binary expansion.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from shopcart.exceptions import InvalidInput

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value, field="amount"):
    """Coerce ``value`` into a finite Decimal or raise InvalidInput keyed by ``field``."""
    if isinstance(value, bool) or value is None:
        raise InvalidInput({field: [f"Expected a decimal amount, got {value!r}"]})

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidInput({field: [f"Expected a decimal amount, got {value!r}"]}) from None
    else:
        raise InvalidInput({field: [f"Expected a decimal amount, got {type(value).__name__}"]})

    if not amount.is_finite():
        raise InvalidInput({field: ["Amount must be finite"]})
    return amount


def quantize(amount, places=2):
    """Round for display. Pricing itself never rounds."""
    return to_decimal(amount).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
