"""Promotion value object — an immutable discount definition for one reference.

Two kinds exist and share a single shape; the kind decides which payload
fields are meaningful:

    Percentage       percentage in the open interval (0, 100), applied when
                     the reference's net amount reaches min_threshold
    BuyNGetOneFree   buy_quantity = n >= 1; in every pack of n + 1 units
                     the cheapest unit is free

Decimal payloads are stored as their canonical string form so that no
binary rounding ever touches a rate or threshold.
"""

from decimal import Decimal, InvalidOperation
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Integer, String, Text

from shopcart.domain import shopcart
from shopcart.shared.money import HUNDRED, ZERO


class PromotionKind(Enum):
    PERCENTAGE = "Percentage"
    BUY_N_GET_ONE_FREE = "BuyNGetOneFree"


def _parse_decimal(text):
    if text is None:
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


@shopcart.value_object
class Promotion:
    code = Text(required=True, sanitize=False)
    reference = Text(required=True, sanitize=False)
    kind = String(required=True, choices=PromotionKind)
    percentage = Text(sanitize=False)  # Decimal string
    min_threshold = Text(sanitize=False, default="0")  # Decimal string
    buy_quantity = Integer()

    @invariant.post
    def code_and_reference_must_not_be_blank(self):
        if self.code is not None and not self.code.strip():
            raise ValidationError({"code": ["Code cannot be empty"]})
        if self.reference is not None and not self.reference.strip():
            raise ValidationError({"reference": ["Reference cannot be empty"]})

    @invariant.post
    def percentage_payload_must_be_valid(self):
        if self.kind != PromotionKind.PERCENTAGE.value:
            return

        rate = _parse_decimal(self.percentage)
        if rate is None or not rate.is_finite() or not ZERO < rate < HUNDRED:
            raise ValidationError({"percentage": ["Percentage must be strictly between 0 and 100"]})

        threshold = _parse_decimal(self.min_threshold)
        if threshold is None or not threshold.is_finite() or threshold < ZERO:
            raise ValidationError({"min_threshold": ["Minimum threshold cannot be negative"]})

    @invariant.post
    def bundle_payload_must_be_valid(self):
        if self.kind != PromotionKind.BUY_N_GET_ONE_FREE.value:
            return

        if self.buy_quantity is None or self.buy_quantity < 1:
            raise ValidationError({"buy_quantity": ["Buy quantity must be at least 1"]})

    # -------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------
    @classmethod
    def percentage_off(cls, code, reference, percentage, min_threshold=ZERO):
        return cls(
            code=code,
            reference=reference,
            kind=PromotionKind.PERCENTAGE.value,
            percentage=str(percentage),
            min_threshold=str(min_threshold),
        )

    @classmethod
    def buy_n_get_one_free(cls, code, reference, n):
        return cls(
            code=code,
            reference=reference,
            kind=PromotionKind.BUY_N_GET_ONE_FREE.value,
            buy_quantity=n,
        )

    # -------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------
    @property
    def is_percentage(self):
        return self.kind == PromotionKind.PERCENTAGE.value

    @property
    def is_bundle(self):
        return self.kind == PromotionKind.BUY_N_GET_ONE_FREE.value

    @property
    def rate(self):
        """Percentage as an exact Decimal, e.g. ``Decimal("12.5")``."""
        return Decimal(self.percentage) if self.is_percentage else None

    @property
    def threshold(self):
        return Decimal(self.min_threshold) if self.is_percentage else ZERO

    @property
    def pack_size(self):
        return self.buy_quantity + 1 if self.is_bundle else None
