"""Pricing pipeline — net payable amount for one reference.

The order of the steps is fixed:

    1. gross   = value of every unit in the ledger
    2. bundle  : free_units = total_quantity // (n + 1), and the value of
                 that many cheapest units is deducted
    3. percent : if the post-bundle amount reaches min_threshold, the
                 percentage is taken off the post-bundle amount

The threshold is compared against the amount after the bundle discount,
never against gross. Nothing is cached; callers recompute on every total.
"""

from dataclasses import dataclass
from decimal import Decimal

import structlog

from shopcart.exceptions import InvalidInput
from shopcart.shared.money import HUNDRED, ZERO

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LinePricing:
    """Priced result for one reference."""

    reference: str
    quantity: int
    gross: Decimal
    free_units: int = 0
    bundle_discount: Decimal = ZERO
    percentage_discount: Decimal = ZERO
    net: Decimal = ZERO

    @property
    def discount_total(self) -> Decimal:
        return self.bundle_discount + self.percentage_discount


def _split_by_kind(reference, promotions):
    bundle = None
    percentage = None
    for promotion in promotions:
        if promotion.reference != reference:
            raise InvalidInput(
                {"promotions": [f"Promotion '{promotion.code}' targets '{promotion.reference}', not '{reference}'"]}
            )
        if promotion.is_bundle:
            if bundle is not None:
                raise InvalidInput({"promotions": [f"Two bundle promotions active for '{reference}'"]})
            bundle = promotion
        elif promotion.is_percentage:
            if percentage is not None:
                raise InvalidInput({"promotions": [f"Two percentage promotions active for '{reference}'"]})
            percentage = promotion
    return bundle, percentage


def price_ledger(ledger, promotions=()) -> LinePricing:
    """Run the pipeline over ``ledger`` with the active ``promotions`` for its reference."""
    bundle, percentage = _split_by_kind(ledger.reference, promotions)

    gross = ledger.total_value()
    net = gross

    free_units = 0
    bundle_discount = ZERO
    if bundle is not None:
        free_units = ledger.total_quantity // bundle.pack_size
        bundle_discount = ledger.cheapest_value(free_units)
        net = gross - bundle_discount

    percentage_discount = ZERO
    if percentage is not None and net >= percentage.threshold:
        percentage_discount = net * percentage.rate / HUNDRED
        net = net - percentage_discount

    pricing = LinePricing(
        reference=ledger.reference,
        quantity=ledger.total_quantity,
        gross=gross,
        free_units=free_units,
        bundle_discount=bundle_discount,
        percentage_discount=percentage_discount,
        net=net,
    )
    logger.debug(
        "reference_priced",
        reference=pricing.reference,
        gross=str(pricing.gross),
        discount=str(pricing.discount_total),
        net=str(pricing.net),
    )
    return pricing
