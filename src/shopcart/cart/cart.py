"""Cart — price ledgers per reference plus the promotions layered over them.

The cart owns one PriceLedger per reference and one PromotionRegistry.
A ledger is created on the first addition for a reference and dropped as
soon as a removal empties it. Totals are recomputed through the pricing
pipeline on every call; no discount state is kept between calls.

All arguments are validated before anything is mutated, so a failed call
leaves the cart as it was.
"""

import structlog
from protean.exceptions import ValidationError

from shopcart.exceptions import InvalidInput, UnknownReference
from shopcart.ledger.ledger import PriceLedger
from shopcart.pricing.pipeline import price_ledger
from shopcart.promotion.promotion import Promotion
from shopcart.promotion.registry import PromotionRegistry
from shopcart.shared.money import ZERO, to_decimal
from shopcart.shared.validators import (
    require_code,
    require_positive_price,
    require_positive_quantity,
    require_reference,
)

logger = structlog.get_logger(__name__)


class Cart:
    def __init__(self):
        self._ledgers = {}
        self._promotions = PromotionRegistry()

    def __repr__(self):
        return f"<Cart references={sorted(self._ledgers)!r} active={sorted(self._promotions.active_codes())!r}>"

    def __len__(self):
        return len(self._ledgers)

    def __contains__(self, reference):
        return reference in self._ledgers

    def _ledger(self, reference):
        require_reference(reference)
        try:
            return self._ledgers[reference]
        except KeyError:
            raise UnknownReference({"reference": [f"Reference '{reference}' is not in the cart"]}) from None

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, reference, price, quantity):
        """Add ``quantity`` units of ``reference`` at unit ``price``."""
        require_reference(reference)
        price = require_positive_price(price)
        quantity = require_positive_quantity(quantity)

        ledger = self._ledgers.get(reference)
        if ledger is None:
            ledger = PriceLedger(reference)
            self._ledgers[reference] = ledger
        ledger.add_stock(price, quantity)

    def remove_item(self, reference, quantity):
        """Remove ``quantity`` units of ``reference``, most expensive first.

        Returns the ``(price, quantity)`` pairs consumed.
        """
        ledger = self._ledger(reference)
        consumed = ledger.remove_stock(quantity)

        if ledger.is_empty():
            del self._ledgers[reference]
            logger.debug("reference_removed", reference=reference)
        return consumed

    def clear(self):
        """Drop every ledger. Promotions and active codes are kept."""
        self._ledgers.clear()

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def get_quantity(self, reference, price=None):
        """Units of ``reference``, across all prices or at ``price`` only."""
        ledger = self._ledger(reference)
        if price is None:
            return ledger.total_quantity
        return ledger.quantity_at_price(price)

    def get_sub_total(self, reference, price):
        price = require_positive_price(price)
        return price * self.get_quantity(reference, price)

    def get_references(self):
        return set(self._ledgers)

    def get_prices_for_reference(self, reference):
        return set(self._ledger(reference).prices())

    def get_total_quantity(self):
        return sum(ledger.total_quantity for ledger in self._ledgers.values())

    # -------------------------------------------------------------------
    # Promotions
    # -------------------------------------------------------------------
    def register_promo(self, code, reference, percentage, min_threshold=ZERO):
        """Register a percentage promotion. Registration does not activate it."""
        require_code(code)
        require_reference(reference)
        # Range checks live on the Promotion invariants
        rate = to_decimal(percentage, "percentage")
        threshold = to_decimal(min_threshold, "min_threshold")

        self._register(Promotion.percentage_off, code, reference, rate, threshold)

    def register_buy_n_get_one_free(self, code, reference, n):
        """Register a "buy n, get one free" promotion (packs of n + 1 units)."""
        require_code(code)
        require_reference(reference)
        n = require_positive_quantity(n, "n")

        self._register(Promotion.buy_n_get_one_free, code, reference, n)

    def _register(self, factory, *args):
        try:
            promotion = factory(*args)
        except ValidationError as exc:
            raise InvalidInput(exc.messages) from exc
        self._promotions.register(promotion)

    def activate_promo(self, code):
        """Activate ``code``. Unknown or clashing codes return False."""
        return self._promotions.activate(code)

    def deactivate_promo(self, code):
        return self._promotions.deactivate(code)

    def get_active_codes(self):
        return self._promotions.active_codes()

    def get_promotion(self, code):
        return self._promotions.get(code)

    # -------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------
    def get_line_pricing(self, reference):
        ledger = self._ledger(reference)
        return price_ledger(ledger, self._promotions.active_for(reference))

    def get_pricing(self):
        """One LinePricing per reference, ordered by reference."""
        return [
            price_ledger(self._ledgers[reference], self._promotions.active_for(reference))
            for reference in sorted(self._ledgers)
        ]

    def get_gross_amount(self):
        return sum((ledger.total_value() for ledger in self._ledgers.values()), ZERO)

    def get_total_amount(self):
        total = sum((line.net for line in self.get_pricing()), ZERO)
        logger.debug("total_computed", references=len(self._ledgers), total=str(total))
        return total

    def get_discount_amount(self):
        return self.get_gross_amount() - self.get_total_amount()
