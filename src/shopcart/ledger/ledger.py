"""PriceLedger — the stock of one product reference, split into price lots.

Units of the same reference can enter the cart at different unit prices.
Each distinct price forms a lot. Lots are kept ordered by price so that:

    removal      consumes the most expensive units first, draining a lot
                 completely before cascading to the next cheaper one
    valuation    of "the N cheapest units" walks lots from the bottom up

A lot whose quantity reaches zero is deleted; the ledger never holds an
empty or negative lot. ``total_quantity`` is cached and moves in step with
every add and remove.
"""

from bisect import insort

import structlog

from shopcart.exceptions import InsufficientStock, PriceNotFound
from shopcart.shared.money import ZERO
from shopcart.shared.validators import (
    require_positive_price,
    require_positive_quantity,
    require_reference,
)

logger = structlog.get_logger(__name__)


class PriceLedger:
    """Ordered (price, quantity) lots for a single reference."""

    def __init__(self, reference):
        self._reference = require_reference(reference)
        self._lots = {}
        # Ascending, kept sorted on insert
        self._prices = []
        self._total_quantity = 0

    def __repr__(self):
        return f"<PriceLedger {self._reference!r} lots={self.lots()!r}>"

    def __len__(self):
        return len(self._prices)

    def __iter__(self):
        return iter(self.lots())

    @property
    def reference(self):
        return self._reference

    @property
    def total_quantity(self):
        return self._total_quantity

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_stock(self, price, quantity):
        """Add ``quantity`` units at ``price``, merging into an existing lot."""
        price = require_positive_price(price)
        quantity = require_positive_quantity(quantity)

        if price in self._lots:
            self._lots[price] += quantity
        else:
            self._lots[price] = quantity
            insort(self._prices, price)
        self._total_quantity += quantity

        logger.debug(
            "stock_added",
            reference=self._reference,
            price=str(price),
            quantity=quantity,
            total_quantity=self._total_quantity,
        )

    def remove_stock(self, quantity):
        """Remove ``quantity`` units, most expensive lots first.

        Returns the ``(price, quantity)`` pairs consumed, in the order they
        were taken.
        """
        quantity = require_positive_quantity(quantity)
        if quantity > self._total_quantity:
            raise InsufficientStock(
                {
                    "quantity": [
                        f"Insufficient stock for '{self._reference}': "
                        f"{self._total_quantity} available, {quantity} requested"
                    ]
                }
            )

        consumed = []
        remaining = quantity
        while remaining > 0:
            price = self._prices[-1]
            lot_quantity = self._lots[price]
            if lot_quantity <= remaining:
                # Drain the whole lot
                self._prices.pop()
                del self._lots[price]
                consumed.append((price, lot_quantity))
                remaining -= lot_quantity
            else:
                self._lots[price] = lot_quantity - remaining
                consumed.append((price, remaining))
                remaining = 0

        self._total_quantity -= quantity

        logger.debug(
            "stock_removed",
            reference=self._reference,
            quantity=quantity,
            consumed=[(str(price), qty) for price, qty in consumed],
            total_quantity=self._total_quantity,
        )
        return consumed

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def is_empty(self):
        return self._total_quantity == 0

    def total_value(self):
        return sum((price * quantity for price, quantity in self._lots.items()), ZERO)

    def quantity_at_price(self, price):
        price = require_positive_price(price)
        try:
            return self._lots[price]
        except KeyError:
            raise PriceNotFound({"price": [f"No stock at price {price} for '{self._reference}'"]}) from None

    def cheapest_value(self, count):
        """Value of the ``count`` cheapest units. Does not mutate the ledger."""
        if count <= 0:
            return ZERO
        if count >= self._total_quantity:
            return self.total_value()

        value = ZERO
        remaining = count
        for price in self._prices:
            taken = min(remaining, self._lots[price])
            value += price * taken
            remaining -= taken
            if remaining == 0:
                break
        return value

    def prices(self):
        """Distinct prices, highest first."""
        return list(reversed(self._prices))

    def lots(self):
        """``(price, quantity)`` pairs, highest price first."""
        return [(price, self._lots[price]) for price in reversed(self._prices)]
