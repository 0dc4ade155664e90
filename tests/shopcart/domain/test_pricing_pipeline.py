"""Tests for the per-reference pricing pipeline."""

from decimal import Decimal

import pytest
from shopcart.exceptions import InvalidInput
from shopcart.ledger.ledger import PriceLedger
from shopcart.pricing.pipeline import LinePricing, price_ledger
from shopcart.promotion.promotion import Promotion
from shopcart.shared.money import ZERO


def _make_ledger(reference, *lots):
    ledger = PriceLedger(reference)
    for price, quantity in lots:
        ledger.add_stock(Decimal(price), quantity)
    return ledger


class TestNoPromotion:
    def test_net_is_gross(self):
        ledger = _make_ledger("Pomme", ("2.00", 3))
        pricing = price_ledger(ledger)
        assert isinstance(pricing, LinePricing)
        assert pricing.gross == Decimal("6.00")
        assert pricing.net == Decimal("6.00")
        assert pricing.discount_total == ZERO
        assert pricing.quantity == 3
        assert pricing.reference == "Pomme"


class TestBundle:
    def test_one_pack_gives_one_free(self):
        ledger = _make_ledger("Cahier", ("10.00", 3))
        pricing = price_ledger(ledger, [Promotion.buy_n_get_one_free("3POUR2", "Cahier", 2)])
        assert pricing.free_units == 1
        assert pricing.bundle_discount == Decimal("10.00")
        assert pricing.net == Decimal("20.00")

    def test_incomplete_pack_gives_nothing(self):
        ledger = _make_ledger("Cahier", ("10.00", 2))
        pricing = price_ledger(ledger, [Promotion.buy_n_get_one_free("3POUR2", "Cahier", 2)])
        assert pricing.free_units == 0
        assert pricing.net == Decimal("20.00")

    def test_cheapest_unit_is_free(self):
        ledger = _make_ledger("Mix", ("100.00", 1), ("50.00", 1), ("10.00", 1))
        pricing = price_ledger(ledger, [Promotion.buy_n_get_one_free("PROMO_MIX", "Mix", 2)])
        assert pricing.bundle_discount == Decimal("10.00")
        assert pricing.net == Decimal("150.00")

    def test_several_free_units_take_the_cheapest(self):
        ledger = _make_ledger("Bonbon", ("10.00", 2), ("20.00", 2))
        pricing = price_ledger(ledger, [Promotion.buy_n_get_one_free("1POUR1", "Bonbon", 1)])
        assert pricing.free_units == 2
        assert pricing.bundle_discount == Decimal("20.00")
        assert pricing.net == Decimal("40.00")


class TestPercentage:
    def test_percentage_off(self):
        ledger = _make_ledger("Pomme", ("100.00", 1))
        pricing = price_ledger(ledger, [Promotion.percentage_off("POMME10", "Pomme", Decimal("10"))])
        assert pricing.percentage_discount == Decimal("10")
        assert pricing.net == Decimal("90.00")

    def test_threshold_not_met(self):
        ledger = _make_ledger("Pomme", ("50.00", 1))
        promotion = Promotion.percentage_off("BIG10", "Pomme", Decimal("10"), Decimal("100.00"))
        pricing = price_ledger(ledger, [promotion])
        assert pricing.percentage_discount == ZERO
        assert pricing.net == Decimal("50.00")

    def test_threshold_met(self):
        ledger = _make_ledger("Pomme", ("150.00", 1))
        promotion = Promotion.percentage_off("BIG10", "Pomme", Decimal("10"), Decimal("100.00"))
        assert price_ledger(ledger, [promotion]).net == Decimal("135.00")

    def test_threshold_is_inclusive(self):
        ledger = _make_ledger("Pomme", ("100.00", 1))
        promotion = Promotion.percentage_off("BIG10", "Pomme", Decimal("10"), Decimal("100.00"))
        assert price_ledger(ledger, [promotion]).net == Decimal("90.00")

    def test_fractional_percentage_is_exact(self):
        ledger = _make_ledger("Pomme", ("0.10", 3))
        pricing = price_ledger(ledger, [Promotion.percentage_off("P", "Pomme", Decimal("12.5"))])
        assert pricing.net == Decimal("0.2625")


class TestCombined:
    def test_bundle_then_percentage(self):
        ledger = _make_ledger("Livre", ("100.00", 3))
        promotions = [
            Promotion.percentage_off("NOEL10", "Livre", Decimal("10")),
            Promotion.buy_n_get_one_free("B2G1", "Livre", 2),
        ]
        pricing = price_ledger(ledger, promotions)
        assert pricing.bundle_discount == Decimal("100.00")
        assert pricing.percentage_discount == Decimal("20")
        assert pricing.net == Decimal("180.00")
        assert pricing.discount_total == Decimal("120.00")

    def test_threshold_compares_post_bundle_amount(self):
        # gross 300 clears the threshold, but 200 after the bundle does not
        ledger = _make_ledger("Livre", ("100.00", 3))
        promotions = [
            Promotion.buy_n_get_one_free("B2G1", "Livre", 2),
            Promotion.percentage_off("BIG10", "Livre", Decimal("10"), Decimal("250.00")),
        ]
        pricing = price_ledger(ledger, promotions)
        assert pricing.percentage_discount == ZERO
        assert pricing.net == Decimal("200.00")

    def test_net_never_negative(self):
        ledger = _make_ledger("Bonbon", ("0.01", 1))
        promotions = [
            Promotion.buy_n_get_one_free("1POUR1", "Bonbon", 1),
            Promotion.percentage_off("P", "Bonbon", Decimal("99.99")),
        ]
        assert price_ledger(ledger, promotions).net >= ZERO


class TestGuards:
    def test_two_promotions_of_same_kind_rejected(self):
        ledger = _make_ledger("Pomme", ("1.00", 1))
        promotions = [
            Promotion.percentage_off("A", "Pomme", Decimal("10")),
            Promotion.percentage_off("B", "Pomme", Decimal("20")),
        ]
        with pytest.raises(InvalidInput):
            price_ledger(ledger, promotions)

    def test_promotion_for_other_reference_rejected(self):
        ledger = _make_ledger("Pomme", ("1.00", 1))
        with pytest.raises(InvalidInput):
            price_ledger(ledger, [Promotion.percentage_off("A", "Orange", Decimal("10"))])
