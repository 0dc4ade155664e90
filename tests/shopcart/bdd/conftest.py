"""Shared BDD fixtures and step definitions for the shopcart context."""

from decimal import Decimal

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from shopcart.cart.cart import Cart
from shopcart.exceptions import InsufficientStock, InvalidInput


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def activation():
    """Result of the last promotion activation."""
    return {"result": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart", target_fixture="cart")
def empty_cart():
    return Cart()


@given(parsers.cfparse('the cart holds {quantity:d} "{reference}" at {price}'))
def cart_holds(cart, quantity, reference, price):
    cart.add_item(reference, Decimal(price), quantity)


@given(parsers.cfparse('a {percentage:d} percent promotion "{code}" on "{reference}" above {threshold}'))
def percentage_promotion_with_threshold(cart, percentage, code, reference, threshold):
    cart.register_promo(code, reference, percentage, Decimal(threshold))


@given(parsers.cfparse('a {percentage:d} percent promotion "{code}" on "{reference}"'))
def percentage_promotion(cart, percentage, code, reference):
    cart.register_promo(code, reference, percentage)


@given(parsers.cfparse('a buy {n:d} get one free promotion "{code}" on "{reference}"'))
def bundle_promotion(cart, n, code, reference):
    cart.register_buy_n_get_one_free(code, reference, n)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart total is {amount}"))
def cart_total_is(cart, amount):
    assert cart.get_total_amount() == Decimal(amount)


@then("the cart action fails with an invalid input error")
def cart_action_fails_invalid(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], InvalidInput)


@then("the cart action fails with an insufficient stock error")
def cart_action_fails_stock(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], InsufficientStock)
    assert isinstance(error["exc"], ValidationError)
