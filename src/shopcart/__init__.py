"""In-memory shopping cart with price-batch ledgers and stackable promotions."""

from shopcart.cart.cart import Cart
from shopcart.exceptions import (
    InsufficientStock,
    InvalidInput,
    NotFound,
    PriceNotFound,
    UnknownReference,
)
from shopcart.ledger.ledger import PriceLedger
from shopcart.pricing.pipeline import LinePricing, price_ledger
from shopcart.promotion.promotion import Promotion, PromotionKind
from shopcart.promotion.registry import PromotionRegistry

__all__ = [
    "Cart",
    "InsufficientStock",
    "InvalidInput",
    "LinePricing",
    "NotFound",
    "PriceLedger",
    "PriceNotFound",
    "Promotion",
    "PromotionKind",
    "PromotionRegistry",
    "UnknownReference",
    "price_ledger",
]
