"""Shopcart bounded context — price-batch ledgers, promotions and cart totals.

A cart keeps one price ledger per product reference and prices each
reference through the promotion pipeline whenever a total is requested.
"""

import structlog
from protean.domain import Domain

shopcart = Domain(name="shopcart")

logger = structlog.get_logger(__name__)
