"""Error taxonomy for the shopcart context.

Every error is a caller input or state violation. The classes extend
protean's exceptions so callers already catching ``ValidationError`` or
``ObjectNotFoundError`` keep working. Messages follow protean's shape:
a dict mapping the offending field to a list of messages.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class InvalidInput(ValidationError):
    """Blank reference or code, non-positive price or quantity, bad promotion payload."""


class InsufficientStock(ValidationError):
    """A removal asked for more units than a reference holds."""


class UnknownReference(ObjectNotFoundError):
    """The reference has no ledger in the cart."""


class NotFound(ObjectNotFoundError):
    """A price tier or promotion code is absent."""


class PriceNotFound(NotFound):
    """No lot exists at the requested price."""
