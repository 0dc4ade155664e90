"""Promotion registry — registered definitions and the set of active codes.

Registration never activates. Activation is refused (``False``, not an
error) when the code is unknown or when another active promotion of the
same kind already targets the same reference. A reference can therefore
carry at most one Percentage and one BuyNGetOneFree promotion at a time.
"""

import structlog

from shopcart.exceptions import NotFound

logger = structlog.get_logger(__name__)


class PromotionRegistry:
    def __init__(self):
        self._promotions = {}
        # Insertion-ordered set of active codes
        self._active = {}

    def __len__(self):
        return len(self._promotions)

    def __contains__(self, code):
        return code in self._promotions

    # -------------------------------------------------------------------
    # Definitions
    # -------------------------------------------------------------------
    def register(self, promotion):
        """Store ``promotion`` under its code, replacing any previous definition.

        A replaced definition that was active stays active only if the new
        definition does not clash with another active promotion.
        """
        code = promotion.code
        self._promotions[code] = promotion

        if code in self._active and self._conflicting_code(promotion) is not None:
            del self._active[code]
            logger.info("promotion_deactivated", code=code, reason="kind_conflict")

        logger.debug(
            "promotion_registered",
            code=code,
            reference=promotion.reference,
            kind=promotion.kind,
        )

    def get(self, code):
        try:
            return self._promotions[code]
        except (KeyError, TypeError):
            raise NotFound({"code": [f"Promotion '{code}' is not registered"]}) from None

    def is_registered(self, code):
        return code in self._promotions

    # -------------------------------------------------------------------
    # Activation
    # -------------------------------------------------------------------
    def activate(self, code):
        promotion = self._promotions.get(code) if isinstance(code, str) else None
        if promotion is None:
            logger.info("promotion_rejected", code=code, reason="unregistered")
            return False

        if code in self._active:
            return True

        conflict = self._conflicting_code(promotion)
        if conflict is not None:
            logger.info(
                "promotion_rejected",
                code=code,
                reason="kind_conflict",
                conflicts_with=conflict,
                reference=promotion.reference,
            )
            return False

        self._active[code] = None
        logger.debug("promotion_activated", code=code, reference=promotion.reference)
        return True

    def deactivate(self, code):
        if not isinstance(code, str) or code not in self._active:
            return False

        del self._active[code]
        logger.debug("promotion_deactivated", code=code)
        return True

    def clear_active(self):
        self._active.clear()

    def is_active(self, code):
        return code in self._active

    def active_codes(self):
        return frozenset(self._active)

    def active_for(self, reference):
        """Active promotions targeting ``reference``: at most one per kind."""
        return tuple(
            self._promotions[code] for code in self._active if self._promotions[code].reference == reference
        )

    def _conflicting_code(self, promotion):
        for code in self._active:
            if code == promotion.code:
                continue
            active = self._promotions[code]
            if active.reference == promotion.reference and active.kind == promotion.kind:
                return code
        return None
