"""Pricing engine — base prices and drifting current prices per catalog id."""

import logging

from vaultmarket import CatalogItem, PriceSource, PricedStock, RandomSource

from services.economy.dice import round_half_up, uniform

logger = logging.getLogger(__name__)


class PricingEngine:
    """Reads and writes the price half of the ledger.

    The ledger dict is owned by PlayerState; the engine only mutates entries.
    """

    def __init__(self, ledger: dict[str, PricedStock], rng: RandomSource) -> None:
        self._ledger = ledger
        self._rng = rng

    def _entry(self, item_id: str) -> PricedStock:
        entry = self._ledger.get(item_id)
        if entry is None:
            entry = PricedStock()
            self._ledger[item_id] = entry
        return entry

    def base_price(self, item_id: str) -> int | None:
        entry = self._ledger.get(item_id)
        return entry.base_price if entry is not None else None

    def establish(self, item: CatalogItem) -> int:
        """Record the item's base price and return the price to use.

        Declared prices (metadata or body marker) replace a stored base price
        that differs, dropping the stale drifted price. Random fallback prices
        are only recorded when no base price exists yet.
        """
        entry = self._entry(item.id)
        if entry.base_price is None:
            entry.base_price = item.base_price
        elif item.price_source != PriceSource.FALLBACK and entry.base_price != item.base_price:
            logger.info(
                "Base price of %s changed %d -> %d", item.id, entry.base_price, item.base_price
            )
            entry.base_price = item.base_price
            entry.current_price = None
        return entry.base_price

    def current_price(self, item_id: str) -> int:
        """Stored current price, else base price, else 0 for unknown ids."""
        entry = self._ledger.get(item_id)
        if entry is None:
            return 0
        if entry.current_price is not None:
            return entry.current_price
        return entry.base_price or 0

    def restock(self, item_id: str, base_price: int, variation: float) -> int:
        """Draw a new current price within ±variation of the base price."""
        factor = 1 + uniform(self._rng, -variation, variation)
        price = max(0, round_half_up(base_price * factor))
        entry = self._entry(item_id)
        if entry.base_price is None:
            entry.base_price = base_price
        entry.current_price = price
        return price
