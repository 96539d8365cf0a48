"""Stock ledger — integer stock counts per catalog id."""

from vaultmarket import PricedStock, RandomSource

from services.economy.dice import random_int

DEFAULT_STOCK_RANGE = (1, 10)
FIXED_ITEM_STOCK_RANGE = (1, 5)
RARE_ITEM_STOCK_RANGE = (1, 3)


class StockLedger:
    """Stock half of the ledger. Stock never goes below zero."""

    def __init__(self, ledger: dict[str, PricedStock], rng: RandomSource) -> None:
        self._ledger = ledger
        self._rng = rng

    def stock(self, item_id: str) -> int:
        """Current stock, 0 when never initialized."""
        entry = self._ledger.get(item_id)
        if entry is None or entry.stock is None:
            return 0
        return entry.stock

    def is_initialized(self, item_id: str) -> bool:
        entry = self._ledger.get(item_id)
        return entry is not None and entry.stock is not None

    def ensure_initialized(
        self, item_id: str, stock_range: tuple[int, int] = DEFAULT_STOCK_RANGE
    ) -> int:
        """Roll a starting stock if the id has none yet. Returns the stock."""
        entry = self._ledger.setdefault(item_id, PricedStock())
        if entry.stock is None:
            entry.stock = random_int(self._rng, *stock_range)
        return entry.stock

    def decrement(self, item_id: str) -> bool:
        """Take one unit. Returns False (and changes nothing) at zero stock."""
        entry = self._ledger.get(item_id)
        if entry is None or entry.stock is None or entry.stock <= 0:
            return False
        entry.stock -= 1
        return True

    def restock(self, item_id: str, stock_range: tuple[int, int] = DEFAULT_STOCK_RANGE) -> int:
        """Replace the stock with a fresh roll."""
        entry = self._ledger.setdefault(item_id, PricedStock())
        entry.stock = random_int(self._rng, *stock_range)
        return entry.stock
