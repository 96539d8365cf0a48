"""Inventory ledger — the player's stacks and coin balance."""

from dataclasses import dataclass

from vaultmarket import STARTING_CURRENCY, InventoryEntry, PlayerState

DEFAULT_SELL_BASIS = 50
MIN_SELL_PRICE = 25


def sell_price(price: int | None) -> int:
    """Half the purchase price, never below 25. Unknown prices count as 50."""
    basis = DEFAULT_SELL_BASIS if price is None else price
    return max(basis // 2, MIN_SELL_PRICE)


@dataclass
class UseOutcome:
    """What happened when an item was used."""

    name: str
    consumable: bool
    remaining_uses: int = 0
    consumed_one: bool = False  # a unit of the stack was spent
    removed: bool = False  # the stack is gone


class InventoryLedger:
    """Mutations over PlayerState.inventory and PlayerState.currency."""

    def __init__(self, player: PlayerState) -> None:
        self._player = player

    @property
    def entries(self) -> list[InventoryEntry]:
        return self._player.inventory

    @property
    def currency(self) -> int:
        return self._player.currency

    def find(self, name: str) -> InventoryEntry | None:
        for entry in self._player.inventory:
            if entry.name == name:
                return entry
        return None

    # --- Currency ---

    def credit(self, amount: int) -> None:
        self._player.currency += amount

    def debit(self, amount: int) -> bool:
        """Subtract coins. Returns False if the balance is too low."""
        if self._player.currency < amount:
            return False
        self._player.currency -= amount
        return True

    def reset_currency(self) -> None:
        self._player.currency = STARTING_CURRENCY

    # --- Stacks ---

    def add_item(self, entry: InventoryEntry) -> InventoryEntry:
        """Merge into the stack with the same name, or start a new one."""
        existing = self.find(entry.name)
        if existing is not None:
            existing.quantity += entry.quantity
            return existing
        stored = entry.model_copy(deep=True)
        self._player.inventory.append(stored)
        return stored

    def _drop(self, entry: InventoryEntry) -> None:
        self._player.inventory[:] = [e for e in self._player.inventory if e is not entry]

    def remove_one(self, name: str) -> bool:
        """Drop one unit; removes the stack at quantity 1."""
        entry = self.find(name)
        if entry is None:
            return False
        if entry.quantity > 1:
            entry.quantity -= 1
        else:
            self._drop(entry)
        return True

    def use_one(self, name: str) -> UseOutcome | None:
        """Use an item. None when the player holds no such stack.

        Consumables lose one use; when uses run out a unit is spent and the
        next one starts fresh, or the stack disappears if it was the last.
        """
        entry = self.find(name)
        if entry is None:
            return None
        uses = entry.consumable
        if not uses.is_consumable:
            return UseOutcome(name=name, consumable=False)

        uses.current_uses = max(uses.current_uses - 1, 0)
        if uses.current_uses > 0:
            return UseOutcome(name=name, consumable=True, remaining_uses=uses.current_uses)

        if entry.quantity > 1:
            entry.quantity -= 1
            uses.current_uses = uses.max_uses
            return UseOutcome(
                name=name,
                consumable=True,
                remaining_uses=uses.current_uses,
                consumed_one=True,
            )

        self._drop(entry)
        return UseOutcome(name=name, consumable=True, consumed_one=True, removed=True)

    def sell(self, name: str) -> int | None:
        """Sell one unit and credit the coins. None when not held."""
        entry = self.find(name)
        if entry is None:
            return None
        coins = sell_price(entry.price)
        self.remove_one(name)
        self.credit(coins)
        return coins

    def clear(self) -> None:
        self._player.inventory.clear()
