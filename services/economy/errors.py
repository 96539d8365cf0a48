"""Error taxonomy for the economy service.

Player-facing failures are values, not exceptions: rule functions collect them
in their result's `errors` list and leave PlayerState untouched.
"""

from dataclasses import dataclass
from enum import StrEnum


class ErrorKind(StrEnum):
    OUT_OF_STOCK = "out_of_stock"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    NO_LOOT_AVAILABLE = "no_loot_available"
    MISSING_CATALOG_SOURCE = "missing_catalog_source"  # informational
    NOT_IN_SHOP = "not_in_shop"
    NOT_IN_INVENTORY = "not_in_inventory"
    UNKNOWN_SHOP = "unknown_shop"
    INVALID_COMMAND = "invalid_command"


@dataclass(frozen=True)
class EconomyError:
    """A rejected operation, with a message fit for a transient notice."""

    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return self.message


def out_of_stock(name: str) -> EconomyError:
    return EconomyError(ErrorKind.OUT_OF_STOCK, f"{name} is out of stock!")


def insufficient_funds(needed: int, available: int) -> EconomyError:
    return EconomyError(
        ErrorKind.INSUFFICIENT_FUNDS,
        f"Not enough coins! Needs {needed}, has {available}",
    )


def no_loot_available() -> EconomyError:
    return EconomyError(ErrorKind.NO_LOOT_AVAILABLE, "No loot available in this pool")


def not_in_inventory(name: str) -> EconomyError:
    return EconomyError(ErrorKind.NOT_IN_INVENTORY, f"'{name}' is not in the inventory")
