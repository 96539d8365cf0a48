"""Loot resolution — turn a pool of catalog items into awarded inventory."""

from dataclasses import dataclass

from vaultmarket import CatalogItem, InventoryEntry, RandomSource

from services.economy.dice import choice, random_int
from services.economy.errors import EconomyError, no_loot_available

TREASURE_THRESHOLD = 30


@dataclass(frozen=True)
class LootConfig:
    """How many items a successful roll awards and how likely it is."""

    min_items: int = 1
    max_items: int = 3
    chance_percent: float = 50.0


def resolve_loot(
    pool: list[CatalogItem], config: LootConfig, rng: RandomSource
) -> tuple[list[InventoryEntry], EconomyError | None]:
    """Roll once against the chance; on success pick items with replacement.

    Returns (awarded_entries, error_or_None). An empty pool is an error and
    does not consume a roll. Duplicates are expected and merge on insertion.
    """
    if not pool:
        return [], no_loot_available()

    roll = rng.random() * 100
    if roll >= config.chance_percent:
        return [], None

    count = random_int(rng, config.min_items, config.max_items)
    return [InventoryEntry.from_catalog(choice(rng, pool)) for _ in range(count)], None


def find_treasure(rng: RandomSource) -> int:
    """Search for loose coins: rolls 1–100, anything above 30 is found."""
    value = random_int(rng, 1, 100)
    return value if value > TREASURE_THRESHOLD else 0
