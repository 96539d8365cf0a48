"""Economy rules — one function per host operation.

Each function takes its command payload and the EconomyState, validates, and
applies side effects only when the whole operation succeeds. Rejections come
back as EconomyError values and leave the PlayerState untouched. Every
mutation ends with a flush of the full record.
"""

import logging
from dataclasses import dataclass, field

from vaultmarket import (
    CatalogItem,
    InventoryEntry,
    LootRoll,
    OpenShop,
    Purchase,
    RemoveShop,
    Restock,
    SaveShop,
    Sell,
    ShopListing,
    UpdateSettings,
    UseItem,
)

from services.economy.catalog import resolve
from services.economy.errors import (
    EconomyError,
    ErrorKind,
    insufficient_funds,
    not_in_inventory,
    out_of_stock,
)
from services.economy.inventory import UseOutcome
from services.economy.loot import LootConfig, find_treasure, resolve_loot
from services.economy.restock import perform_restock, restock_if_due
from services.economy.shops import DEFAULT_SHOP_NAME, OpenListing, folder_members
from services.economy.state import EconomyState
from services.economy.stock import StockLedger

logger = logging.getLogger(__name__)


@dataclass
class ShopResult:
    errors: list[EconomyError] = field(default_factory=list)
    listing: ShopListing | None = None


@dataclass
class PurchaseResult:
    """Result of attempting to buy one unit."""

    errors: list[EconomyError] = field(default_factory=list)
    item_id: str = ""
    name: str = ""
    price: int = 0
    remaining_stock: int = 0


@dataclass
class SaleResult:
    errors: list[EconomyError] = field(default_factory=list)
    name: str = ""
    coins_gained: int = 0


@dataclass
class UseResult:
    errors: list[EconomyError] = field(default_factory=list)
    outcome: UseOutcome | None = None


@dataclass
class LootResult:
    errors: list[EconomyError] = field(default_factory=list)
    awarded: list[InventoryEntry] = field(default_factory=list)


@dataclass
class TreasureResult:
    coins_found: int = 0


@dataclass
class RestockResult:
    performed: bool = False
    restocked_ids: list[str] = field(default_factory=list)


# --- Shops ---


async def _open_listing(state: EconomyState, shop_name: str | None, reroll: bool) -> OpenListing | None:
    shop = state.find_shop(shop_name)
    if shop is None:
        return None
    previous = state.open_listings.get(shop.name)
    opened = await state.composer.compose(shop, previous=previous, reroll=reroll)
    state.open_listings[shop.name] = opened
    # first sight initializes stock and base prices
    await state.flush()
    return opened


async def process_open_shop(cmd: OpenShop, state: EconomyState) -> ShopResult:
    """Compose the listing for a shop and remember it for purchases."""
    opened = await _open_listing(state, cmd.shop_name, cmd.reroll)
    if opened is None:
        return ShopResult(errors=[_unknown_shop(cmd.shop_name)])
    return ShopResult(listing=opened.listing)


def _unknown_shop(name: str | None) -> EconomyError:
    return EconomyError(ErrorKind.UNKNOWN_SHOP, f"No shop named '{name or DEFAULT_SHOP_NAME}'")


async def process_purchase(cmd: Purchase, state: EconomyState) -> PurchaseResult:
    """Buy one unit of a listed item.

    The item must be in the shop's open listing (the listing is composed on the
    spot if the shop was never opened). Stock is re-checked against the live
    ledger, so a listing rendered before the last purchase cannot oversell.
    """
    result = PurchaseResult(item_id=cmd.item_id)
    shop = state.find_shop(cmd.shop_name)
    if shop is None:
        result.errors.append(_unknown_shop(cmd.shop_name))
        return result

    opened = state.open_listings.get(shop.name)
    if opened is None:
        opened = await state.composer.compose(shop)
        state.open_listings[shop.name] = opened
        # composing initializes stock and base prices, even if the purchase fails
        await state.flush()

    entry = opened.listing.find(cmd.item_id)
    if entry is None:
        result.errors.append(
            EconomyError(ErrorKind.NOT_IN_SHOP, f"'{cmd.item_id}' is not sold in {shop.name}")
        )
        return result

    ledger = StockLedger(opened.rare_stock, state.rng) if entry.rare else state.stock
    result.name = entry.item.name

    if ledger.stock(cmd.item_id) <= 0:
        entry.stock = 0
        entry.purchasable = False
        result.errors.append(out_of_stock(entry.item.name))
        return result

    price = state.pricing.current_price(cmd.item_id)
    if state.inventory.currency < price:
        result.errors.append(insufficient_funds(price, state.inventory.currency))
        return result

    ledger.decrement(cmd.item_id)
    state.inventory.debit(price)
    state.inventory.add_item(InventoryEntry.from_catalog(entry.item, price=price))

    entry.price = price
    entry.stock = ledger.stock(cmd.item_id)
    entry.purchasable = entry.stock > 0
    await state.flush()

    result.price = price
    result.remaining_stock = entry.stock
    logger.info("Purchased %s for %d (stock left %d)", entry.item.name, price, entry.stock)
    return result


# --- Inventory ---


async def process_sell(cmd: Sell, state: EconomyState) -> SaleResult:
    """Sell one unit back for half price (at least 25 coins)."""
    coins = state.inventory.sell(cmd.item_name)
    if coins is None:
        return SaleResult(errors=[not_in_inventory(cmd.item_name)], name=cmd.item_name)
    await state.flush()
    logger.info("Sold %s for %d coins", cmd.item_name, coins)
    return SaleResult(name=cmd.item_name, coins_gained=coins)


async def process_use(cmd: UseItem, state: EconomyState) -> UseResult:
    """Use an item; consumables spend a use, others only report it."""
    outcome = state.inventory.use_one(cmd.item_name)
    if outcome is None:
        return UseResult(errors=[not_in_inventory(cmd.item_name)])
    if outcome.consumable:
        await state.flush()
    return UseResult(outcome=outcome)


async def process_reset_coins(state: EconomyState) -> list[EconomyError]:
    state.inventory.reset_currency()
    await state.flush()
    return []


async def process_clear_inventory(state: EconomyState) -> list[EconomyError]:
    state.inventory.clear()
    await state.flush()
    return []


# --- Loot ---


async def _loot_pool(cmd: LootRoll, state: EconomyState) -> list[CatalogItem]:
    folder = cmd.folder_path
    tag = cmd.tag
    if folder is None and tag is None:
        folder = state.player.item_folder_path
        tag = state.player.item_tag
    pool: list[CatalogItem] = []
    for document in await folder_members(state.documents, folder or "", tag or None):
        item = await resolve(document, state.documents, state.rng)
        base_price = state.pricing.establish(item)
        pool.append(item.model_copy(update={"base_price": base_price}))
    return pool


async def process_loot_roll(cmd: LootRoll, state: EconomyState) -> LootResult:
    """Roll once for loot from the pool and add whatever drops."""
    pool = await _loot_pool(cmd, state)
    config = LootConfig(
        min_items=cmd.min_items,
        max_items=cmd.max_items,
        chance_percent=cmd.chance_percent,
    )
    awarded, error = resolve_loot(pool, config, state.rng)
    if error is not None:
        return LootResult(errors=[error])

    for entry in awarded:
        state.inventory.add_item(entry)
    await state.flush()
    logger.info("Loot roll awarded %d items", len(awarded))
    return LootResult(awarded=awarded)


async def process_find_treasure(state: EconomyState) -> TreasureResult:
    """Search for coins; finds are credited immediately."""
    coins = find_treasure(state.rng)
    if coins:
        state.inventory.credit(coins)
        await state.flush()
    return TreasureResult(coins_found=coins)


# --- Restock ---


async def process_restock(cmd: Restock, state: EconomyState) -> RestockResult:
    """Restock now (`force`) or only if the interval has elapsed."""
    if cmd.force:
        ids = await perform_restock(state)
    else:
        ids = await restock_if_due(state)
        if ids is None:
            return RestockResult()
    return RestockResult(performed=True, restocked_ids=ids)


# --- Settings ---


async def process_save_shop(cmd: SaveShop, state: EconomyState) -> list[EconomyError]:
    """Add a shop, or replace the one with the same name."""
    shops = [s for s in state.player.shops if s.name != cmd.shop.name]
    shops.append(cmd.shop)
    state.player.shops = shops
    state.open_listings.pop(cmd.shop.name, None)
    await state.flush()
    return []


async def process_remove_shop(cmd: RemoveShop, state: EconomyState) -> list[EconomyError]:
    if state.player.find_shop(cmd.shop_name) is None:
        return [_unknown_shop(cmd.shop_name)]
    state.player.shops = [s for s in state.player.shops if s.name != cmd.shop_name]
    state.open_listings.pop(cmd.shop_name, None)
    await state.flush()
    return []


async def process_update_settings(cmd: UpdateSettings, state: EconomyState) -> list[EconomyError]:
    player = state.player
    if cmd.item_folder_path is not None:
        player.item_folder_path = cmd.item_folder_path
    if cmd.item_tag is not None:
        player.item_tag = cmd.item_tag.lstrip("#") or None
    if cmd.restock_interval_days is not None:
        player.restock_interval_days = cmd.restock_interval_days
    if cmd.price_variation_fraction is not None:
        player.price_variation_fraction = cmd.price_variation_fraction
    state.open_listings.pop(DEFAULT_SHOP_NAME, None)
    await state.flush()
    return []
