"""Shop composition — derive a purchasable listing from a shop definition.

Listings are recomputed on every open. Random pools of custom shops are rolled
again each time unless the caller asks for a stable re-render of the listing
it already holds.
"""

import logging
from dataclasses import dataclass, field

from vaultmarket import (
    CatalogItem,
    CustomShop,
    Document,
    DocumentSource,
    FolderShop,
    ListingEntry,
    PricedStock,
    RandomSource,
    ShopDefinition,
    ShopListing,
)

from services.economy.catalog import find_document, resolve
from services.economy.dice import chance, shuffled
from services.economy.errors import ErrorKind
from services.economy.pricing import PricingEngine
from services.economy.stock import (
    DEFAULT_STOCK_RANGE,
    FIXED_ITEM_STOCK_RANGE,
    RARE_ITEM_STOCK_RANGE,
    StockLedger,
)

logger = logging.getLogger(__name__)

DEFAULT_SHOP_NAME = "Shop"
EMPTY_CUSTOM_NOTICE = "This shop has nothing for sale right now."


def empty_folder_notice(shop: FolderShop) -> str:
    if shop.item_tag:
        return (
            f"No items available. Add notes with the #{shop.item_tag} tag "
            f"or in the {shop.folder_path} folder."
        )
    return f"No items available. Add notes in the {shop.folder_path} folder."


@dataclass
class OpenListing:
    """A listing handed to the host, plus the transient stock of its rare picks."""

    listing: ShopListing
    rare_stock: dict[str, PricedStock] = field(default_factory=dict)

    @property
    def rare_ids(self) -> list[str]:
        return list(self.rare_stock)


async def folder_members(
    source: DocumentSource, folder_path: str, item_tag: str | None = None
) -> list[Document]:
    """Notes under `folder_path` plus notes tagged `item_tag`, deduplicated by path."""
    members: dict[str, Document] = {}
    if folder_path:
        for document in await source.find_by_prefix(folder_path):
            members[document.path] = document
    if item_tag:
        for document in await source.find_by_tag(item_tag):
            members.setdefault(document.path, document)
    return [members[path] for path in sorted(members)]


class ShopComposer:
    """Builds listings from the catalog and the price/stock ledgers."""

    def __init__(
        self,
        source: DocumentSource,
        pricing: PricingEngine,
        stock: StockLedger,
        rng: RandomSource,
    ) -> None:
        self._source = source
        self._pricing = pricing
        self._stock = stock
        self._rng = rng

    async def compose(
        self,
        shop: ShopDefinition,
        previous: OpenListing | None = None,
        reroll: bool = True,
    ) -> OpenListing:
        """Compose a fresh listing for `shop`.

        With `reroll=False` and a previous listing, the previous rare picks
        (and their remaining stock) are kept instead of rolling the pools again.
        """
        if isinstance(shop, FolderShop):
            return await self._compose_folder(shop)
        keep = previous if (previous is not None and not reroll) else None
        return await self._compose_custom(shop, keep)

    async def _resolve_priced(self, document: Document) -> tuple[CatalogItem, int]:
        item = await resolve(document, self._source, self._rng)
        base_price = self._pricing.establish(item)
        # list the recorded base, not a fresh fallback roll
        item = item.model_copy(update={"base_price": base_price})
        return item, self._pricing.current_price(item.id)

    async def _compose_folder(self, shop: FolderShop) -> OpenListing:
        documents = await folder_members(self._source, shop.folder_path, shop.item_tag)
        listing = ShopListing(shop_name=shop.name, description=shop.description)
        if not documents:
            logger.info("Shop '%s' has no catalog notes", shop.name)
            listing.notice = empty_folder_notice(shop)
            listing.notice_kind = ErrorKind.MISSING_CATALOG_SOURCE.value
            return OpenListing(listing=listing)

        for document in documents:
            item, price = await self._resolve_priced(document)
            stock = self._stock.ensure_initialized(item.id, DEFAULT_STOCK_RANGE)
            listing.entries.append(
                ListingEntry(item=item, price=price, stock=stock, purchasable=stock > 0)
            )
        return OpenListing(listing=listing)

    async def _compose_custom(self, shop: CustomShop, keep: OpenListing | None) -> OpenListing:
        listing = ShopListing(shop_name=shop.name, description=shop.description)
        listed: set[str] = set()

        for item_id in shop.fixed_item_ids:
            if item_id in listed:
                continue
            document = await find_document(self._source, item_id)
            if document is None:
                logger.warning("Shop '%s' lists missing note %s", shop.name, item_id)
                continue
            item, price = await self._resolve_priced(document)
            stock = self._stock.ensure_initialized(item.id, FIXED_ITEM_STOCK_RANGE)
            listing.entries.append(
                ListingEntry(item=item, price=price, stock=stock, purchasable=stock > 0)
            )
            listed.add(item.id)

        if keep is not None:
            rare_stock = keep.rare_stock
            rare_ids = [i for i in keep.rare_ids if i not in listed]
        else:
            rare_stock = {}
            rare_ids = [i for i in self._roll_pools(shop) if i not in listed]

        rare_ledger = StockLedger(rare_stock, self._rng)
        for item_id in rare_ids:
            document = await find_document(self._source, item_id)
            if document is None:
                logger.warning("Pool item %s of shop '%s' is missing", item_id, shop.name)
                rare_stock.pop(item_id, None)
                continue
            item, price = await self._resolve_priced(document)
            stock = rare_ledger.ensure_initialized(item.id, RARE_ITEM_STOCK_RANGE)
            listing.entries.append(
                ListingEntry(item=item, price=price, stock=stock, rare=True, purchasable=stock > 0)
            )
            listed.add(item.id)

        if not listing.entries:
            listing.notice = EMPTY_CUSTOM_NOTICE
            listing.notice_kind = ErrorKind.MISSING_CATALOG_SOURCE.value
        return OpenListing(listing=listing, rare_stock=rare_stock)

    def _roll_pools(self, shop: CustomShop) -> list[str]:
        """Shuffle each pool, take up to max_items, keep each with the pool's chance."""
        picked: list[str] = []
        for pool in shop.random_pools:
            candidates = shuffled(self._rng, pool.item_ids)[: min(pool.max_items, len(pool.item_ids))]
            for item_id in candidates:
                if chance(self._rng, pool.chance) and item_id not in picked:
                    picked.append(item_id)
        logger.debug("Shop '%s' rolled rare items: %s", shop.name, picked)
        return picked
