"""EconomyState — the owned PlayerState plus the ports and engines around it.

Every rule function receives this object explicitly. There is no module-level
state: the PlayerState it wraps is the single record that gets persisted.
"""

import logging
import random

from vaultmarket import (
    Clock,
    DocumentSource,
    FolderShop,
    PlayerState,
    RandomSource,
    ShopDefinition,
    StateStore,
    SystemClock,
)

from services.economy.inventory import InventoryLedger
from services.economy.pricing import PricingEngine
from services.economy.shops import DEFAULT_SHOP_NAME, OpenListing, ShopComposer
from services.economy.stock import StockLedger

logger = logging.getLogger(__name__)


class EconomyState:
    """Tracks the player record, ledgers and currently open listings."""

    def __init__(
        self,
        player: PlayerState,
        documents: DocumentSource,
        store: StateStore | None = None,
        rng: RandomSource | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.player = player
        self.documents = documents
        self.store = store
        self.rng: RandomSource = rng if rng is not None else random.Random()
        self.clock: Clock = clock if clock is not None else SystemClock()
        self.pricing = PricingEngine(player.ledger, self.rng)
        self.stock = StockLedger(player.ledger, self.rng)
        self.inventory = InventoryLedger(player)
        self.composer = ShopComposer(documents, self.pricing, self.stock, self.rng)
        # shop name -> last listing handed out; transient, never persisted
        self.open_listings: dict[str, OpenListing] = {}

    @classmethod
    async def load(
        cls,
        store: StateStore,
        documents: DocumentSource,
        rng: RandomSource | None = None,
        clock: Clock | None = None,
    ) -> "EconomyState":
        """Load the saved record, or start from defaults."""
        player = await store.load()
        if player is None:
            logger.info("No saved economy state, starting fresh")
            player = PlayerState()
        return cls(player, documents, store=store, rng=rng, clock=clock)

    async def flush(self) -> None:
        """Persist the full record. Called after every mutation."""
        if self.store is not None:
            await self.store.save(self.player)

    # --- Shops ---

    def default_shop(self) -> FolderShop:
        """The item shop over the configured folder and tag."""
        return FolderShop(
            name=DEFAULT_SHOP_NAME,
            description="Items from your vault",
            folder_path=self.player.item_folder_path,
            item_tag=self.player.item_tag or None,
        )

    def shop_definitions(self) -> list[ShopDefinition]:
        """Configured shops, plus the default shop unless one overrides its name."""
        shops: list[ShopDefinition] = list(self.player.shops)
        if self.player.find_shop(DEFAULT_SHOP_NAME) is None:
            shops.insert(0, self.default_shop())
        return shops

    def find_shop(self, name: str | None) -> ShopDefinition | None:
        """Look up a shop by name; None selects the default shop."""
        wanted = name or DEFAULT_SHOP_NAME
        for shop in self.shop_definitions():
            if shop.name == wanted:
                return shop
        return None

    def folder_shops(self) -> list[FolderShop]:
        return [s for s in self.shop_definitions() if isinstance(s, FolderShop)]
