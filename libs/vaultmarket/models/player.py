"""PlayerState — the persisted economy record."""

from pydantic import BaseModel, Field

from vaultmarket.models.inventory import InventoryEntry
from vaultmarket.models.shops import ShopDefinition

SCHEMA_VERSION = 1

STARTING_CURRENCY = 1000
DEFAULT_RESTOCK_INTERVAL_DAYS = 3
DEFAULT_PRICE_VARIATION = 0.2
DEFAULT_ITEM_FOLDER = "Items/"
DEFAULT_ITEM_TAG = "item"


class PricedStock(BaseModel):
    """Price and stock tracked for one catalog id.

    `None` means "not established yet": no base price recorded, current price
    falls back to base, stock not initialized.
    """

    base_price: int | None = Field(ge=0, default=None)
    current_price: int | None = Field(ge=0, default=None)
    stock: int | None = Field(ge=0, default=None)


class PlayerState(BaseModel):
    """Everything the economy persists between sessions."""

    schema_version: int = SCHEMA_VERSION
    currency: int = Field(ge=0, default=STARTING_CURRENCY)
    inventory: list[InventoryEntry] = Field(default_factory=list)
    last_restock_timestamp: int | None = None  # epoch millis
    restock_interval_days: int = Field(ge=0, default=DEFAULT_RESTOCK_INTERVAL_DAYS)
    price_variation_fraction: float = Field(ge=0.0, le=1.0, default=DEFAULT_PRICE_VARIATION)
    item_folder_path: str = DEFAULT_ITEM_FOLDER
    item_tag: str | None = DEFAULT_ITEM_TAG
    shops: list[ShopDefinition] = Field(default_factory=list)
    ledger: dict[str, PricedStock] = Field(default_factory=dict)

    def find_shop(self, name: str) -> ShopDefinition | None:
        """Look up a configured shop by name."""
        for shop in self.shops:
            if shop.name == name:
                return shop
        return None
