from vaultmarket.models.catalog import CatalogItem, ConsumableSpec, PriceSource
from vaultmarket.models.envelope import Envelope
from vaultmarket.models.inventory import ConsumableUses, InventoryEntry
from vaultmarket.models.messages import (
    PAYLOAD_REGISTRY,
    ClearInventory,
    CommandResult,
    FindTreasure,
    LootRoll,
    MessageType,
    OpenShop,
    Purchase,
    RemoveShop,
    ResetCoins,
    Restock,
    SaveShop,
    Sell,
    UpdateSettings,
    UseItem,
)
from vaultmarket.models.player import SCHEMA_VERSION, PlayerState, PricedStock
from vaultmarket.models.shops import (
    CustomShop,
    FolderShop,
    ListingEntry,
    RandomPool,
    ShopDefinition,
    ShopListing,
)
from vaultmarket.models.topics import Topics, from_nats_subject, to_nats_subject

__all__ = [
    "CatalogItem",
    "ClearInventory",
    "CommandResult",
    "ConsumableSpec",
    "ConsumableUses",
    "CustomShop",
    "Envelope",
    "FindTreasure",
    "FolderShop",
    "InventoryEntry",
    "ListingEntry",
    "LootRoll",
    "MessageType",
    "OpenShop",
    "PAYLOAD_REGISTRY",
    "PlayerState",
    "PriceSource",
    "PricedStock",
    "Purchase",
    "RandomPool",
    "RemoveShop",
    "ResetCoins",
    "Restock",
    "SCHEMA_VERSION",
    "SaveShop",
    "Sell",
    "ShopDefinition",
    "ShopListing",
    "Topics",
    "UpdateSettings",
    "UseItem",
    "from_nats_subject",
    "to_nats_subject",
]
