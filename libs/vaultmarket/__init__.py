"""Vault Market — shared models, ports and bus client for the note-vault economy."""

from vaultmarket.client.nats_client import EconomyBusClient
from vaultmarket.documents import InMemoryDocumentSource, extract_tags, normalize_tag
from vaultmarket.helpers.factory import (
    create_command,
    create_message,
    create_result,
    parse_message,
    parse_payload,
)
from vaultmarket.helpers.validation import expected_topic, validate_message
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
from vaultmarket.models.player import (
    SCHEMA_VERSION,
    STARTING_CURRENCY,
    PlayerState,
    PricedStock,
)
from vaultmarket.models.shops import (
    CustomShop,
    FolderShop,
    ListingEntry,
    RandomPool,
    ShopDefinition,
    ShopListing,
)
from vaultmarket.models.topics import Topics, from_nats_subject, to_nats_subject
from vaultmarket.ports import (
    Clock,
    Document,
    DocumentSource,
    RandomSource,
    StateStore,
    SystemClock,
)

__all__ = [
    # Client
    "EconomyBusClient",
    # Ports
    "Clock",
    "Document",
    "DocumentSource",
    "InMemoryDocumentSource",
    "RandomSource",
    "StateStore",
    "SystemClock",
    # Models
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
    "STARTING_CURRENCY",
    "SaveShop",
    "Sell",
    "ShopDefinition",
    "ShopListing",
    "Topics",
    "UpdateSettings",
    "UseItem",
    # Helpers
    "create_command",
    "create_message",
    "create_result",
    "expected_topic",
    "extract_tags",
    "from_nats_subject",
    "normalize_tag",
    "parse_message",
    "parse_payload",
    "to_nats_subject",
    "validate_message",
]
