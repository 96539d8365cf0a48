"""Command and result payloads for the economy bus."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, model_validator

from vaultmarket.models.shops import ShopDefinition


class MessageType(StrEnum):
    """All message types understood by the economy service."""

    OPEN_SHOP = "open_shop"
    PURCHASE = "purchase"
    SELL = "sell"
    USE = "use"
    LOOT_ROLL = "loot_roll"
    FIND_TREASURE = "find_treasure"
    RESTOCK = "restock"
    RESET_COINS = "reset_coins"
    CLEAR_INVENTORY = "clear_inventory"
    SAVE_SHOP = "save_shop"
    REMOVE_SHOP = "remove_shop"
    UPDATE_SETTINGS = "update_settings"
    COMMAND_RESULT = "command_result"


class OpenShop(BaseModel):
    """Compose a shop listing. No name means the default item shop."""

    shop_name: str | None = None
    reroll: bool = True


class Purchase(BaseModel):
    """Buy one unit of a listed item."""

    item_id: str = Field(min_length=1)
    shop_name: str | None = None


class Sell(BaseModel):
    """Sell one unit from an inventory stack."""

    item_name: str = Field(min_length=1)


class UseItem(BaseModel):
    """Use one item from an inventory stack."""

    item_name: str = Field(min_length=1)


class LootRoll(BaseModel):
    """Roll for loot drawn from a folder and/or tag of catalog notes."""

    folder_path: str | None = None
    tag: str | None = None
    min_items: int = Field(ge=0, default=1)
    max_items: int = Field(ge=0, default=3)
    chance_percent: float = Field(ge=0.0, le=100.0, default=50.0)

    @model_validator(mode="after")
    def _check_bounds(self) -> "LootRoll":
        if self.min_items > self.max_items:
            raise ValueError("min_items must not exceed max_items")
        return self


class FindTreasure(BaseModel):
    """Search for loose coins."""


class Restock(BaseModel):
    """Refresh stock and prices. Without `force` only runs when due."""

    force: bool = True


class ResetCoins(BaseModel):
    """Reset the balance to the starting amount."""


class ClearInventory(BaseModel):
    """Drop every inventory stack."""


class SaveShop(BaseModel):
    """Add a shop definition, replacing one with the same name."""

    shop: ShopDefinition


class RemoveShop(BaseModel):
    """Delete a shop definition by name."""

    shop_name: str = Field(min_length=1)


class UpdateSettings(BaseModel):
    """Change economy settings. Fields left as None are not touched."""

    item_folder_path: str | None = None
    item_tag: str | None = None
    restock_interval_days: int | None = Field(ge=0, default=None)
    price_variation_fraction: float | None = Field(ge=0.0, le=1.0, default=None)


class CommandResult(BaseModel):
    """Outcome of a command, published by the economy service."""

    reference_msg_id: str
    command: MessageType
    success: bool
    error_kind: str | None = None
    message: str | None = None
    currency: int = 0
    data: dict[str, Any] = Field(default_factory=dict)


# Registry mapping message types to their payload models
PAYLOAD_REGISTRY: dict[MessageType, type[BaseModel]] = {
    MessageType.OPEN_SHOP: OpenShop,
    MessageType.PURCHASE: Purchase,
    MessageType.SELL: Sell,
    MessageType.USE: UseItem,
    MessageType.LOOT_ROLL: LootRoll,
    MessageType.FIND_TREASURE: FindTreasure,
    MessageType.RESTOCK: Restock,
    MessageType.RESET_COINS: ResetCoins,
    MessageType.CLEAR_INVENTORY: ClearInventory,
    MessageType.SAVE_SHOP: SaveShop,
    MessageType.REMOVE_SHOP: RemoveShop,
    MessageType.UPDATE_SETTINGS: UpdateSettings,
    MessageType.COMMAND_RESULT: CommandResult,
}
