"""Inventory models — what the player owns."""

from pydantic import BaseModel, Field

from vaultmarket.models.catalog import CatalogItem, ConsumableSpec


class ConsumableUses(BaseModel):
    """Remaining uses of the top item in an inventory stack."""

    is_consumable: bool = False
    current_uses: int = Field(ge=0, default=1)
    max_uses: int = Field(ge=1, default=1)

    @classmethod
    def from_spec(cls, spec: ConsumableSpec) -> "ConsumableUses":
        return cls(
            is_consumable=spec.is_consumable,
            current_uses=spec.current_uses,
            max_uses=spec.max_uses,
        )


class InventoryEntry(BaseModel):
    """A stack of owned items.

    Stacks are merged by `name`, not by `source_id`: two catalog notes that
    share a display name end up in the same stack.
    """

    name: str
    source_id: str = ""
    quantity: int = Field(ge=1, default=1)
    price: int | None = None  # snapshot at acquisition
    description: str = ""
    consumable: ConsumableUses = Field(default_factory=ConsumableUses)

    @classmethod
    def from_catalog(cls, item: CatalogItem, price: int | None = None) -> "InventoryEntry":
        """Build a single-quantity entry for a catalog item."""
        return cls(
            name=item.name,
            source_id=item.id,
            quantity=1,
            price=item.base_price if price is None else price,
            description=item.description,
            consumable=ConsumableUses.from_spec(item.consumable),
        )
