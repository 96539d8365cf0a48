"""Catalog models — items resolved from vault notes."""

from enum import StrEnum

from pydantic import BaseModel, Field, model_validator


class PriceSource(StrEnum):
    """Where a catalog item's base price came from."""

    METADATA = "metadata"
    BODY = "body"
    FALLBACK = "fallback"


class ConsumableSpec(BaseModel):
    """Usage limits declared by a catalog note."""

    is_consumable: bool = False
    current_uses: int = Field(ge=0, default=1)
    max_uses: int = Field(ge=1, default=1)

    @model_validator(mode="after")
    def _clamp_current(self) -> "ConsumableSpec":
        if self.current_uses > self.max_uses:
            self.current_uses = self.max_uses
        return self


class CatalogItem(BaseModel):
    """An item that can be listed in a shop.

    The `id` is the path of the note it was resolved from. Current price and
    stock are not stored here; they live in the ledger under the same id.
    """

    id: str
    name: str
    base_price: int = Field(ge=0)
    price_source: PriceSource = PriceSource.FALLBACK
    description: str = ""
    tags: set[str] = Field(default_factory=set)
    consumable: ConsumableSpec = Field(default_factory=ConsumableSpec)
