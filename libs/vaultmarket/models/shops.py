"""Shop definitions and the transient listings composed from them."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator

from vaultmarket.models.catalog import CatalogItem


class RandomPool(BaseModel):
    """A named set of items that may show up in a custom shop."""

    name: str
    chance: float = Field(ge=0.0, le=1.0)
    max_items: int = Field(ge=0)
    item_ids: list[str] = Field(default_factory=list)

    @field_validator("item_ids")
    @classmethod
    def _dedupe(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))


class FolderShop(BaseModel):
    """Shop whose stock is every note under a folder (plus tagged notes)."""

    kind: Literal["folder"] = "folder"
    name: str
    description: str = ""
    folder_path: str
    item_tag: str | None = None


class CustomShop(BaseModel):
    """Hand-picked shop: fixed items plus randomly rolled pools."""

    kind: Literal["custom"] = "custom"
    name: str
    description: str = ""
    linked_note_id: str | None = None
    fixed_item_ids: list[str] = Field(default_factory=list)
    random_pools: list[RandomPool] = Field(default_factory=list)


ShopDefinition = Annotated[FolderShop | CustomShop, Field(discriminator="kind")]


class ListingEntry(BaseModel):
    """One purchasable row of a shop listing."""

    item: CatalogItem
    price: int = Field(ge=0)
    stock: int = Field(ge=0)
    rare: bool = False
    purchasable: bool = True


class ShopListing(BaseModel):
    """A shop's items as derived at open time. Never persisted."""

    shop_name: str
    description: str = ""
    entries: list[ListingEntry] = Field(default_factory=list)
    notice: str | None = None
    notice_kind: str | None = None  # e.g. "missing_catalog_source" for an empty shop

    def find(self, item_id: str) -> ListingEntry | None:
        """Return the entry for `item_id`, or None if it is not listed."""
        for entry in self.entries:
            if entry.item.id == item_id:
                return entry
        return None
