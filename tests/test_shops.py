"""Tests for shop composition."""

from vaultmarket import CustomShop, FolderShop, InMemoryDocumentSource, PricedStock, RandomPool

from services.economy.errors import ErrorKind
from services.economy.pricing import PricingEngine
from services.economy.shops import (
    EMPTY_CUSTOM_NOTICE,
    ShopComposer,
    folder_members,
)
from services.economy.stock import StockLedger


def _make_composer(
    source: InMemoryDocumentSource, rng, ledger: dict[str, PricedStock] | None = None
) -> tuple[ShopComposer, dict[str, PricedStock]]:
    ledger = {} if ledger is None else ledger
    composer = ShopComposer(source, PricingEngine(ledger, rng), StockLedger(ledger, rng), rng)
    return composer, ledger


def _item_shop() -> FolderShop:
    return FolderShop(name="Shop", folder_path="Items/", item_tag="item")


class TestFolderMembers:
    async def test_union_of_folder_and_tag(self, documents):
        members = await folder_members(documents, "Items/", "item")
        assert [d.path for d in members] == [
            "Items/Healing Potion.md",
            "Items/Iron Sword.md",
            "Items/Rope.md",
            "Loot/Gem.md",
        ]

    async def test_tagged_note_inside_folder_listed_once(self):
        source = InMemoryDocumentSource()
        source.add("Items/Torch.md", "#item")
        members = await folder_members(source, "Items/", "item")
        assert len(members) == 1

    async def test_folder_only(self, documents):
        members = await folder_members(documents, "Loot/")
        assert [d.name for d in members] == ["Gem"]


class TestFolderShop:
    async def test_lists_every_member(self, documents, scripted):
        composer, _ = _make_composer(documents, scripted(fallback=0.0))
        opened = await composer.compose(_item_shop())
        listing = opened.listing
        assert listing.shop_name == "Shop"
        assert [e.item.name for e in listing.entries] == [
            "Healing Potion",
            "Iron Sword",
            "Rope",
            "Gem",
        ]
        assert [e.price for e in listing.entries] == [40, 120, 15, 75]
        assert all(e.stock == 1 and e.purchasable and not e.rare for e in listing.entries)
        assert listing.notice is None
        assert listing.notice_kind is None

    async def test_stock_initialized_only_once(self, documents, scripted):
        composer, ledger = _make_composer(documents, scripted(fallback=0.5))
        await composer.compose(_item_shop())
        ledger["Items/Rope.md"].stock = 0
        opened = await composer.compose(_item_shop())
        rope = opened.listing.find("Items/Rope.md")
        assert rope is not None
        assert rope.stock == 0
        assert not rope.purchasable

    async def test_uses_drifted_current_price(self, documents, scripted):
        ledger = {"Items/Rope.md": PricedStock(base_price=15, current_price=17, stock=4)}
        composer, _ = _make_composer(documents, scripted(fallback=0.5), ledger)
        opened = await composer.compose(_item_shop())
        rope = opened.listing.find("Items/Rope.md")
        assert rope is not None
        assert rope.price == 17
        assert rope.stock == 4

    async def test_fallback_price_listed_as_recorded(self, scripted):
        source = InMemoryDocumentSource()
        source.add("Items/Lantern.md", "Lights the way")
        composer, ledger = _make_composer(source, scripted(fallback=0.0))
        first = await composer.compose(_item_shop())
        composer, _ = _make_composer(source, scripted(fallback=0.9999), ledger)
        second = await composer.compose(_item_shop())
        for opened in (first, second):
            [entry] = opened.listing.entries
            assert entry.item.base_price == ledger["Items/Lantern.md"].base_price == 10
            assert entry.price == 10

    async def test_empty_shop_notice(self, scripted):
        composer, _ = _make_composer(InMemoryDocumentSource(), scripted())
        opened = await composer.compose(_item_shop())
        assert opened.listing.entries == []
        assert opened.listing.notice == (
            "No items available. Add notes with the #item tag or in the Items/ folder."
        )
        assert opened.listing.notice_kind == ErrorKind.MISSING_CATALOG_SOURCE


class TestCustomShop:
    async def test_fixed_items_skip_missing_notes(self, documents, scripted):
        shop = CustomShop(name="Smithy", fixed_item_ids=["Items/Rope.md", "Items/Missing.md"])
        composer, _ = _make_composer(documents, scripted(0.9999))
        opened = await composer.compose(shop)
        assert [e.item.id for e in opened.listing.entries] == ["Items/Rope.md"]
        assert opened.listing.entries[0].stock == 5

    async def test_rare_pool_pick(self, documents, scripted):
        shop = CustomShop(
            name="Smithy",
            fixed_item_ids=["Items/Rope.md"],
            random_pools=[
                RandomPool(name="Rare", chance=1.0, max_items=1, item_ids=["Items/Iron Sword.md", "Loot/Gem.md"])
            ],
        )
        composer, ledger = _make_composer(documents, scripted(fallback=0.0))
        opened = await composer.compose(shop)
        entries = opened.listing.entries
        assert [(e.item.name, e.rare) for e in entries] == [("Rope", False), ("Gem", True)]
        assert opened.rare_ids == ["Loot/Gem.md"]
        assert opened.rare_stock["Loot/Gem.md"].stock == 1
        # rare stock is transient; only the price is recorded
        assert ledger["Loot/Gem.md"].stock is None
        assert ledger["Loot/Gem.md"].base_price == 75

    async def test_zero_chance_pool_rolls_nothing(self, documents, scripted):
        shop = CustomShop(
            name="Empty",
            random_pools=[RandomPool(name="Never", chance=0.0, max_items=2, item_ids=["Loot/Gem.md"])],
        )
        composer, _ = _make_composer(documents, scripted(fallback=0.0))
        opened = await composer.compose(shop)
        assert opened.listing.entries == []
        assert opened.listing.notice == EMPTY_CUSTOM_NOTICE
        assert opened.listing.notice_kind == ErrorKind.MISSING_CATALOG_SOURCE

    async def test_fixed_item_not_repeated_as_rare(self, documents, scripted):
        shop = CustomShop(
            name="Smithy",
            fixed_item_ids=["Items/Rope.md"],
            random_pools=[RandomPool(name="All", chance=1.0, max_items=1, item_ids=["Items/Rope.md"])],
        )
        composer, _ = _make_composer(documents, scripted(fallback=0.0))
        opened = await composer.compose(shop)
        assert len(opened.listing.entries) == 1
        assert not opened.listing.entries[0].rare

    async def test_stable_rerender_keeps_rare_picks(self, documents, scripted):
        shop = CustomShop(
            name="Smithy",
            random_pools=[
                RandomPool(name="Rare", chance=1.0, max_items=1, item_ids=["Items/Iron Sword.md", "Loot/Gem.md"])
            ],
        )
        composer, _ = _make_composer(documents, scripted(fallback=0.0))
        first = await composer.compose(shop)
        first.rare_stock["Loot/Gem.md"].stock = 0

        # a reroll with this generator would pick the sword instead
        composer_b, _ = _make_composer(documents, scripted(0.9999, fallback=0.0))
        again = await composer_b.compose(shop, previous=first, reroll=False)
        gem = again.listing.find("Loot/Gem.md")
        assert gem is not None
        assert gem.rare
        assert gem.stock == 0
        assert not gem.purchasable
        assert again.listing.find("Items/Iron Sword.md") is None

    async def test_reroll_draws_again(self, documents, scripted):
        shop = CustomShop(
            name="Smithy",
            random_pools=[
                RandomPool(name="Rare", chance=1.0, max_items=1, item_ids=["Items/Iron Sword.md", "Loot/Gem.md"])
            ],
        )
        composer, _ = _make_composer(documents, scripted(fallback=0.0))
        first = await composer.compose(shop)
        composer_b, _ = _make_composer(documents, scripted(0.9999, fallback=0.0))
        again = await composer_b.compose(shop, previous=first, reroll=True)
        assert again.rare_ids == ["Items/Iron Sword.md"]
