"""Tests for the pricing engine, stock ledger and dice helpers."""

from vaultmarket import CatalogItem, PriceSource, PricedStock

from services.economy.dice import random_int, round_half_up, shuffled
from services.economy.pricing import PricingEngine
from services.economy.stock import StockLedger


def _make_item(price: int = 40, source: PriceSource = PriceSource.METADATA) -> CatalogItem:
    return CatalogItem(id="Items/Potion.md", name="Potion", base_price=price, price_source=source)


class TestDice:
    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(2.49) == 2

    def test_random_int_is_inclusive(self, scripted):
        assert random_int(scripted(0.0), 1, 10) == 1
        assert random_int(scripted(0.9999), 1, 10) == 10

    def test_shuffled_keeps_elements(self, scripted):
        items = ["a", "b", "c", "d"]
        result = shuffled(scripted(0.7, 0.1, 0.4), items)
        assert sorted(result) == items
        assert items == ["a", "b", "c", "d"]


class TestPricingEngine:
    def test_unknown_item_costs_nothing(self, scripted):
        engine = PricingEngine({}, scripted())
        assert engine.current_price("Items/Nope.md") == 0
        assert engine.base_price("Items/Nope.md") is None

    def test_establish_records_base(self, scripted):
        ledger: dict[str, PricedStock] = {}
        engine = PricingEngine(ledger, scripted())
        assert engine.establish(_make_item(40)) == 40
        assert ledger["Items/Potion.md"].base_price == 40
        assert engine.current_price("Items/Potion.md") == 40

    def test_fallback_price_is_recorded_once(self, scripted):
        engine = PricingEngine({}, scripted())
        engine.establish(_make_item(33, PriceSource.FALLBACK))
        assert engine.establish(_make_item(71, PriceSource.FALLBACK)) == 33

    def test_declared_price_change_replaces_base(self, scripted):
        ledger = {"Items/Potion.md": PricedStock(base_price=40, current_price=44, stock=2)}
        engine = PricingEngine(ledger, scripted())
        assert engine.establish(_make_item(60)) == 60
        assert ledger["Items/Potion.md"].current_price is None
        assert ledger["Items/Potion.md"].stock == 2
        assert engine.current_price("Items/Potion.md") == 60

    def test_restock_without_variation_keeps_base(self, scripted):
        engine = PricingEngine({}, scripted(0.9))
        assert engine.restock("Items/Potion.md", 40, 0.0) == 40

    def test_restock_stays_within_variation(self, scripted):
        low = PricingEngine({}, scripted(0.0)).restock("Items/Potion.md", 40, 0.2)
        high = PricingEngine({}, scripted(0.9999)).restock("Items/Potion.md", 40, 0.2)
        assert low == 32
        assert high == 48

    def test_restock_sets_current_price(self, scripted):
        ledger: dict[str, PricedStock] = {}
        engine = PricingEngine(ledger, scripted(0.5))
        engine.restock("Items/Potion.md", 100, 0.2)
        assert ledger["Items/Potion.md"].base_price == 100
        assert engine.current_price("Items/Potion.md") == 100

    def test_restock_never_negative(self, scripted):
        engine = PricingEngine({}, scripted(0.0))
        assert engine.restock("Items/Potion.md", 0, 1.0) == 0


class TestStockLedger:
    def test_uninitialized_stock_is_zero(self, scripted):
        ledger = StockLedger({}, scripted())
        assert ledger.stock("Items/Potion.md") == 0
        assert not ledger.is_initialized("Items/Potion.md")

    def test_ensure_initialized_rolls_once(self, scripted):
        stock = StockLedger({}, scripted(0.9999, 0.0))
        assert stock.ensure_initialized("Items/Potion.md") == 10
        assert stock.ensure_initialized("Items/Potion.md") == 10
        assert stock.is_initialized("Items/Potion.md")

    def test_custom_range(self, scripted):
        stock = StockLedger({}, scripted(0.9999))
        assert stock.ensure_initialized("Items/Potion.md", (1, 3)) == 3

    def test_decrement_never_goes_negative(self, scripted):
        stock = StockLedger({}, scripted(0.1))
        stock.ensure_initialized("Items/Potion.md", (2, 2))
        assert stock.decrement("Items/Potion.md")
        assert stock.decrement("Items/Potion.md")
        assert not stock.decrement("Items/Potion.md")
        assert stock.stock("Items/Potion.md") == 0

    def test_decrement_unknown_is_refused(self, scripted):
        assert not StockLedger({}, scripted()).decrement("Items/Nope.md")

    def test_restock_replaces_stock(self, scripted):
        ledger = {"Items/Potion.md": PricedStock(base_price=40, stock=0)}
        stock = StockLedger(ledger, scripted(0.5))
        assert stock.restock("Items/Potion.md") == 6
        assert ledger["Items/Potion.md"].base_price == 40
