"""Tests for the EconomyService command handling (no NATS needed)."""

import pytest
from vaultmarket import (
    CommandResult,
    MessageType,
    OpenShop,
    Purchase,
    Restock,
    Topics,
    create_command,
    create_message,
    create_result,
)

from services.economy.config import EconomyConfig
from services.economy.economy import EconomyService


@pytest.fixture
def service(make_state, scripted) -> EconomyService:
    return EconomyService(make_state(rng=scripted(fallback=0.5)))


class TestHandle:
    async def test_open_shop(self, service: EconomyService):
        command = create_command("host", MessageType.OPEN_SHOP, OpenShop())
        result = await service.handle(command)
        assert result is not None
        assert result.success
        assert result.reference_msg_id == command.id
        assert result.command == MessageType.OPEN_SHOP
        assert result.currency == 1000
        names = [e["item"]["name"] for e in result.data["listing"]["entries"]]
        assert names == ["Healing Potion", "Iron Sword", "Rope", "Gem"]

    async def test_purchase(self, service: EconomyService):
        command = create_command(
            "host", MessageType.PURCHASE, Purchase(item_id="Items/Healing Potion.md")
        )
        result = await service.handle(command)
        assert result is not None
        assert result.success
        assert result.message == "Purchased Healing Potion!"
        assert result.currency == 960
        assert result.data["remaining_stock"] == 5

    async def test_rejection_carries_kind_and_message(self, service: EconomyService):
        command = create_command("host", MessageType.SELL, {"item_name": "Rope"})
        result = await service.handle(command)
        assert result is not None
        assert not result.success
        assert result.error_kind == "not_in_inventory"
        assert result.message == "'Rope' is not in the inventory"

    async def test_invalid_payload(self, service: EconomyService):
        command = create_command("host", MessageType.PURCHASE, {"item_id": ""})
        result = await service.handle(command)
        assert result is not None
        assert not result.success
        assert result.error_kind == "invalid_command"

    async def test_command_on_results_topic(self, service: EconomyService):
        command = create_message(
            sender="host", topic=Topics.RESULTS, msg_type=MessageType.OPEN_SHOP, payload=OpenShop()
        )
        result = await service.handle(command)
        assert result is not None
        assert result.error_kind == "invalid_command"

    async def test_ignores_results(self, service: EconomyService):
        echo = CommandResult(reference_msg_id="x", command=MessageType.SELL, success=True)
        assert await service.handle(create_result("economy", echo)) is None

    async def test_find_treasure_message(self, service: EconomyService):
        result = await service.handle(create_command("host", MessageType.FIND_TREASURE, {}))
        assert result is not None
        assert result.message == "You found 51 coins!"
        assert result.currency == 1051

    async def test_restock_not_due(self, service: EconomyService, clock):
        service.state.player.last_restock_timestamp = clock.now
        command = create_command("host", MessageType.RESTOCK, Restock(force=False))
        result = await service.handle(command)
        assert result is not None
        assert result.success
        assert result.message == "Restock not due yet"
        assert result.data == {"performed": False, "restocked_ids": []}

    async def test_save_shop(self, service: EconomyService):
        command = create_command(
            "host",
            MessageType.SAVE_SHOP,
            {"shop": {"kind": "custom", "name": "Bazaar", "fixed_item_ids": ["Items/Rope.md"]}},
        )
        result = await service.handle(command)
        assert result is not None and result.success
        opened = await service.handle(
            create_command("host", MessageType.OPEN_SHOP, OpenShop(shop_name="Bazaar"))
        )
        assert opened is not None
        assert [e["item"]["name"] for e in opened.data["listing"]["entries"]] == ["Rope"]


    async def test_empty_shop_tags_notice_kind(self, service: EconomyService):
        await service.handle(
            create_command("host", MessageType.SAVE_SHOP, {"shop": {"kind": "custom", "name": "Bare"}})
        )
        result = await service.handle(
            create_command("host", MessageType.OPEN_SHOP, OpenShop(shop_name="Bare"))
        )
        assert result is not None and result.success
        assert result.data["listing"]["entries"] == []
        assert result.data["listing"]["notice_kind"] == "missing_catalog_source"
        assert result.message == result.data["listing"]["notice"]

class TestConfig:
    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("ECONOMY_VAULT_PATH", "/vault")
        monkeypatch.setenv("ECONOMY_STATE_FILE", "/vault/.economy.json")
        monkeypatch.setenv("ECONOMY_SEED", "7")
        config = EconomyConfig.from_env()
        assert config.vault_path == "/vault"
        assert config.state_file == "/vault/.economy.json"
        assert config.seed == 7

    def test_defaults(self, monkeypatch):
        for name in ("NATS_URL", "ECONOMY_VAULT_PATH", "ECONOMY_STATE_FILE", "ECONOMY_SEED"):
            monkeypatch.delenv(name, raising=False)
        config = EconomyConfig.from_env()
        assert config.nats_url == "nats://localhost:4222"
        assert config.seed is None

    def test_seeded_rng_repeats(self):
        config = EconomyConfig(seed=42)
        assert config.make_rng().random() == config.make_rng().random()

    async def test_from_config(self, tmp_path):
        config = EconomyConfig(vault_path=str(tmp_path), state_file=str(tmp_path / "s.json"), seed=1)
        service = await EconomyService.from_config(config)
        assert service.state.player.currency == 1000
