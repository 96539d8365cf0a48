"""EconomyService — the single actor that owns the player's economy state."""

import asyncio
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

from vaultmarket import (
    CommandResult,
    EconomyBusClient,
    Envelope,
    MessageType,
    Topics,
    create_result,
    parse_payload,
    validate_message,
)

from services.economy.config import EconomyConfig
from services.economy.errors import EconomyError, ErrorKind
from services.economy.restock import restock_if_due
from services.economy.rules import (
    process_clear_inventory,
    process_find_treasure,
    process_loot_roll,
    process_open_shop,
    process_purchase,
    process_remove_shop,
    process_reset_coins,
    process_restock,
    process_save_shop,
    process_sell,
    process_update_settings,
    process_use,
)
from services.economy.state import EconomyState
from services.economy.storage import JsonStateStore
from services.economy.vault import VaultDocumentSource

logger = logging.getLogger(__name__)


class EconomyService:
    """The economy authority for one player.

    It subscribes to `/economy/commands`, runs each command to completion
    against the EconomyState, and publishes a CommandResult on
    `/economy/results`. Commands never interleave: the startup restock and
    every command take the same lock.
    """

    AGENT_ID = "economy"

    def __init__(self, state: EconomyState, nats_url: str = "nats://localhost:4222") -> None:
        self._bus = EconomyBusClient(nats_url)
        self._state = state
        self._lock = asyncio.Lock()

    @classmethod
    async def from_config(cls, config: EconomyConfig) -> "EconomyService":
        """Build a service over the vault folder and state file named in `config`."""
        state = await EconomyState.load(
            JsonStateStore(Path(config.state_file)),
            VaultDocumentSource(config.vault_path),
            rng=config.make_rng(),
        )
        return cls(state, config.nats_url)

    @property
    def state(self) -> EconomyState:
        """Expose state for testing."""
        return self._state

    async def start(self) -> None:
        """Restock if due, then connect to NATS and start taking commands."""
        async with self._lock:
            restocked = await restock_if_due(self._state)
        if restocked is not None:
            logger.info("Startup restock refreshed %d items", len(restocked))

        await self._bus.connect()
        logger.info("Economy service connected to NATS")

        await self._bus.subscribe(Topics.COMMANDS, self._on_command)
        logger.info("Economy service subscribed to %s", Topics.COMMANDS)

    async def stop(self) -> None:
        """Clean shutdown."""
        await self._bus.close()
        logger.info("Economy service stopped")

    async def _on_command(self, envelope: Envelope) -> None:
        result = await self.handle(envelope)
        if result is not None:
            await self._bus.publish(Topics.RESULTS, create_result(self.AGENT_ID, result))

    async def handle(self, envelope: Envelope) -> CommandResult | None:
        """Run one command and build its result. None for messages we ignore."""
        if envelope.is_result:
            return None

        errors = validate_message(envelope)
        if errors:
            logger.warning("%s from %s rejected: %s", envelope.type, envelope.sender, errors)
            return self._result(
                envelope,
                error=EconomyError(ErrorKind.INVALID_COMMAND, "; ".join(errors)),
            )

        try:
            payload = parse_payload(envelope)
        except ValueError as e:
            return self._result(envelope, error=EconomyError(ErrorKind.INVALID_COMMAND, str(e)))

        async with self._lock:
            return await self._dispatch(envelope, payload)

    async def _dispatch(self, envelope: Envelope, payload: Any) -> CommandResult:
        state = self._state
        msg_type = envelope.type

        if msg_type == MessageType.OPEN_SHOP:
            shop = await process_open_shop(payload, state)
            if shop.errors or shop.listing is None:
                return self._rejected(envelope, shop.errors)
            return self._result(
                envelope,
                message=shop.listing.notice,
                data={"listing": shop.listing.model_dump(mode="json")},
            )

        if msg_type == MessageType.PURCHASE:
            bought = await process_purchase(payload, state)
            if bought.errors:
                return self._rejected(envelope, bought.errors)
            return self._result(
                envelope,
                message=f"Purchased {bought.name}!",
                data={
                    "item_id": bought.item_id,
                    "name": bought.name,
                    "price": bought.price,
                    "remaining_stock": bought.remaining_stock,
                },
            )

        if msg_type == MessageType.SELL:
            sold = await process_sell(payload, state)
            if sold.errors:
                return self._rejected(envelope, sold.errors)
            return self._result(
                envelope,
                message=f"Sold {sold.name} for {sold.coins_gained} coins!",
                data={"name": sold.name, "coins_gained": sold.coins_gained},
            )

        if msg_type == MessageType.USE:
            used = await process_use(payload, state)
            if used.errors or used.outcome is None:
                return self._rejected(envelope, used.errors)
            return self._result(envelope, message=f"Used {payload.item_name}!", data=asdict(used.outcome))

        if msg_type == MessageType.LOOT_ROLL:
            loot = await process_loot_roll(payload, state)
            if loot.errors:
                return self._rejected(envelope, loot.errors)
            message = (
                f"You found {len(loot.awarded)} items!" if loot.awarded else "No loot this time."
            )
            return self._result(
                envelope,
                message=message,
                data={"awarded": [e.model_dump(mode="json") for e in loot.awarded]},
            )

        if msg_type == MessageType.FIND_TREASURE:
            found = await process_find_treasure(state)
            message = (
                f"You found {found.coins_found} coins!"
                if found.coins_found
                else "You found nothing this time. Try again!"
            )
            return self._result(envelope, message=message, data={"coins_found": found.coins_found})

        if msg_type == MessageType.RESTOCK:
            restock = await process_restock(payload, state)
            message = (
                f"Restocked {len(restock.restocked_ids)} items"
                if restock.performed
                else "Restock not due yet"
            )
            return self._result(envelope, message=message, data=asdict(restock))

        if msg_type == MessageType.RESET_COINS:
            errors = await process_reset_coins(state)
        elif msg_type == MessageType.CLEAR_INVENTORY:
            errors = await process_clear_inventory(state)
        elif msg_type == MessageType.SAVE_SHOP:
            errors = await process_save_shop(payload, state)
        elif msg_type == MessageType.REMOVE_SHOP:
            errors = await process_remove_shop(payload, state)
        elif msg_type == MessageType.UPDATE_SETTINGS:
            errors = await process_update_settings(payload, state)
        else:
            errors = [EconomyError(ErrorKind.INVALID_COMMAND, f"Unsupported command {msg_type}")]

        if errors:
            return self._rejected(envelope, errors)
        return self._result(envelope)

    def _rejected(self, envelope: Envelope, errors: list[EconomyError]) -> CommandResult:
        logger.warning("%s from %s failed: %s", envelope.type, envelope.sender, errors)
        error = errors[0] if errors else EconomyError(ErrorKind.INVALID_COMMAND, "Rejected")
        return self._result(envelope, error=error)

    def _result(
        self,
        envelope: Envelope,
        *,
        error: EconomyError | None = None,
        message: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> CommandResult:
        return CommandResult(
            reference_msg_id=envelope.id,
            command=envelope.type,
            success=error is None,
            error_kind=error.kind.value if error is not None else None,
            message=error.message if error is not None else message,
            currency=self._state.player.currency,
            data=data or {},
        )
