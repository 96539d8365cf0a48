"""Restock scheduling — refresh folder-shop stock and prices when due."""

import logging
import math

from services.economy.catalog import resolve
from services.economy.shops import folder_members
from services.economy.state import EconomyState
from services.economy.stock import DEFAULT_STOCK_RANGE

logger = logging.getLogger(__name__)

MS_PER_DAY = 86_400_000


def is_restock_due(last_restock: int | None, interval_days: int, now: int) -> bool:
    """True once `interval_days` whole days have passed since the last restock.

    A state that was never restocked is always due.
    """
    if last_restock is None:
        return True
    return math.floor((now - last_restock) / MS_PER_DAY) >= interval_days


async def perform_restock(state: EconomyState) -> list[str]:
    """Restock every item of every folder shop, then stamp the restock time.

    Several missed periods collapse into this one restock. Returns the ids
    that were restocked.
    """
    player = state.player
    restocked: list[str] = []
    done: set[str] = set()
    for shop in state.folder_shops():
        for document in await folder_members(state.documents, shop.folder_path, shop.item_tag):
            if document.path in done:
                continue
            done.add(document.path)
            item = await resolve(document, state.documents, state.rng)
            base_price = state.pricing.establish(item)
            state.stock.restock(item.id, DEFAULT_STOCK_RANGE)
            state.pricing.restock(item.id, base_price, player.price_variation_fraction)
            restocked.append(item.id)

    player.last_restock_timestamp = state.clock.now_ms()
    await state.flush()
    logger.info("Restocked %d items", len(restocked))
    return restocked


async def restock_if_due(state: EconomyState) -> list[str] | None:
    """Run perform_restock when due. None when nothing was due."""
    player = state.player
    if not is_restock_due(
        player.last_restock_timestamp, player.restock_interval_days, state.clock.now_ms()
    ):
        logger.debug("Restock not due yet")
        return None
    return await perform_restock(state)
