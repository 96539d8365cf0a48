"""Shared test fixtures."""

import os
from collections.abc import Callable

import pytest
from vaultmarket import EconomyBusClient, InMemoryDocumentSource, PlayerState

from services.economy.state import EconomyState


class ScriptedRandom:
    """RandomSource that replays fixed values, then keeps returning `fallback`."""

    def __init__(self, values: list[float], fallback: float = 0.0) -> None:
        self._values = list(values)
        self._fallback = fallback
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if self._values:
            return self._values.pop(0)
        return self._fallback


class FixedClock:
    def __init__(self, now: int = 1_700_000_000_000) -> None:
        self.now = now

    def now_ms(self) -> int:
        return self.now


class MemoryStore:
    """StateStore keeping JSON snapshots, so tests can count flushes."""

    def __init__(self, initial: PlayerState | None = None) -> None:
        self.saved: list[str] = []
        self._initial = initial

    async def load(self) -> PlayerState | None:
        if self.saved:
            return PlayerState.model_validate_json(self.saved[-1])
        return self._initial

    async def save(self, state: PlayerState) -> None:
        self.saved.append(state.model_dump_json())

    @property
    def last(self) -> PlayerState:
        return PlayerState.model_validate_json(self.saved[-1])


@pytest.fixture
def nats_url() -> str:
    return os.environ.get("NATS_URL", "nats://localhost:4222")


@pytest.fixture
async def bus_client(nats_url: str) -> EconomyBusClient:
    """Provide a connected EconomyBusClient, cleaned up after use."""
    client = EconomyBusClient(nats_url)
    await client.connect()
    yield client  # type: ignore[misc]
    await client.close()


@pytest.fixture
def scripted() -> Callable[..., ScriptedRandom]:
    """Factory for ScriptedRandom: `scripted(0.1, 0.9, fallback=0.5)`."""

    def _make(*values: float, fallback: float = 0.0) -> ScriptedRandom:
        return ScriptedRandom(list(values), fallback=fallback)

    return _make


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def documents() -> InMemoryDocumentSource:
    """A small vault: three items in Items/, one tagged note elsewhere, one plain note."""
    source = InMemoryDocumentSource()
    source.add(
        "Items/Healing Potion.md",
        "Restores health. 3/3 #consumable",
        metadata={"price": 40, "description": "A red potion"},
    )
    source.add("Items/Iron Sword.md", "A sturdy blade (120)#price (Sharp and heavy)#description")
    source.add("Items/Rope.md", "Fifty feet of rope.", metadata={"price": "15"})
    source.add("Loot/Gem.md", "Shiny #item (75)#price")
    source.add("Journal/Monday.md", "Went to the market.")
    return source


@pytest.fixture
def make_state(
    documents: InMemoryDocumentSource, store: MemoryStore, clock: FixedClock
) -> Callable[..., EconomyState]:
    """Build an EconomyState over the fixture vault."""

    def _make(rng=None, player: PlayerState | None = None) -> EconomyState:
        return EconomyState(
            player if player is not None else PlayerState(),
            documents,
            store=store,
            rng=rng,
            clock=clock,
        )

    return _make
