"""Host ports — what the economy engine needs from its environment.

The engine never touches the filesystem, the wall clock or the global random
module directly. Hosts hand in implementations of these protocols.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from vaultmarket.models.player import PlayerState


@dataclass(frozen=True)
class Document:
    """A note as seen by the economy: its path, display name and tags."""

    path: str
    name: str
    tags: frozenset[str] = field(default_factory=frozenset)


@runtime_checkable
class DocumentSource(Protocol):
    """Read access to the vault's notes."""

    async def list_documents(self) -> list[Document]: ...

    async def read_text(self, path: str) -> str: ...

    async def read_metadata(self, path: str) -> dict[str, Any]: ...

    async def read_note(self, path: str) -> tuple[dict[str, Any], str]: ...

    async def get_document(self, path: str) -> Document | None: ...

    async def find_by_prefix(self, prefix: str) -> list[Document]: ...

    async def find_by_tag(self, tag: str) -> list[Document]: ...


@runtime_checkable
class RandomSource(Protocol):
    """Uniform floats in [0, 1). `random.Random` satisfies this."""

    def random(self) -> float: ...


class Clock(Protocol):
    """Current time in epoch milliseconds."""

    def now_ms(self) -> int: ...


class SystemClock:
    """Wall-clock time."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)


class StateStore(Protocol):
    """Loads and saves the full PlayerState record."""

    async def load(self) -> PlayerState | None: ...

    async def save(self, state: PlayerState) -> None: ...
