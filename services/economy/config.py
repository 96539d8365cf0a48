"""Environment configuration for the economy service."""

import os
import random
from dataclasses import dataclass

DEFAULT_NATS_URL = "nats://localhost:4222"
DEFAULT_STATE_FILE = "economy-state.json"


@dataclass(frozen=True)
class EconomyConfig:
    nats_url: str = DEFAULT_NATS_URL
    vault_path: str = "."
    state_file: str = DEFAULT_STATE_FILE
    seed: int | None = None

    @classmethod
    def from_env(cls) -> "EconomyConfig":
        """Read NATS_URL, ECONOMY_VAULT_PATH, ECONOMY_STATE_FILE and ECONOMY_SEED."""
        seed = os.environ.get("ECONOMY_SEED")
        return cls(
            nats_url=os.environ.get("NATS_URL", DEFAULT_NATS_URL),
            vault_path=os.environ.get("ECONOMY_VAULT_PATH", "."),
            state_file=os.environ.get("ECONOMY_STATE_FILE", DEFAULT_STATE_FILE),
            seed=int(seed) if seed else None,
        )

    def make_rng(self) -> random.Random:
        """A seeded generator when ECONOMY_SEED is set, else OS-seeded."""
        return random.Random(self.seed)
