"""Envelope model — what travels on the economy bus."""

import time
import uuid
from typing import Any

from pydantic import BaseModel, Field

from vaultmarket.models.messages import MessageType


class Envelope(BaseModel):
    """A command or result plus its routing data.

    On the wire `sender` is spelled `"from"`; use `to_wire()` / `from_wire()`
    rather than dumping the model directly.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    sender: str = Field(alias="from")
    topic: str
    timestamp: float = Field(default_factory=time.time)
    type: MessageType
    payload: dict[str, Any] = Field(default_factory=dict)

    model_config = {"populate_by_name": True}

    @property
    def is_result(self) -> bool:
        return self.type == MessageType.COMMAND_RESULT

    def to_wire(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode()

    @classmethod
    def from_wire(cls, data: str | bytes) -> "Envelope":
        return cls.model_validate_json(data)
