"""JSON file persistence for PlayerState.

The whole record is rewritten after every mutation (temp file + rename, so a
crash never leaves half a record). Records without `schema_version` come from
the original inventory plugin and are migrated on load.
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from vaultmarket import SCHEMA_VERSION, PlayerState

logger = logging.getLogger(__name__)


def migrate_record(data: dict[str, Any]) -> dict[str, Any]:
    """Bring an older record up to the current schema.

    Version-less records use the plugin's layout: `coins`, `itemFolderPath`
    and inventory items that point at their note through `file`.
    """
    if "schema_version" in data:
        return data

    migrated: dict[str, Any] = {"schema_version": SCHEMA_VERSION}
    if "coins" in data:
        migrated["currency"] = data["coins"]
    if "itemFolderPath" in data:
        migrated["item_folder_path"] = data["itemFolderPath"]

    inventory = []
    for raw in data.get("inventory", []):
        if not isinstance(raw, dict) or not raw.get("name"):
            continue
        inventory.append(
            {
                "name": raw["name"],
                "source_id": raw.get("file", raw.get("source_id", "")),
                "quantity": max(int(raw.get("quantity", 1)), 1),
                "price": raw.get("price"),
                "description": raw.get("description", ""),
            }
        )
    migrated["inventory"] = inventory
    logger.info("Migrated legacy economy record (%d stacks)", len(inventory))
    return migrated


class JsonStateStore:
    """StateStore writing the full PlayerState to one JSON file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> PlayerState | None:
        if not self._path.exists():
            return None
        data = json.loads(self._path.read_text(encoding="utf-8"))
        return PlayerState.model_validate(migrate_record(data))

    def _write(self, payload: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_text(payload, encoding="utf-8")
        os.replace(tmp, self._path)

    async def load(self) -> PlayerState | None:
        """Load the saved record. A corrupt file is an error, not a fresh start."""
        try:
            return await asyncio.to_thread(self._read)
        except (json.JSONDecodeError, ValidationError):
            logger.error("Economy state at %s is unreadable", self._path)
            raise

    async def save(self, state: PlayerState) -> None:
        payload = state.model_dump_json(indent=2)
        await asyncio.to_thread(self._write, payload)
        logger.debug("Saved economy state to %s", self._path)
