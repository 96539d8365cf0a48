"""Catalog resolution — turn a vault note into a CatalogItem.

Each field is resolved by an ordered tuple of strategies. A strategy returns a
value or None; the first value wins and the final fallback always succeeds.
Malformed markers or metadata never raise, they just fall through.
"""

import logging
import math
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from vaultmarket import (
    CatalogItem,
    ConsumableSpec,
    Document,
    DocumentSource,
    PriceSource,
    RandomSource,
)

logger = logging.getLogger(__name__)

FALLBACK_PRICE_MIN = 10
FALLBACK_PRICE_SPAN = 90  # fallback prices land in [10, 99]
FALLBACK_DESCRIPTION = "No description available."

CONSUMABLE_MARKER = "#consumable"

_PRICE_MARKER = re.compile(r"\((\d+)\)\s*#price\b")
_DESCRIPTION_MARKER = re.compile(r"\(([^()]+)\)\s*#description\b")
_USES_MARKER = re.compile(r"(\d+)\s*/\s*(\d+)\s*#consumable\b")


@dataclass(frozen=True)
class Note:
    """Everything the resolver reads from one document."""

    document: Document
    metadata: dict[str, Any] = field(default_factory=dict)
    body: str = ""


# --- Price ---


def price_from_metadata(note: Note) -> int | None:
    value = note.metadata.get("price")
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        return int(value) if value.is_integer() and value >= 0 else None
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    return None


def price_from_body(note: Note) -> int | None:
    match = _PRICE_MARKER.search(note.body)
    return int(match.group(1)) if match else None


PRICE_STRATEGIES: tuple[tuple[PriceSource, Callable[[Note], int | None]], ...] = (
    (PriceSource.METADATA, price_from_metadata),
    (PriceSource.BODY, price_from_body),
)


def fallback_price(rng: RandomSource) -> int:
    return FALLBACK_PRICE_MIN + math.floor(rng.random() * FALLBACK_PRICE_SPAN)


# --- Description ---


def description_from_metadata(note: Note) -> str | None:
    value = note.metadata.get("description")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def description_from_body(note: Note) -> str | None:
    match = _DESCRIPTION_MARKER.search(note.body)
    if match is None:
        return None
    text = match.group(1).strip()
    return text or None


DESCRIPTION_STRATEGIES: tuple[Callable[[Note], str | None], ...] = (
    description_from_metadata,
    description_from_body,
)


# --- Consumable ---


def consumable_from_uses_marker(note: Note) -> ConsumableSpec | None:
    match = _USES_MARKER.search(note.body)
    if match is None:
        return None
    current, maximum = int(match.group(1)), int(match.group(2))
    if maximum < 1:
        return None
    return ConsumableSpec(is_consumable=True, current_uses=min(current, maximum), max_uses=maximum)


def consumable_from_bare_marker(note: Note) -> ConsumableSpec | None:
    if CONSUMABLE_MARKER in note.body:
        return ConsumableSpec(is_consumable=True, current_uses=1, max_uses=1)
    return None


CONSUMABLE_STRATEGIES: tuple[Callable[[Note], ConsumableSpec | None], ...] = (
    consumable_from_uses_marker,
    consumable_from_bare_marker,
)


# --- Resolution ---


def _first(strategies: tuple[Callable[[Note], Any], ...], note: Note) -> Any:
    for strategy in strategies:
        value = strategy(note)
        if value is not None:
            return value
    return None


def resolve_note(note: Note, rng: RandomSource) -> CatalogItem:
    """Resolve an already-loaded note. Pure apart from the fallback price roll."""
    base_price: int | None = None
    price_source = PriceSource.FALLBACK
    for source, strategy in PRICE_STRATEGIES:
        base_price = strategy(note)
        if base_price is not None:
            price_source = source
            break
    if base_price is None:
        base_price = fallback_price(rng)

    description = _first(DESCRIPTION_STRATEGIES, note) or FALLBACK_DESCRIPTION
    consumable = _first(CONSUMABLE_STRATEGIES, note) or ConsumableSpec()

    return CatalogItem(
        id=note.document.path,
        name=note.document.name,
        base_price=base_price,
        price_source=price_source,
        description=description,
        tags=set(note.document.tags),
        consumable=consumable,
    )


async def load_note(document: Document, source: DocumentSource) -> Note:
    """Read metadata and body in one go. An unreadable note comes back empty."""
    try:
        metadata, body = await source.read_note(document.path)
    except (OSError, UnicodeDecodeError):
        logger.debug("Could not read %s", document.path)
        metadata, body = {}, ""
    return Note(document=document, metadata=metadata, body=body)


async def resolve(document: Document, source: DocumentSource, rng: RandomSource) -> CatalogItem:
    """Resolve one document into a CatalogItem."""
    note = await load_note(document, source)
    return resolve_note(note, rng)


async def find_document(source: DocumentSource, item_id: str) -> Document | None:
    """Look up a document by its exact path."""
    document = await source.get_document(item_id)
    if document is None or document.path != item_id:
        return None
    return document
