"""VaultDocumentSource — markdown notes on disk with YAML frontmatter."""

import asyncio
import logging
import re
from pathlib import Path
from typing import Any

import yaml
from vaultmarket import Document, extract_tags, normalize_tag

logger = logging.getLogger(__name__)

_FRONTMATTER = re.compile(r"\A---\s*\n(.*?)\n---\s*(?:\n|\Z)", re.DOTALL)


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Split a note into (metadata, body). Broken frontmatter yields `{}`."""
    match = _FRONTMATTER.match(text)
    if match is None:
        return {}, text
    body = text[match.end():]
    try:
        metadata = yaml.safe_load(match.group(1))
    except yaml.YAMLError:
        logger.debug("Ignoring malformed frontmatter")
        return {}, body
    if not isinstance(metadata, dict):
        return {}, body
    return metadata, body


class VaultDocumentSource:
    """DocumentSource over a folder of `.md` files.

    Paths are vault-relative with `/` separators (`Items/Potion.md`).
    Files are read on every call; nothing is cached.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    def _file(self, path: str) -> Path:
        resolved = (self._root / path).resolve()
        if not resolved.is_relative_to(self._root.resolve()):
            raise FileNotFoundError(path)
        return resolved

    def _load(self, path: str) -> tuple[dict[str, Any], str]:
        return split_frontmatter(self._file(path).read_text(encoding="utf-8"))

    def _describe(self, file: Path) -> Document | None:
        parts = file.relative_to(self._root.resolve()).parts
        if file.suffix != ".md" or any(part.startswith(".") for part in parts):
            return None
        rel = "/".join(parts)
        try:
            metadata, body = self._load(rel)
        except (OSError, UnicodeDecodeError):
            logger.warning("Skipping unreadable note %s", rel)
            return None
        return Document(path=rel, name=file.stem, tags=extract_tags(metadata, body))

    def _scan(self) -> list[Document]:
        documents: list[Document] = []
        for file in sorted(self._root.resolve().rglob("*.md")):
            document = self._describe(file)
            if document is not None:
                documents.append(document)
        return documents

    def _lookup(self, path: str) -> Document | None:
        try:
            file = self._file(path)
        except FileNotFoundError:
            return None
        if not file.is_file():
            return None
        return self._describe(file)

    async def list_documents(self) -> list[Document]:
        return await asyncio.to_thread(self._scan)

    async def read_text(self, path: str) -> str:
        _, body = await asyncio.to_thread(self._load, path)
        return body

    async def read_metadata(self, path: str) -> dict[str, Any]:
        metadata, _ = await asyncio.to_thread(self._load, path)
        return metadata

    async def read_note(self, path: str) -> tuple[dict[str, Any], str]:
        return await asyncio.to_thread(self._load, path)

    async def get_document(self, path: str) -> Document | None:
        return await asyncio.to_thread(self._lookup, path)

    async def find_by_prefix(self, prefix: str) -> list[Document]:
        return [d for d in await self.list_documents() if d.path.startswith(prefix)]

    async def find_by_tag(self, tag: str) -> list[Document]:
        wanted = normalize_tag(tag)
        return [d for d in await self.list_documents() if wanted in d.tags]
