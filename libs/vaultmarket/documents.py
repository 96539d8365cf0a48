"""Document helpers and an in-memory DocumentSource."""

import re
from pathlib import PurePosixPath
from typing import Any

from vaultmarket.ports import Document

# Inline tags: `#item`, `#weapons/blades`. Not headings, not `##`.
_INLINE_TAG = re.compile(r"(?<![\w#&])#([A-Za-z_][\w/-]*)")


def normalize_tag(tag: str) -> str:
    """`#Item` → `item`."""
    return tag.strip().lstrip("#").lower()


def document_name(path: str) -> str:
    """Display name of a note: the file name without extension."""
    return PurePosixPath(path).stem


def extract_tags(metadata: dict[str, Any], body: str) -> frozenset[str]:
    """Collect frontmatter `tags` (list or comma/space separated) and inline tags."""
    tags: set[str] = set()
    raw = metadata.get("tags")
    if isinstance(raw, str):
        raw = re.split(r"[,\s]+", raw)
    if isinstance(raw, list):
        tags.update(normalize_tag(str(t)) for t in raw if str(t).strip())
    tags.update(normalize_tag(m) for m in _INLINE_TAG.findall(body))
    tags.discard("")
    return frozenset(tags)


class InMemoryDocumentSource:
    """DocumentSource backed by a dict. Useful for embedding and tests."""

    def __init__(self) -> None:
        self._bodies: dict[str, str] = {}
        self._metadata: dict[str, dict[str, Any]] = {}

    def add(self, path: str, body: str = "", metadata: dict[str, Any] | None = None) -> Document:
        """Add or replace a note."""
        self._bodies[path] = body
        self._metadata[path] = dict(metadata or {})
        return self._document(path)

    def remove(self, path: str) -> None:
        self._bodies.pop(path, None)
        self._metadata.pop(path, None)

    def _document(self, path: str) -> Document:
        return Document(
            path=path,
            name=document_name(path),
            tags=extract_tags(self._metadata[path], self._bodies[path]),
        )

    async def list_documents(self) -> list[Document]:
        return [self._document(path) for path in sorted(self._bodies)]

    async def read_text(self, path: str) -> str:
        if path not in self._bodies:
            raise FileNotFoundError(path)
        return self._bodies[path]

    async def read_metadata(self, path: str) -> dict[str, Any]:
        if path not in self._metadata:
            raise FileNotFoundError(path)
        return dict(self._metadata[path])

    async def read_note(self, path: str) -> tuple[dict[str, Any], str]:
        return await self.read_metadata(path), await self.read_text(path)

    async def get_document(self, path: str) -> Document | None:
        return self._document(path) if path in self._bodies else None

    async def find_by_prefix(self, prefix: str) -> list[Document]:
        return [d for d in await self.list_documents() if d.path.startswith(prefix)]

    async def find_by_tag(self, tag: str) -> list[Document]:
        wanted = normalize_tag(tag)
        return [d for d in await self.list_documents() if wanted in d.tags]
