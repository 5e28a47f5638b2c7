"""Keyed document store with merge-on-write.

One document per species, keyed by the stringified iNaturalist ID.  Writes
with ``merge=True`` overlay the given fields and leave every other stored
field untouched (operator-edited ``notes`` in particular).

Two implementations share the ``DocumentStore`` protocol:
  - JsonDocumentStore: one metadata-enveloped JSON file per document
  - MemoryDocumentStore: plain dict, for tests and dry runs
"""

from __future__ import annotations

import copy
import json
import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol


class DocumentStore(Protocol):
    """Minimal keyed-collection interface the pipeline depends on."""

    def get(self, doc_id: str) -> dict[str, Any] | None: ...

    def set(self, doc_id: str, data: dict[str, Any], *, merge: bool = False) -> None: ...

    def ids(self) -> list[str]: ...


def _merged(existing: dict[str, Any] | None, data: dict[str, Any], merge: bool) -> dict[str, Any]:
    if merge and existing is not None:
        return {**existing, **data}
    return dict(data)


class JsonDocumentStore:
    """Stores each document as ``{base}/{collection}/{doc_id}.json``."""

    def __init__(
        self,
        base_dir: Path,
        collection: str = "species",
        source: str = "inaturalist.org",
    ) -> None:
        self.base = base_dir
        self.collection = base_dir / collection
        self.source = source

    def get(self, doc_id: str) -> dict[str, Any] | None:
        """Return the document's data payload, or None if it doesn't exist."""
        full = self._resolve(doc_id)
        if not full.exists():
            return None
        with full.open() as f:
            envelope: dict[str, Any] = json.load(f)
        data: dict[str, Any] = envelope.get("data", envelope)
        return data

    def set(self, doc_id: str, data: dict[str, Any], *, merge: bool = False) -> None:
        """Write a document, overlaying existing fields when ``merge`` is set."""
        full = self._resolve(doc_id)
        full.parent.mkdir(parents=True, exist_ok=True)

        envelope = {
            "meta": {
                "source": self.source,
                "updated_at": datetime.now(UTC).isoformat(),
            },
            "data": _merged(self.get(doc_id), data, merge),
        }

        # A failed or interrupted write must leave the previous document
        # readable: write beside it, then swap.
        fd, tmp_name = tempfile.mkstemp(dir=full.parent, prefix=f".{doc_id}.", suffix=".tmp")
        tmp = Path(tmp_name)
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(envelope, f, indent=2)
            os.replace(tmp, full)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise

    def ids(self) -> list[str]:
        """IDs of every stored document, sorted."""
        if not self.collection.exists():
            return []
        return sorted(p.stem for p in self.collection.glob("*.json"))

    def _resolve(self, doc_id: str) -> Path:
        if not doc_id:
            msg = "Document ID must not be empty"
            raise ValueError(msg)
        full = self.collection / f"{doc_id}.json"
        try:
            full.resolve().relative_to(self.collection.resolve())
        except ValueError:
            msg = f"Document ID escapes collection directory: {doc_id}"
            raise ValueError(msg) from None
        return full


class MemoryDocumentStore:
    """In-process store; returns copies so callers can't mutate stored state."""

    def __init__(self, documents: dict[str, dict[str, Any]] | None = None) -> None:
        self.documents: dict[str, dict[str, Any]] = copy.deepcopy(documents or {})
        self.writes: list[str] = []

    def get(self, doc_id: str) -> dict[str, Any] | None:
        doc = self.documents.get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def set(self, doc_id: str, data: dict[str, Any], *, merge: bool = False) -> None:
        self.documents[doc_id] = copy.deepcopy(_merged(self.documents.get(doc_id), data, merge))
        self.writes.append(doc_id)

    def ids(self) -> list[str]:
        return sorted(self.documents)
