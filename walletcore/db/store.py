"""Document store adapters.

The whole ledger lives in one document (users, wallets, transactions,
carts). Every backend exposes the same two calls:

- ``load()`` returns a private copy of the current document, stamped with
  the revision it was read at. Callers may mutate it freely.
- ``save(document, expected_revision)`` replaces the stored document only
  if its revision still equals ``expected_revision``, then bumps the
  revision. Otherwise it raises ``ConcurrencyError`` and writes nothing.

Writers inside one process queue on the store's ``commit_lock``, so they
never race each other. The compare-and-swap catches writers in other
processes that read the same revision. See ``walletcore.services.transactor``
for the retry loop built on top of it.
"""

import abc
import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

import pydantic

from walletcore.core.config import Settings
from walletcore.core.exceptions import ConcurrencyError, StoreError
from walletcore.models.document import LedgerDocument

logger = logging.getLogger(__name__)


class DocumentStore(abc.ABC):
    """Read-whole, write-whole persistence for the ledger document."""

    name: str = "default"

    def __init__(self) -> None:
        # Held by the transactor around load, mutate and save.
        self.commit_lock = asyncio.Lock()

    @abc.abstractmethod
    async def load(self) -> LedgerDocument:
        """Return a private copy of the current document."""

    @abc.abstractmethod
    async def save(self, document: LedgerDocument, expected_revision: int) -> int:
        """Commit ``document`` if the stored revision is still ``expected_revision``.

        Returns:
            int: The new revision, also written back onto ``document``

        Raises:
            ConcurrencyError: If another writer committed first
            StoreError: If the underlying storage failed
        """

    async def initialize(self) -> None:
        """Prepare backing storage before the first load."""

    async def close(self) -> None:
        """Release any resources held by the store."""

    def _conflict(self) -> ConcurrencyError:
        logger.warning("Revision conflict on document %s", self.name)
        return ConcurrencyError("Document", self.name)


class InMemoryDocumentStore(DocumentStore):
    """Process-local store that keeps the serialized document in memory.

    Holding JSON rather than live objects keeps every ``load`` an
    independent copy, the same as the durable backends.
    """

    def __init__(self, name: str = "default") -> None:
        super().__init__()
        self.name = name
        self._payload = LedgerDocument().model_dump_json()
        self._revision = 0
        self._lock = asyncio.Lock()

    async def load(self) -> LedgerDocument:
        document = LedgerDocument.model_validate_json(self._payload)
        document.revision = self._revision
        return document

    async def save(self, document: LedgerDocument, expected_revision: int) -> int:
        async with self._lock:
            if self._revision != expected_revision:
                raise self._conflict()
            new_revision = expected_revision + 1
            self._payload = document.model_copy(
                update={"revision": new_revision}
            ).model_dump_json()
            self._revision = new_revision
        document.revision = new_revision
        return new_revision


class JsonFileDocumentStore(DocumentStore):
    """Single JSON file on local disk.

    Writes go to a sibling temp file which is then renamed over the
    original, so a crash mid-write never leaves a truncated document.
    The revision check is guarded by an in-process lock, so this backend
    requires a single writer process. Use ``SqlDocumentStore`` when more
    than one process writes.
    """

    def __init__(self, path: str | Path, name: str = "default") -> None:
        super().__init__()
        self.name = name
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def load(self) -> LedgerDocument:
        return await asyncio.to_thread(self._read)

    async def save(self, document: LedgerDocument, expected_revision: int) -> int:
        async with self._lock:
            current = await asyncio.to_thread(self._read)
            if current.revision != expected_revision:
                raise self._conflict()
            new_revision = expected_revision + 1
            payload = document.model_copy(
                update={"revision": new_revision}
            ).model_dump_json(indent=2)
            await asyncio.to_thread(self._write, payload)
        document.revision = new_revision
        return new_revision

    def _read(self) -> LedgerDocument:
        if not self.path.exists():
            return LedgerDocument()
        try:
            return LedgerDocument.model_validate_json(self.path.read_bytes())
        except (OSError, pydantic.ValidationError) as exc:
            logger.exception("Failed to read ledger document from %s", self.path)
            raise StoreError("Ledger document could not be read") from exc

    def _write(self, payload: str) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path)
        except OSError as exc:
            logger.exception("Failed to write ledger document to %s", self.path)
            raise StoreError("Ledger document could not be written") from exc


def create_store(settings: Settings, backend: Optional[str] = None) -> DocumentStore:
    """Build the document store selected by ``STORE_BACKEND``."""
    backend = backend or settings.STORE_BACKEND
    if backend == "memory":
        return InMemoryDocumentStore(name=settings.DOCUMENT_NAME)
    if backend == "json":
        return JsonFileDocumentStore(settings.STORE_PATH, name=settings.DOCUMENT_NAME)
    if backend == "sql":
        from walletcore.db.sql_store import SqlDocumentStore

        return SqlDocumentStore.from_url(settings.DATABASE_URL, name=settings.DOCUMENT_NAME)
    raise ValueError(f"Unknown store backend: {backend}")
