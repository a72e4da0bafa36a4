"""Serialized load → validate → commit around the ledger document.

CONCURRENCY CONTROL
===================

Every mutating ledger operation runs as a critical section built from
two layers, the same two strategies used for row-level wallet updates:

LAYER 1: PESSIMISTIC, IN-PROCESS COMMIT LOCK
--------------------------------------------
Within one process, every writer queues on the store's ``commit_lock``
for the whole load → mutate → save window. Two debits for the same user
can never both read the balance before either has committed, and writers
for different users never invalidate each other's revision. Nothing is
kept per user, so the lock set does not grow with the number of users.

LAYER 2: OPTIMISTIC, DOCUMENT REVISION
--------------------------------------
The store's ``save`` is a compare-and-swap on the document revision.
Writers in other processes do not share our lock; if one of them
committed between our load and our save, ``save`` raises
``ConcurrencyError``. The whole operation is then replayed from a fresh
load, which means the balance check runs again against the winner's
state. Between attempts the lock is released and the retry sleeps for a
randomized, exponentially growing delay so competing processes do not
retry in lockstep.

EXAMPLE:
    def mutation(document):
        wallet = document.find_wallet(user_id)
        if wallet.balance < amount:
            raise InsufficientFundsError(...)
        wallet.balance -= amount
        ...
        return transaction

    transaction = await transactor.run(user_id, mutation)

Mutations are plain synchronous callables. They must validate before
touching the document and raise typed errors on failure; since each
attempt works on a private copy from ``load``, a raised error simply
discards that copy and nothing is persisted.
"""

import asyncio
import logging
import random
from typing import Callable, TypeVar

from walletcore.core.exceptions import ConcurrencyError
from walletcore.db.store import DocumentStore
from walletcore.models.document import LedgerDocument

logger = logging.getLogger(__name__)

T = TypeVar("T")

Mutation = Callable[[LedgerDocument], T]


class Transactor:
    """Runs mutations against the document store as atomic units."""

    def __init__(
        self,
        store: DocumentStore,
        max_retries: int = 5,
        retry_backoff: float = 0.01,
    ) -> None:
        self.store = store
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff

    async def run(self, key: str, mutation: Mutation[T]) -> T:
        """Apply ``mutation`` and commit it.

        Args:
            key: Label for the operation in logs, the user id for ledger operations
            mutation: Callable that validates and mutates the document

        Returns:
            Whatever ``mutation`` returned on the attempt that committed

        Raises:
            AppException: Any typed error raised by ``mutation``
            ConcurrencyError: If every attempt lost the revision race to another process
            StoreError: If the store could not be read or written
        """
        for attempt in range(self.max_retries):
            async with self.store.commit_lock:
                document = await self.store.load()
                expected_revision = document.revision
                result = mutation(document)
                try:
                    await self.store.save(document, expected_revision)
                except ConcurrencyError:
                    if attempt == self.max_retries - 1:
                        logger.warning(
                            "Giving up on %s after %d conflicting commits",
                            key,
                            self.max_retries,
                        )
                        raise
                    logger.warning(
                        "Commit conflict for %s at revision %d, retrying (attempt %d)",
                        key,
                        expected_revision,
                        attempt + 1,
                    )
                else:
                    return result
            await asyncio.sleep(self.backoff(attempt))
        raise ConcurrencyError("Document", self.store.name)  # pragma: no cover

    def backoff(self, attempt: int) -> float:
        """Full-jitter delay before retry number ``attempt + 1``."""
        return random.uniform(0, self.retry_backoff * (2 ** attempt))

    async def read(self, query: Callable[[LedgerDocument], T]) -> T:
        """Evaluate ``query`` against a fresh snapshot without committing."""
        document = await self.store.load()
        return query(document)
