"""Document store backed by a single SQL row.

The document body is stored as JSON next to an integer ``revision``
column. Commits use the optimistic locking pattern: the UPDATE only
matches the row if the revision is still the one we read, and a zero
rowcount means another writer (in any process) committed first.
"""

import logging
from typing import Optional

import pydantic
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from walletcore.core.exceptions import StoreError
from walletcore.db.session import create_tables, get_async_engine, get_async_session_maker
from walletcore.db.store import DocumentStore
from walletcore.db.tables import DocumentRow
from walletcore.models.document import LedgerDocument

logger = logging.getLogger(__name__)


class SqlDocumentStore(DocumentStore):
    """Ledger document persisted in the ``ledger_documents`` table."""

    def __init__(self, engine: AsyncEngine, name: str = "default") -> None:
        super().__init__()
        self.name = name
        self.engine = engine
        self._session_maker = get_async_session_maker(engine)

    @classmethod
    def from_url(cls, url: Optional[str] = None, name: str = "default") -> "SqlDocumentStore":
        return cls(get_async_engine(url), name=name)

    async def load(self) -> LedgerDocument:
        try:
            async with self._session_maker() as session:
                result = await session.execute(
                    select(DocumentRow).where(DocumentRow.name == self.name)
                )
                row = result.scalar_one_or_none()
            if row is None:
                return LedgerDocument()
            document = LedgerDocument.model_validate(row.body)
        except (SQLAlchemyError, pydantic.ValidationError) as exc:
            logger.exception("Failed to load ledger document %s", self.name)
            raise StoreError("Ledger document could not be read") from exc

        document.revision = row.revision
        return document

    async def save(self, document: LedgerDocument, expected_revision: int) -> int:
        new_revision = expected_revision + 1
        body = document.model_dump(mode="json", exclude={"revision"})

        try:
            async with self._session_maker() as session:
                async with session.begin():
                    if expected_revision == 0:
                        # First commit creates the row; a concurrent first
                        # commit violates the primary key instead.
                        session.add(
                            DocumentRow(name=self.name, revision=new_revision, body=body)
                        )
                    else:
                        result = await session.execute(
                            update(DocumentRow)
                            .where(
                                DocumentRow.name == self.name,
                                DocumentRow.revision == expected_revision,
                            )
                            .values(revision=new_revision, body=body)
                        )
                        if result.rowcount == 0:
                            raise self._conflict()
        except IntegrityError as exc:
            raise self._conflict() from exc
        except SQLAlchemyError as exc:
            logger.exception("Failed to save ledger document %s", self.name)
            raise StoreError("Ledger document could not be written") from exc

        document.revision = new_revision
        return new_revision

    async def initialize(self) -> None:
        await create_tables(self.engine)

    async def close(self) -> None:
        await self.engine.dispose()
