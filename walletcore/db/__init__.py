# Document store backends and database plumbing

from walletcore.db.store import (
    DocumentStore,
    InMemoryDocumentStore,
    JsonFileDocumentStore,
    create_store,
)

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "JsonFileDocumentStore",
    "create_store",
]
