"""Shared test fixtures.

Environment defaults are set before any ``walletcore`` module is imported,
because the Celery app and the FastAPI app read settings at import time.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")
os.environ.setdefault("COMMIT_RETRY_BACKOFF", "0")

import asyncio
import json
from typing import Optional

import pytest
import pytest_asyncio

from walletcore.core.config import Settings
from walletcore.db.sql_store import SqlDocumentStore
from walletcore.db.store import DocumentStore, InMemoryDocumentStore, JsonFileDocumentStore
from walletcore.models.document import LedgerDocument
from walletcore.models.user import User
from walletcore.services.container import Services
from walletcore.services.transactor import Transactor
from walletcore.services.wallet_service import apply_credit, apply_open_wallet


def make_settings(**overrides) -> Settings:
    """Settings for tests, never read from a .env file."""
    values = {
        "SECRET_KEY": "test-secret-key",
        "STORE_BACKEND": "memory",
        "COMMIT_RETRY_BACKOFF": 0,
        "NOTIFICATIONS_ENABLED": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_services(store: Optional[DocumentStore] = None) -> Services:
    return Services.from_settings(make_settings(), store=store or InMemoryDocumentStore())


async def open_account(
    transactor: Transactor,
    balance: int = 0,
    email: Optional[str] = None,
) -> str:
    """Create a user and wallet directly, skipping bcrypt, and fund it.

    The opening balance is credited through a topup entry so the ledger
    stays consistent.
    """
    user = User(
        email=email or f"user_{os.urandom(4).hex()}@example.com",
        name="Test User",
        password_hash="not-a-real-hash",
    )

    def mutation(document: LedgerDocument) -> str:
        document.users.append(user)
        apply_open_wallet(document, user.id, "NGN")
        if balance > 0:
            apply_credit(document, user.id, balance, "Opening balance")
        return user.id

    return await transactor.run(user.id, mutation)


def snapshot(document: LedgerDocument) -> str:
    """Canonical JSON of a document for byte-for-byte comparisons."""
    return json.dumps(document.model_dump(mode="json"), sort_keys=True)


def ledger_is_consistent(document: LedgerDocument) -> bool:
    for wallet in document.wallets:
        ledger_sum = sum(t.amount for t in document.transactions_for(wallet.user_id))
        if wallet.balance != ledger_sum:
            return False
    return True


@pytest.fixture
def services() -> Services:
    return make_services()


class PeerStore(DocumentStore):
    """Second handle on a shared store, the way another process holds one.

    It has its own commit lock, and ``load`` yields after reading so that
    two peers can both read the same revision before either saves.
    """

    def __init__(self, shared: DocumentStore) -> None:
        super().__init__()
        self.shared = shared
        self.name = shared.name

    async def load(self) -> LedgerDocument:
        document = await self.shared.load()
        await asyncio.sleep(0)
        return document

    async def save(self, document: LedgerDocument, expected_revision: int) -> int:
        return await self.shared.save(document, expected_revision)


@pytest_asyncio.fixture(params=["memory", "json", "sql"])
async def store(request, tmp_path):
    if request.param == "memory":
        backend: DocumentStore = InMemoryDocumentStore()
    elif request.param == "json":
        backend = JsonFileDocumentStore(tmp_path / "ledger.json")
    else:
        backend = SqlDocumentStore.from_url(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    await backend.initialize()
    yield backend
    await backend.close()
