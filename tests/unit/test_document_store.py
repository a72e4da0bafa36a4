"""Unit tests for the document store backends.

Every backend must honour the same contract: ``load`` returns an
independent copy, and ``save`` only commits when the revision it was
given is still the stored one.
"""

import pytest

from conftest import make_settings
from walletcore.core.exceptions import ConcurrencyError, StoreError
from walletcore.db.session import get_async_session_maker
from walletcore.db.sql_store import SqlDocumentStore
from walletcore.db.store import (
    DocumentStore,
    InMemoryDocumentStore,
    JsonFileDocumentStore,
    create_store,
)
from walletcore.db.tables import DocumentRow
from walletcore.models.user import User
from walletcore.models.wallet import Wallet


def _user(email: str = "ada@example.com") -> User:
    return User(email=email, name="Ada", password_hash="hash")


class TestDocumentStoreContract:
    @pytest.mark.asyncio
    async def test_fresh_store_loads_empty_document(self, store: DocumentStore) -> None:
        document = await store.load()

        assert document.revision == 0
        assert document.users == []
        assert document.wallets == []
        assert document.transactions == []
        assert document.carts == []

    @pytest.mark.asyncio
    async def test_save_bumps_revision_and_persists(self, store: DocumentStore) -> None:
        document = await store.load()
        user = _user()
        document.users.append(user)
        document.wallets.append(Wallet(user_id=user.id, balance=700))

        new_revision = await store.save(document, 0)

        assert new_revision == 1
        assert document.revision == 1
        reloaded = await store.load()
        assert reloaded.revision == 1
        assert reloaded.find_user(user.id).email == "ada@example.com"
        assert reloaded.find_wallet(user.id).balance == 700

    @pytest.mark.asyncio
    async def test_load_returns_independent_copies(self, store: DocumentStore) -> None:
        first = await store.load()
        first.users.append(_user())

        second = await store.load()

        assert second.users == []

    @pytest.mark.asyncio
    async def test_stale_revision_is_rejected(self, store: DocumentStore) -> None:
        winner = await store.load()
        loser = await store.load()
        winner.users.append(_user("winner@example.com"))
        loser.users.append(_user("loser@example.com"))

        await store.save(winner, winner.revision)
        with pytest.raises(ConcurrencyError):
            await store.save(loser, 0)

        stored = await store.load()
        assert [u.email for u in stored.users] == ["winner@example.com"]
        assert stored.revision == 1

    @pytest.mark.asyncio
    async def test_successive_saves(self, store: DocumentStore) -> None:
        for index in range(3):
            document = await store.load()
            document.users.append(_user(f"user{index}@example.com"))
            await store.save(document, document.revision)

        stored = await store.load()
        assert stored.revision == 3
        assert len(stored.users) == 3


class TestJsonFileDocumentStore:
    @pytest.mark.asyncio
    async def test_corrupt_file_raises_store_error(self, tmp_path) -> None:
        path = tmp_path / "ledger.json"
        path.write_text("{not json", encoding="utf-8")
        store = JsonFileDocumentStore(path)

        with pytest.raises(StoreError) as exc_info:
            await store.load()

        assert exc_info.value.status_code == 503
        assert exc_info.value.kind == "StoreUnavailable"

    @pytest.mark.asyncio
    async def test_save_leaves_no_temp_file(self, tmp_path) -> None:
        path = tmp_path / "nested" / "ledger.json"
        store = JsonFileDocumentStore(path)
        document = await store.load()
        document.users.append(_user())

        await store.save(document, 0)

        assert path.exists()
        assert not (path.parent / "ledger.json.tmp").exists()

    @pytest.mark.asyncio
    async def test_two_instances_share_the_file(self, tmp_path) -> None:
        path = tmp_path / "ledger.json"
        writer = JsonFileDocumentStore(path)
        reader = JsonFileDocumentStore(path)
        document = await writer.load()
        document.users.append(_user())
        await writer.save(document, 0)

        assert len((await reader.load()).users) == 1


class TestSqlDocumentStore:
    @pytest.mark.asyncio
    async def test_corrupt_body_raises_store_error(self, tmp_path) -> None:
        store = SqlDocumentStore.from_url(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
        await store.initialize()
        try:
            async with get_async_session_maker(store.engine)() as session:
                async with session.begin():
                    session.add(
                        DocumentRow(name=store.name, revision=1, body={"users": "not-a-list"})
                    )

            with pytest.raises(StoreError) as exc_info:
                await store.load()

            assert exc_info.value.status_code == 503
            assert exc_info.value.kind == "StoreUnavailable"
        finally:
            await store.close()

    @pytest.mark.asyncio
    async def test_documents_are_isolated_by_name(self, tmp_path) -> None:
        url = f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}"
        first = SqlDocumentStore.from_url(url, name="first")
        second = SqlDocumentStore.from_url(url, name="second")
        await first.initialize()
        try:
            document = await first.load()
            document.users.append(_user())
            await first.save(document, 0)

            assert (await second.load()).users == []
            assert (await second.load()).revision == 0
        finally:
            await first.close()
            await second.close()

    @pytest.mark.asyncio
    async def test_concurrent_first_commits_conflict(self, tmp_path) -> None:
        url = f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}"
        store = SqlDocumentStore.from_url(url)
        await store.initialize()
        try:
            first = await store.load()
            second = await store.load()
            await store.save(first, 0)

            with pytest.raises(ConcurrencyError):
                await store.save(second, 0)
        finally:
            await store.close()


class TestCreateStore:
    def test_memory_backend(self) -> None:
        store = create_store(make_settings(STORE_BACKEND="memory", DOCUMENT_NAME="tenant"))

        assert isinstance(store, InMemoryDocumentStore)
        assert store.name == "tenant"

    def test_json_backend(self, tmp_path) -> None:
        store = create_store(
            make_settings(STORE_BACKEND="json", STORE_PATH=str(tmp_path / "ledger.json"))
        )

        assert isinstance(store, JsonFileDocumentStore)
        assert store.path == tmp_path / "ledger.json"

    def test_sql_backend(self, tmp_path) -> None:
        store = create_store(
            make_settings(
                STORE_BACKEND="sql",
                DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}",
            )
        )

        assert isinstance(store, SqlDocumentStore)

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError):
            create_store(make_settings(), backend="redis")
