"""
Tests for the itinerary storage backends
"""

import asyncio
import pytest

from hangout_planner.core.exceptions import ConfigurationError
from hangout_planner.core.settings import Settings
from hangout_planner.db.session import DatabaseManager
from hangout_planner.db.storage import (
    DatabaseStorage,
    MemoryStorage,
    build_storage,
)

SAMPLE = {
    "title": "Evening in Noida",
    "description": "Malls and momos.",
    "location": "Noida",
    "activities": [{"id": "act1", "title": "Momos", "timeOfDay": "evening", "price": "₹"}],
    "recommendations": [{"id": "rec1", "title": "Okhla Bird Sanctuary"}],
}


def sample(**overrides):
    data = dict(SAMPLE)
    data.update(overrides)
    return data


class TestMemoryStorage:
    @pytest.mark.asyncio
    async def test_save_and_get(self):
        storage = MemoryStorage()

        itinerary_id, record = await storage.save(sample())
        loaded = await storage.get(itinerary_id)

        assert itinerary_id == 1
        assert loaded is record
        assert loaded.title == "Evening in Noida"
        assert loaded.activities[0]["price"] == "₹"
        assert loaded.created_at is not None

    @pytest.mark.asyncio
    async def test_get_missing(self):
        assert await MemoryStorage().get(999999) is None

    @pytest.mark.asyncio
    async def test_ids_strictly_increase(self):
        storage = MemoryStorage()
        ids = [(await storage.save(sample()))[0] for _ in range(3)]
        assert ids == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_non_list_collections_are_stored_empty(self):
        storage = MemoryStorage()

        itinerary_id, _ = await storage.save(sample(activities={"a": 1}, recommendations="abc"))
        record = await storage.get(itinerary_id)

        assert record.activities == []
        assert record.recommendations == []

    @pytest.mark.asyncio
    async def test_saved_record_is_independent_of_input(self):
        storage = MemoryStorage()
        payload = sample(activities=[{"title": "original"}])

        itinerary_id, _ = await storage.save(payload)
        payload["activities"][0]["title"] = "mutated"

        assert (await storage.get(itinerary_id)).activities[0]["title"] == "original"

    @pytest.mark.asyncio
    async def test_list_all_and_owner_filter(self):
        storage = MemoryStorage()
        await storage.save(sample(title="a"), user_id=1)
        await storage.save(sample(title="b"), user_id=2)
        await storage.save(sample(title="c"))

        assert [r.title for r in await storage.list_all()] == ["a", "b", "c"]
        assert [r.title for r in await storage.list_all(user_id=2)] == ["b"]

    @pytest.mark.asyncio
    async def test_concurrent_saves_get_unique_ids(self):
        storage = MemoryStorage()

        results = await asyncio.gather(*(storage.save(sample(title=f"t{i}")) for i in range(50)))
        ids = [itinerary_id for itinerary_id, _ in results]

        assert len(set(ids)) == 50
        assert sorted(ids) == list(range(1, 51))
        for itinerary_id, record in results:
            assert (await storage.get(itinerary_id)).title == record.title

    @pytest.mark.asyncio
    async def test_users(self):
        storage = MemoryStorage()

        user = await storage.create_user("asha", "hashed")

        assert user.id == 1
        assert (await storage.get_user(1)).username == "asha"
        assert (await storage.get_user_by_username("asha")).id == 1
        assert await storage.get_user_by_username("nobody") is None

    @pytest.mark.asyncio
    async def test_health(self):
        health = await MemoryStorage().health_check()
        assert health == {"status": "healthy", "backend": "memory"}


class TestDatabaseStorage:
    @pytest.fixture
    async def db_storage(self, tmp_path):
        settings = Settings(
            STORAGE_BACKEND="database",
            DB_URL=f"sqlite:///{tmp_path}/itineraries.db",
        )
        storage = build_storage(settings)
        await storage.initialize()
        yield storage
        await storage.close()

    @pytest.mark.asyncio
    async def test_save_get_list(self, db_storage):
        first_id, record = await db_storage.save(sample(title="first"))
        second_id, _ = await db_storage.save(sample(title="second"), user_id=None)

        assert second_id > first_id
        assert record.id == first_id

        loaded = await db_storage.get(first_id)
        assert loaded.title == "first"
        assert loaded.location == "Noida"
        assert loaded.activities == SAMPLE["activities"]
        assert loaded.recommendations == SAMPLE["recommendations"]
        assert loaded.created_at is not None

        assert [r.id for r in await db_storage.list_all()] == [first_id, second_id]

    @pytest.mark.asyncio
    async def test_get_missing(self, db_storage):
        assert await db_storage.get(999999) is None

    @pytest.mark.asyncio
    async def test_users_and_owner_filter(self, db_storage):
        user = await db_storage.create_user("ravi", "hashed")
        await db_storage.save(sample(title="mine"), user_id=user.id)
        await db_storage.save(sample(title="anonymous"))

        assert (await db_storage.get_user_by_username("ravi")).id == user.id
        assert (await db_storage.get_user(user.id)).username == "ravi"
        assert [r.title for r in await db_storage.list_all(user_id=user.id)] == ["mine"]

    @pytest.mark.asyncio
    async def test_health(self, db_storage):
        health = await db_storage.health_check()
        assert health["status"] == "healthy"
        assert health["backend"] == "database"

    @pytest.mark.asyncio
    async def test_uninitialized_manager_raises_configuration_error(self, tmp_path):
        settings = Settings(STORAGE_BACKEND="database", DB_URL=f"sqlite:///{tmp_path}/x.db")
        storage = DatabaseStorage(DatabaseManager(settings))

        with pytest.raises(ConfigurationError):
            await storage.get(1)

    @pytest.mark.asyncio
    async def test_missing_manager_raises_configuration_error(self):
        storage = DatabaseStorage(None)

        with pytest.raises(ConfigurationError):
            await storage.save(sample())
        with pytest.raises(ConfigurationError):
            await storage.initialize()


class TestBuildStorage:
    def test_memory_backend(self):
        storage = build_storage(Settings(STORAGE_BACKEND="memory"))
        assert isinstance(storage, MemoryStorage)

    def test_database_backend_requires_url(self):
        with pytest.raises(ConfigurationError):
            build_storage(Settings(STORAGE_BACKEND="database", DB_URL=""))

    def test_database_backend(self, tmp_path):
        storage = build_storage(Settings(STORAGE_BACKEND="database", DB_URL=f"sqlite:///{tmp_path}/y.db"))
        assert isinstance(storage, DatabaseStorage)


class TestDatabaseUrl:
    @pytest.mark.parametrize("url,expected", [
        ("postgres://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ("postgresql://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ("postgresql+asyncpg://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ("sqlite:///tmp/a.db", "sqlite+aiosqlite:///tmp/a.db"),
    ])
    def test_driver_rewrite(self, url, expected):
        manager = DatabaseManager(Settings(STORAGE_BACKEND="database", DB_URL=url))
        assert manager._prepare_database_url() == expected

    def test_unsupported_scheme(self):
        manager = DatabaseManager(Settings(STORAGE_BACKEND="database", DB_URL="mysql://h/db"))
        with pytest.raises(ConfigurationError):
            manager._prepare_database_url()
