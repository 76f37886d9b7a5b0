"""
Itinerary and user storage backends.

Both backends share one contract so the generator and the API never need to
know which one is active. ``MemoryStorage`` is the explicit development mode,
``DatabaseStorage`` is durable.
"""

import asyncio
import copy
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from hangout_planner.core.exceptions import ConfigurationError, StorageError
from hangout_planner.core.settings import Settings
from hangout_planner.db import crud
from hangout_planner.db.models import Itinerary, User, utcnow
from hangout_planner.db.session import DatabaseManager

logger = logging.getLogger(__name__)


def _list_or_empty(value: Any) -> List[Any]:
    return copy.deepcopy(value) if isinstance(value, list) else []


def _itinerary_fields(itinerary: Mapping[str, Any]) -> Dict[str, Any]:
    """Pick the persisted fields out of a client or generator payload"""
    return {
        "title": itinerary.get("title"),
        "description": itinerary.get("description"),
        "location": itinerary.get("location"),
        "activities": _list_or_empty(itinerary.get("activities")),
        "recommendations": _list_or_empty(itinerary.get("recommendations")),
    }


class ItineraryStorage(ABC):
    backend_name = "abstract"

    async def initialize(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def health_check(self) -> Dict[str, Any]:
        return {"status": "healthy", "backend": self.backend_name}

    @abstractmethod
    async def save(self, itinerary: Mapping[str, Any], user_id: Optional[int] = None) -> Tuple[int, Itinerary]:
        """Persist a new itinerary and return its assigned id with the stored record"""

    @abstractmethod
    async def get(self, itinerary_id: int) -> Optional[Itinerary]:
        """Return the itinerary or None when the id was never assigned"""

    @abstractmethod
    async def list_all(self, user_id: Optional[int] = None) -> List[Itinerary]:
        """Return every itinerary, optionally only those owned by ``user_id``"""

    @abstractmethod
    async def get_user(self, user_id: int) -> Optional[User]:
        ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[User]:
        ...

    @abstractmethod
    async def create_user(self, username: str, password: str) -> User:
        ...


class MemoryStorage(ItineraryStorage):
    """Process-local storage; contents are lost on restart"""

    backend_name = "memory"

    def __init__(self):
        self._itineraries: Dict[int, Itinerary] = {}
        self._users: Dict[int, User] = {}
        self._next_itinerary_id = 1
        self._next_user_id = 1
        self._lock = asyncio.Lock()

    async def _allocate_itinerary_id(self) -> int:
        async with self._lock:
            itinerary_id = self._next_itinerary_id
            self._next_itinerary_id += 1
            return itinerary_id

    async def save(self, itinerary, user_id=None):
        itinerary_id = await self._allocate_itinerary_id()
        record = Itinerary(
            id=itinerary_id,
            user_id=user_id,
            created_at=utcnow(),
            **_itinerary_fields(itinerary),
        )
        self._itineraries[itinerary_id] = record
        logger.info(f"Stored itinerary {itinerary_id} in memory")
        return itinerary_id, record

    async def get(self, itinerary_id):
        return self._itineraries.get(itinerary_id)

    async def list_all(self, user_id=None):
        records = list(self._itineraries.values())
        if user_id is not None:
            records = [r for r in records if r.user_id == user_id]
        return records

    async def get_user(self, user_id):
        return self._users.get(user_id)

    async def get_user_by_username(self, username):
        return next((u for u in self._users.values() if u.username == username), None)

    async def create_user(self, username, password):
        async with self._lock:
            user = User(id=self._next_user_id, username=username, password=password)
            self._next_user_id += 1
            self._users[user.id] = user
        return user


class DatabaseStorage(ItineraryStorage):
    """SQLModel-backed storage over an async SQLAlchemy engine"""

    backend_name = "database"

    def __init__(self, db_manager: Optional[DatabaseManager]):
        self.db_manager = db_manager

    def _manager(self) -> DatabaseManager:
        if self.db_manager is None or self.db_manager.async_session is None:
            raise ConfigurationError("Database not configured")
        return self.db_manager

    async def initialize(self) -> None:
        if self.db_manager is None:
            raise ConfigurationError("Database not configured")
        await self.db_manager.initialize()
        if self.db_manager.settings.DB_CREATE_TABLES:
            await self.db_manager.init_db()

    async def close(self) -> None:
        if self.db_manager is not None:
            await self.db_manager.close()

    async def health_check(self):
        health = await self._manager().health_check()
        health["backend"] = self.backend_name
        return health

    async def save(self, itinerary, user_id=None):
        try:
            async with self._manager().get_session() as session:
                record = await crud.create_itinerary(
                    session, user_id=user_id, **_itinerary_fields(itinerary)
                )
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save itinerary: {e}") from e
        return record.id, record

    async def get(self, itinerary_id):
        try:
            async with self._manager().get_session() as session:
                return await crud.get_itinerary_by_id(session, itinerary_id)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load itinerary {itinerary_id}: {e}") from e

    async def list_all(self, user_id=None):
        try:
            async with self._manager().get_session() as session:
                return await crud.get_itineraries(session, user_id=user_id)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list itineraries: {e}") from e

    async def get_user(self, user_id):
        try:
            async with self._manager().get_session() as session:
                return await crud.get_user_by_id(session, user_id)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load user {user_id}: {e}") from e

    async def get_user_by_username(self, username):
        try:
            async with self._manager().get_session() as session:
                return await crud.get_user_by_username(session, username)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load user {username}: {e}") from e

    async def create_user(self, username, password):
        try:
            async with self._manager().get_session() as session:
                return await crud.create_user(session, username=username, password=password)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to create user {username}: {e}") from e


def build_storage(settings: Settings) -> ItineraryStorage:
    """Select the storage backend named by STORAGE_BACKEND"""
    if settings.STORAGE_BACKEND == "database":
        if not settings.DB_URL:
            raise ConfigurationError("DB_URL is required when STORAGE_BACKEND is 'database'")
        return DatabaseStorage(DatabaseManager(settings))
    logger.warning("Using in-memory itinerary storage; data will not survive a restart")
    return MemoryStorage()
