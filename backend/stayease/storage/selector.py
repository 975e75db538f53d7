"""
Storage selection
Chooses the adapter once at startup from DB_TYPE and bootstraps the
document-store connection with bounded retries.
"""
import asyncio
import logging
import re

from fastapi import Request

from stayease.config import Settings
from stayease.exceptions import ConfigurationError, StorageUnavailableError
from stayease.storage.base import Storage
from stayease.storage.memory import MemoryStorage
from stayease.storage.mongo import MongoStorage
from stayease.storage.sessions import MemorySessionStore
from stayease.storage.sql import SqlStorage

logger = logging.getLogger(__name__)

MONGODB_SCHEMES = ("mongodb://", "mongodb+srv://")

_CREDENTIALS = re.compile(r"//[^@/]+@")


def mask_uri(uri: str) -> str:
    """Hide credentials in a connection string for logging"""
    return _CREDENTIALS.sub("//******:******@", uri)


def validate_mongodb_uri(uri: str) -> None:
    if not uri or not uri.startswith(MONGODB_SCHEMES):
        raise ConfigurationError(
            "Invalid MongoDB URI: it must start with mongodb:// or mongodb+srv://"
        )


def create_storage(settings: Settings) -> Storage:
    """Build the adapter named by DB_TYPE, without connecting it"""
    session_store = MemorySessionStore(ttl_seconds=settings.SESSION_MAX_AGE_SECONDS)

    if settings.DB_TYPE == "memory":
        return MemoryStorage(session_store=session_store)
    if settings.DB_TYPE == "sql":
        return SqlStorage(settings.DATABASE_URL, session_store=session_store)
    if settings.DB_TYPE == "mongodb":
        validate_mongodb_uri(settings.MONGODB_URI)
        return MongoStorage(
            settings.MONGODB_URI,
            server_selection_timeout_ms=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
            connect_timeout_ms=settings.MONGODB_CONNECT_TIMEOUT_MS,
            socket_timeout_ms=settings.MONGODB_SOCKET_TIMEOUT_MS,
            session_store=session_store,
        )
    raise ConfigurationError(f"Unknown DB_TYPE: {settings.DB_TYPE}")


async def _connect_with_retries(storage: Storage, settings: Settings) -> bool:
    attempts = max(1, settings.MONGODB_CONNECT_RETRIES)
    masked = mask_uri(settings.MONGODB_URI)

    for attempt in range(1, attempts + 1):
        logger.info(f"Connecting to MongoDB (attempt {attempt}/{attempts}): {masked}")
        try:
            await storage.connect()
            return True
        except StorageUnavailableError as e:
            logger.warning(f"MongoDB connection attempt {attempt} failed: {e}")
            if attempt < attempts:
                await asyncio.sleep(settings.MONGODB_RETRY_DELAY_SECONDS)
    return False


async def initialize_storage(settings: Settings) -> Storage:
    """Create and connect the configured adapter"""
    storage = create_storage(settings)

    if not isinstance(storage, MongoStorage):
        await storage.connect()
        logger.info(f"Using {storage.name} storage")
        return storage

    if await _connect_with_retries(storage, settings):
        logger.info("Using mongodb storage")
        return storage

    await storage.close()
    if not settings.STORAGE_FALLBACK_TO_MEMORY:
        raise StorageUnavailableError("Could not connect to MongoDB")

    logger.error("Could not connect to MongoDB, falling back to in-memory storage")
    fallback = MemoryStorage(session_store=storage.session_store)
    await fallback.connect()
    return fallback


def get_storage(request: Request) -> Storage:
    """Dependency: the storage adapter chosen at startup"""
    return request.app.state.storage
