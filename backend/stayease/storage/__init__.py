from stayease.storage.base import Storage
from stayease.storage.memory import MemoryStorage
from stayease.storage.mongo import MongoStorage
from stayease.storage.sessions import SessionStore, MemorySessionStore
from stayease.storage.selector import (
    create_storage, initialize_storage, get_storage, mask_uri
)
from stayease.storage.sql import SqlStorage

__all__ = [
    "Storage",
    "MemoryStorage",
    "SqlStorage",
    "MongoStorage",
    "SessionStore",
    "MemorySessionStore",
    "create_storage",
    "initialize_storage",
    "get_storage",
    "mask_uri",
]
