from typing import AsyncGenerator

from fastapi import Request

from ..config import Settings
from .base import CartStore, Catalog, ContactStore, StorageBackend, Stores, UserStore
from .memory import MemoryBackend
from .sql import SqlBackend


def build_backend(settings: Settings) -> StorageBackend:
    if settings.store_backend == "memory":
        return MemoryBackend()
    if settings.store_backend == "sql":
        return SqlBackend(settings)
    raise ValueError(f"Unknown STORE_BACKEND {settings.store_backend!r}, expected 'sql' or 'memory'")


async def get_stores(request: Request) -> AsyncGenerator[Stores, None]:
    async with request.app.state.backend.open() as stores:
        yield stores


__all__ = [
    "CartStore", "Catalog", "ContactStore", "StorageBackend", "Stores", "UserStore",
    "MemoryBackend", "SqlBackend", "build_backend", "get_stores",
]
