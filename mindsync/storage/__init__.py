from flask import current_app

from .base import Storage
from .database import DatabaseStorage
from .memory import MemoryStorage

BACKENDS = {
    DatabaseStorage.name: DatabaseStorage,
    MemoryStorage.name: MemoryStorage,
}


def init_storage(app):
    """
    Create the storage backend named by ``STORAGE_BACKEND`` and attach it to the app.

    The choice is made once at startup; both backends behave the same apart
    from durability.
    """
    name = app.config.get("STORAGE_BACKEND", DatabaseStorage.name)
    try:
        backend = BACKENDS[name]
    except KeyError:
        raise RuntimeError(f"Unknown STORAGE_BACKEND {name!r}") from None
    storage = backend()
    app.extensions["mindsync.storage"] = storage
    return storage


def get_storage():
    """The storage backend of the current app."""
    return current_app.extensions["mindsync.storage"]
