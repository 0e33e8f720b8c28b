from fastapi import Request

from gigboard.core.config import Settings, get_settings
from gigboard.db.snapshot_ops import get_snapshot_storage
from gigboard.store import ProjectStore

def build_store(settings: Settings) -> ProjectStore:
    storage = get_snapshot_storage(settings)
    return ProjectStore(storage, key=settings.storage_key, initial_freelancers=settings.initial_freelancers)

def get_store(request: Request) -> ProjectStore:
    """The application's store, built from settings on first use unless one was supplied to create_app."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        store = build_store(get_settings())
        request.app.state.store = store
    return store
