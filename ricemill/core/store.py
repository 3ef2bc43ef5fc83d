# ricemill/core/store.py

from ricemill.core.db import SessionLocal
from ricemill.services.storage.collection_store import CollectionStore, SqlCollectionStore

_store = SqlCollectionStore(SessionLocal)


# =====================================================
# DEPENDENCY
# =====================================================
def get_store() -> CollectionStore:
    return _store
