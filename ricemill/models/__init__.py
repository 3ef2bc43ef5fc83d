# Storage
from ricemill.models.storage.collection_models import StoredCollection
