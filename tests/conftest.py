from datetime import date

import pytest

from ricemill.constants.materials import MaterialType
from ricemill.schemas.inventory.inventory_batch_schemas import InventoryBatchCreate
from ricemill.services.inventory.inventory_service import receive_stock
from ricemill.services.storage.collection_store import InMemoryCollectionStore


@pytest.fixture
def store():
    return InMemoryCollectionStore()


def receive(store, material, quantity, received=date(2025, 1, 1), **extra):
    return receive_stock(
        store,
        MaterialType(material),
        InventoryBatchCreate(quantity=quantity, date_received=received, **extra),
    )


def stock_for_consignments(store, gunny=580, stickers=580):
    receive(store, MaterialType.GUNNY, gunny)
    receive(store, MaterialType.STICKER, stickers)
