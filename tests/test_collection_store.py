from datetime import date
import threading

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ricemill.constants.materials import MaterialType
from ricemill.core.db import Base
from ricemill.core.exceptions import InsufficientStockError
from ricemill.schemas.fci.consignment_schemas import ConsignmentCreate
from ricemill.schemas.inventory.inventory_batch_schemas import InventoryBatchCreate
from ricemill.services.fci.consignment_service import create_consignment
from ricemill.services.inventory.inventory_service import available_stock, receive_stock
from ricemill.services.storage.collection_store import (
    InMemoryCollectionStore,
    SqlCollectionStore,
)


@pytest.fixture
def sql_store():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield SqlCollectionStore(sessionmaker(bind=engine, expire_on_commit=False))
    engine.dispose()


def test_missing_key_loads_empty(sql_store):
    assert sql_store.load("gunnyStocks") == []
    assert sql_store.last_sync() is None


def test_save_load_and_overwrite(sql_store):
    sql_store.save("vendors", [{"id": "v1", "name": "Laxmi"}])
    sql_store.save("vendors", [{"id": "v2", "name": "Sai"}])

    assert sql_store.load("vendors") == [{"id": "v2", "name": "Sai"}]
    assert sql_store.keys() == ["vendors"]
    assert sql_store.last_sync() is not None


def test_loaded_records_are_copies(sql_store):
    sql_store.save("vendors", [{"id": "v1"}])

    records = sql_store.load("vendors")
    records[0]["id"] = "changed"

    assert sql_store.load("vendors") == [{"id": "v1"}]


def test_delete(sql_store):
    sql_store.save("vendors", [{"id": "v1"}])
    sql_store.delete("vendors")
    sql_store.delete("never-saved")

    assert sql_store.keys() == []


def test_ledger_runs_on_sql_store(sql_store):
    for material in (MaterialType.GUNNY, MaterialType.STICKER):
        receive_stock(
            sql_store,
            material,
            InventoryBatchCreate(quantity=1000, date_received=date(2025, 1, 1)),
        )

    create_consignment(
        sql_store,
        ConsignmentCreate(ack_number="ACK-SQL", consignment_date=date(2025, 2, 1)),
    )

    assert available_stock(sql_store, MaterialType.GUNNY) == 420
    assert sql_store.load("fciConsignments")[0]["ackNumber"] == "ACK-SQL"


# -------------------------
# TRANSACTIONS
# -------------------------
@pytest.fixture(params=["memory", "sql"])
def any_store(request):
    if request.param == "sql":
        return request.getfixturevalue("sql_store")
    return InMemoryCollectionStore()


def test_transaction_commits_together(any_store):
    with any_store.transaction():
        any_store.save("vendors", [{"id": "v1"}])
        any_store.save("customers", [{"id": "c1"}])
        assert any_store.load("vendors") == [{"id": "v1"}]
        assert any_store.keys() == ["customers", "vendors"]

    assert any_store.load("customers") == [{"id": "c1"}]
    assert any_store.last_sync() is not None


def test_failed_transaction_writes_nothing(any_store):
    any_store.save("vendors", [{"id": "v1"}])

    with pytest.raises(RuntimeError):
        with any_store.transaction():
            any_store.save("vendors", [])
            any_store.save("customers", [{"id": "c1"}])
            any_store.delete("vendors")
            raise RuntimeError("disk full")

    assert any_store.load("vendors") == [{"id": "v1"}]
    assert any_store.load("customers") == []
    assert any_store.keys() == ["vendors"]


def test_nested_transaction_joins_outer(any_store):
    with any_store.transaction():
        with any_store.transaction():
            any_store.save("vendors", [{"id": "v1"}])
        any_store.save("customers", [{"id": "c1"}])

    assert any_store.keys() == ["customers", "vendors"]


def test_concurrent_consignments_cannot_share_stock():
    store = InMemoryCollectionStore()
    for material in (MaterialType.GUNNY, MaterialType.STICKER):
        receive_stock(store, material, InventoryBatchCreate(quantity=600, date_received=date(2025, 1, 1)))

    barrier = threading.Barrier(2)
    created, refused = [], []

    def issue(ack_number):
        barrier.wait()
        try:
            created.append(
                create_consignment(
                    store,
                    ConsignmentCreate(ack_number=ack_number, consignment_date=date(2025, 2, 1)),
                )
            )
        except InsufficientStockError as exc:
            refused.append(exc)

    threads = [threading.Thread(target=issue, args=(ack,)) for ack in ("ACK-1", "ACK-2")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(created) == 1
    assert len(refused) == 1
    assert len(store.load("fciConsignments")) == 1
    assert available_stock(store, MaterialType.GUNNY) == 20
    assert available_stock(store, MaterialType.STICKER) == 20
