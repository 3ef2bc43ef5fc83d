from datetime import date
from decimal import Decimal
import logging

from ricemill.constants.materials import MaterialType
from ricemill.schemas.inventory.inventory_batch_schemas import (
    ConsumeResult,
    InventoryBatch,
    InventoryBatchCreate,
    LedgerSummary,
    StockUsage,
)
from ricemill.services.inventory.inventory_ledger import InventoryLedger
from ricemill.services.storage.collection_store import CollectionStore, transactional

logger = logging.getLogger(__name__)


# =====================================================
# RECEIVE
# =====================================================
@transactional
def receive_stock(
    store: CollectionStore,
    material: MaterialType,
    payload: InventoryBatchCreate,
) -> InventoryBatch:
    ledger = InventoryLedger(store, material)
    batch = ledger.receive(payload)
    ledger.save()

    logger.info(
        "Stock received",
        extra={
            "material": ledger.material.value,
            "batch_id": batch.id,
            "quantity": str(batch.quantity_received),
        },
    )
    return batch


# =====================================================
# QUERIES
# =====================================================
def available_stock(store: CollectionStore, material: MaterialType) -> Decimal:
    return InventoryLedger(store, material).available()


def list_batches(store: CollectionStore, material: MaterialType) -> list[InventoryBatch]:
    return InventoryLedger(store, material).batches


def list_usage(
    store: CollectionStore,
    material: MaterialType,
    *,
    ack_number: str | None = None,
    batch_id: str | None = None,
) -> list[StockUsage]:
    usages = InventoryLedger(store, material).usages
    if ack_number:
        usages = [u for u in usages if u.ack_number == ack_number]
    if batch_id:
        usages = [u for u in usages if u.batch_id == batch_id]
    return usages


def ledger_summary(store: CollectionStore, material: MaterialType) -> LedgerSummary:
    return InventoryLedger(store, material).summary()


# =====================================================
# CONSUME
# =====================================================
@transactional
def consume_stock(
    store: CollectionStore,
    material: MaterialType,
    amount,
    *,
    ack_number: str | None = None,
    usage_date: date | None = None,
) -> ConsumeResult:
    """First-fit consumption; the store is only written when ``ok``."""
    ledger = InventoryLedger(store, material)
    result = ledger.consume(amount, ack_number=ack_number, usage_date=usage_date)

    if result.ok:
        ledger.save()
        logger.info(
            "Stock consumed",
            extra={
                "material": ledger.material.value,
                "amount": str(result.requested),
                "batches_touched": len(result.usages),
            },
        )

    return result


# =====================================================
# DELETE
# =====================================================
@transactional
def delete_batch(
    store: CollectionStore,
    material: MaterialType,
    batch_id: str,
) -> InventoryBatch:
    ledger = InventoryLedger(store, material)
    batch = ledger.delete_batch(batch_id)
    ledger.save()

    logger.info(
        "Inventory batch deleted",
        extra={"material": ledger.material.value, "batch_id": batch_id},
    )
    return batch
