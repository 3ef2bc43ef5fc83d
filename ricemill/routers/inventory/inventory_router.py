from fastapi import APIRouter, Depends, Query

from ricemill.constants.materials import MaterialType
from ricemill.core.exceptions import InsufficientStockError
from ricemill.core.store import get_store
from ricemill.utils.response import APIResponse, ListData, list_data, success_response

from ricemill.schemas.inventory.inventory_batch_schemas import (
    ConsumeRequest,
    ConsumeResult,
    InventoryBatch,
    InventoryBatchCreate,
    LedgerSummary,
    StockUsage,
)

from ricemill.services.inventory.inventory_service import (
    consume_stock,
    delete_batch,
    ledger_summary,
    list_batches,
    list_usage,
    receive_stock,
)

router = APIRouter(
    prefix="/inventory",
    tags=["Inventory"],
)


# =========================
# RECEIVE
# =========================
@router.post("/{material}/batches", response_model=APIResponse[InventoryBatch])
def receive_stock_api(
    material: MaterialType,
    payload: InventoryBatchCreate,
    store=Depends(get_store),
):
    batch = receive_stock(store, material, payload)
    return success_response("Stock received successfully", batch)


# =========================
# LIST
# =========================
@router.get("/{material}/batches", response_model=APIResponse[ListData[InventoryBatch]])
def list_batches_api(
    material: MaterialType,
    store=Depends(get_store),
):
    batches = list_batches(store, material)
    return success_response("Batches fetched successfully", list_data(batches))


@router.get("/{material}/usage", response_model=APIResponse[ListData[StockUsage]])
def list_usage_api(
    material: MaterialType,
    store=Depends(get_store),
    ack_number: str | None = Query(None),
    batch_id: str | None = Query(None),
):
    usages = list_usage(store, material, ack_number=ack_number, batch_id=batch_id)
    return success_response("Usage fetched successfully", list_data(usages))


@router.get("/{material}/summary", response_model=APIResponse[LedgerSummary])
def ledger_summary_api(
    material: MaterialType,
    store=Depends(get_store),
):
    return success_response("Summary fetched successfully", ledger_summary(store, material))


# =========================
# CONSUME
# =========================
@router.post("/{material}/consume", response_model=APIResponse[ConsumeResult])
def consume_stock_api(
    material: MaterialType,
    payload: ConsumeRequest,
    store=Depends(get_store),
):
    result = consume_stock(
        store,
        material,
        payload.amount,
        ack_number=payload.ack_number,
        usage_date=payload.usage_date,
    )
    if not result.ok:
        raise InsufficientStockError(
            {material.value: (result.requested, result.available)}
        )
    return success_response("Stock consumed successfully", result)


# =========================
# DELETE
# =========================
@router.delete("/{material}/batches/{batch_id}", response_model=APIResponse[InventoryBatch])
def delete_batch_api(
    material: MaterialType,
    batch_id: str,
    store=Depends(get_store),
):
    batch = delete_batch(store, material, batch_id)
    return success_response("Batch deleted successfully", batch)
