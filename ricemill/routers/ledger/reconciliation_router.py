from fastapi import APIRouter, Depends, Query

from ricemill.core.store import get_store
from ricemill.models.enums.reconciliation_status import ReconciliationStatus
from ricemill.utils.response import APIResponse, ListData, list_data, success_response

from ricemill.schemas.ledger.reconciliation_schemas import (
    ReconcileRequest,
    ReconciliationCreate,
    ReconciliationRecord,
    ReconciliationSummary,
)

from ricemill.services.ledger.reconciliation_service import (
    create_center,
    delete_reconciliation,
    list_reconciliations,
    reconcile,
    reconciliation_summary,
    set_status,
)

router = APIRouter(
    prefix="/reconciliations",
    tags=["Reconciliation"],
)


@router.post("/", response_model=APIResponse[ReconciliationRecord])
def create_center_api(payload: ReconciliationCreate, store=Depends(get_store)):
    record = create_center(store, payload)
    return success_response("Center added successfully", record)


@router.get("/", response_model=APIResponse[ListData[ReconciliationRecord]])
def list_reconciliations_api(store=Depends(get_store)):
    records = list_reconciliations(store)
    return success_response("Reconciliations fetched successfully", list_data(records))


@router.get("/summary", response_model=APIResponse[ReconciliationSummary])
def reconciliation_summary_api(store=Depends(get_store)):
    return success_response("Summary fetched successfully", reconciliation_summary(store))


@router.post("/{record_id}/reconcile", response_model=APIResponse[ReconciliationRecord])
def reconcile_api(
    record_id: str,
    payload: ReconcileRequest,
    store=Depends(get_store),
):
    record = reconcile(store, record_id, payload)
    return success_response("Quintals reconciled", record)


@router.patch("/{record_id}/status", response_model=APIResponse[ReconciliationRecord])
def set_status_api(
    record_id: str,
    status: ReconciliationStatus = Query(...),
    notes: str | None = Query(None),
    store=Depends(get_store),
):
    record = set_status(store, record_id, status, notes)
    return success_response("Status updated", record)


@router.delete("/{record_id}", response_model=APIResponse[ReconciliationRecord])
def delete_reconciliation_api(record_id: str, store=Depends(get_store)):
    record = delete_reconciliation(store, record_id)
    return success_response("Reconciliation deleted successfully", record)
