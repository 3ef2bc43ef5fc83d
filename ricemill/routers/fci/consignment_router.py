from typing import Dict

from fastapi import APIRouter, Depends, Query

from ricemill.core.store import get_store
from ricemill.models.enums.consignment_status import ConsignmentStatus
from ricemill.utils.response import APIResponse, ListData, list_data, success_response

from ricemill.schemas.fci.consignment_schemas import (
    Consignment,
    ConsignmentCreate,
    ConsignmentSummary,
    ConsignmentUpdate,
    StockCheck,
)

from ricemill.services.fci.consignment_service import (
    consignment_summary,
    create_consignment,
    delete_consignment,
    get_consignment,
    list_consignments,
    stock_availability,
    update_consignment,
)

router = APIRouter(
    prefix="/consignments",
    tags=["FCI Consignments"],
)


# =========================
# CREATE
# =========================
@router.post("/", response_model=APIResponse[Consignment])
def create_consignment_api(
    payload: ConsignmentCreate,
    store=Depends(get_store),
):
    consignment = create_consignment(store, payload)
    return success_response("Consignment created successfully", consignment)


# =========================
# LIST / SUMMARY
# =========================
@router.get("/", response_model=APIResponse[ListData[Consignment]])
def list_consignments_api(
    store=Depends(get_store),
    status: ConsignmentStatus | None = Query(None),
):
    consignments = list_consignments(store, status)
    return success_response("Consignments fetched successfully", list_data(consignments))


@router.get("/summary", response_model=APIResponse[ConsignmentSummary])
def consignment_summary_api(store=Depends(get_store)):
    return success_response("Summary fetched successfully", consignment_summary(store))


@router.get("/stock-check", response_model=APIResponse[Dict[str, StockCheck]])
def stock_check_api(store=Depends(get_store)):
    return success_response("Stock checked", stock_availability(store))


# =========================
# GET BY ID
# =========================
@router.get("/{consignment_id}", response_model=APIResponse[Consignment])
def get_consignment_api(
    consignment_id: str,
    store=Depends(get_store),
):
    consignment = get_consignment(store, consignment_id)
    return success_response("Consignment fetched successfully", consignment)


# =========================
# UPDATE
# =========================
@router.patch("/{consignment_id}", response_model=APIResponse[Consignment])
def update_consignment_api(
    consignment_id: str,
    payload: ConsignmentUpdate,
    store=Depends(get_store),
):
    consignment = update_consignment(store, consignment_id, payload)
    return success_response("Consignment updated successfully", consignment)


# =========================
# DELETE (restores stock)
# =========================
@router.delete("/{consignment_id}", response_model=APIResponse[Consignment])
def delete_consignment_api(
    consignment_id: str,
    store=Depends(get_store),
):
    consignment = delete_consignment(store, consignment_id)
    return success_response("Consignment deleted and stock restored", consignment)
