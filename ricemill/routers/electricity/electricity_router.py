from fastapi import APIRouter, Depends

from ricemill.core.store import get_store
from ricemill.utils.response import APIResponse, ListData, list_data, success_response

from ricemill.schemas.electricity.electricity_schemas import (
    BillBreakdown,
    BillPaymentCreate,
    ElectricityBill,
    ElectricityBillCreate,
    ElectricityReadings,
    ElectricityStats,
    LiveEstimate,
    LiveEstimateRequest,
)

from ricemill.services.electricity.bill_calculator import compute_bill_from_readings
from ricemill.services.electricity.electricity_service import (
    create_bill,
    delete_bill,
    electricity_stats,
    get_bill,
    list_bills,
    live_estimate,
    mark_bill_paid,
    update_bill,
)

router = APIRouter(
    prefix="/electricity",
    tags=["Electricity"],
)


# =========================
# CALCULATOR (no storage)
# =========================
@router.post("/calculate", response_model=APIResponse[BillBreakdown])
def calculate_bill_api(payload: ElectricityReadings):
    return success_response("Bill calculated", compute_bill_from_readings(payload))


@router.post("/estimate", response_model=APIResponse[LiveEstimate])
def live_estimate_api(payload: LiveEstimateRequest, store=Depends(get_store)):
    estimate = LiveEstimate(
        current_kwh=payload.current_kwh,
        estimated_amount=live_estimate(store, payload.current_kwh),
    )
    return success_response("Estimate calculated", estimate)


@router.get("/stats", response_model=APIResponse[ElectricityStats])
def electricity_stats_api(store=Depends(get_store)):
    return success_response("Stats fetched successfully", electricity_stats(store))


# =========================
# BILLS
# =========================
@router.post("/bills", response_model=APIResponse[ElectricityBill])
def create_bill_api(payload: ElectricityBillCreate, store=Depends(get_store)):
    return success_response("Bill recorded successfully", create_bill(store, payload))


@router.get("/bills", response_model=APIResponse[ListData[ElectricityBill]])
def list_bills_api(store=Depends(get_store)):
    return success_response("Bills fetched successfully", list_data(list_bills(store)))


@router.get("/bills/{bill_id}", response_model=APIResponse[ElectricityBill])
def get_bill_api(bill_id: str, store=Depends(get_store)):
    return success_response("Bill fetched successfully", get_bill(store, bill_id))


@router.put("/bills/{bill_id}", response_model=APIResponse[ElectricityBill])
def update_bill_api(
    bill_id: str,
    payload: ElectricityBillCreate,
    store=Depends(get_store),
):
    return success_response("Bill updated successfully", update_bill(store, bill_id, payload))


@router.post("/bills/{bill_id}/pay", response_model=APIResponse[ElectricityBill])
def mark_bill_paid_api(
    bill_id: str,
    payload: BillPaymentCreate,
    store=Depends(get_store),
):
    return success_response("Bill marked as paid", mark_bill_paid(store, bill_id, payload))


@router.delete("/bills/{bill_id}", response_model=APIResponse[ElectricityBill])
def delete_bill_api(bill_id: str, store=Depends(get_store)):
    return success_response("Bill deleted successfully", delete_bill(store, bill_id))
