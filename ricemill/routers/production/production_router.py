from fastapi import APIRouter, Depends, Query

from ricemill.constants.production import RiceType
from ricemill.core.store import get_store
from ricemill.utils.response import APIResponse, ListData, list_data, success_response

from ricemill.schemas.production.production_schemas import (
    PaddyPosition,
    PaddyRecord,
    PaddyRecordCreate,
    ProductionPlan,
    ProductionSummary,
    RiceProduction,
    RiceProductionCreate,
)

from ricemill.services.production.rice_production_service import (
    create_production,
    delete_paddy,
    delete_production,
    list_paddy,
    list_productions,
    paddy_position,
    plan_production,
    production_summary,
    receive_paddy,
)

router = APIRouter(
    prefix="/production",
    tags=["Rice Production"],
)


# =====================================================
# PADDY
# =====================================================
@router.post("/paddy", response_model=APIResponse[PaddyRecord])
def receive_paddy_api(payload: PaddyRecordCreate, store=Depends(get_store)):
    record = receive_paddy(store, payload)
    return success_response("Paddy receipt recorded", record)


@router.get("/paddy", response_model=APIResponse[ListData[PaddyRecord]])
def list_paddy_api(store=Depends(get_store)):
    return success_response("Paddy receipts fetched successfully", list_data(list_paddy(store)))


@router.get("/paddy/position", response_model=APIResponse[PaddyPosition])
def paddy_position_api(store=Depends(get_store)):
    return success_response("Paddy position fetched successfully", paddy_position(store))


@router.delete("/paddy/{record_id}", response_model=APIResponse[PaddyRecord])
def delete_paddy_api(record_id: str, store=Depends(get_store)):
    record = delete_paddy(store, record_id)
    return success_response("Paddy record deleted successfully", record)


# =====================================================
# RICE
# =====================================================
@router.get("/plan", response_model=APIResponse[ProductionPlan])
def plan_production_api(
    ack_quantity: int = Query(1, alias="ackQuantity", ge=1),
    rice_type: RiceType = Query(RiceType.BOILED, alias="riceType"),
):
    plan = plan_production(ack_quantity, rice_type)
    return success_response("Production plan calculated", plan)


@router.post("/rice", response_model=APIResponse[RiceProduction])
def create_production_api(payload: RiceProductionCreate, store=Depends(get_store)):
    production = create_production(store, payload)
    return success_response("Production recorded successfully", production)


@router.get("/rice", response_model=APIResponse[ListData[RiceProduction]])
def list_productions_api(
    rice_type: RiceType | None = Query(None, alias="riceType"),
    store=Depends(get_store),
):
    productions = list_productions(store, rice_type)
    return success_response("Productions fetched successfully", list_data(productions))


@router.delete("/rice/{production_id}", response_model=APIResponse[RiceProduction])
def delete_production_api(production_id: str, store=Depends(get_store)):
    production = delete_production(store, production_id)
    return success_response("Production deleted successfully", production)


@router.get("/summary", response_model=APIResponse[ProductionSummary])
def production_summary_api(store=Depends(get_store)):
    return success_response("Production summary fetched successfully", production_summary(store))
