from fastapi import APIRouter, Depends, Query

from ricemill.core.store import get_store
from ricemill.utils.response import APIResponse, ListData, list_data, success_response

from ricemill.schemas.ledger.freight_schemas import (
    FreightPaymentCreate,
    LorryFreight,
    LorryFreightCreate,
)

from ricemill.services.ledger.freight_service import (
    create_freight,
    delete_freight,
    get_freight,
    list_freights,
    record_freight_payment,
)

router = APIRouter(
    prefix="/ledger/freights",
    tags=["Lorry Freight"],
)


@router.post("/", response_model=APIResponse[LorryFreight])
def create_freight_api(payload: LorryFreightCreate, store=Depends(get_store)):
    freight = create_freight(store, payload)
    return success_response("Freight recorded successfully", freight)


@router.get("/", response_model=APIResponse[ListData[LorryFreight]])
def list_freights_api(
    store=Depends(get_store),
    consignment_id: str | None = Query(None),
):
    freights = list_freights(store, consignment_id)
    return success_response("Freights fetched successfully", list_data(freights))


@router.get("/{freight_id}", response_model=APIResponse[LorryFreight])
def get_freight_api(freight_id: str, store=Depends(get_store)):
    return success_response("Freight fetched successfully", get_freight(store, freight_id))


@router.post("/{freight_id}/payments", response_model=APIResponse[LorryFreight])
def record_freight_payment_api(
    freight_id: str,
    payload: FreightPaymentCreate,
    store=Depends(get_store),
):
    freight = record_freight_payment(store, freight_id, payload)
    return success_response("Freight payment recorded", freight)


@router.delete("/{freight_id}", response_model=APIResponse[LorryFreight])
def delete_freight_api(freight_id: str, store=Depends(get_store)):
    freight = delete_freight(store, freight_id)
    return success_response("Freight deleted successfully", freight)
