from datetime import date

from fastapi import APIRouter, Depends, Query

from ricemill.core.store import get_store
from ricemill.utils.response import APIResponse, ListData, list_data, success_response

from ricemill.schemas.ledger.trade_schemas import (
    OutstandingEntry,
    OutstandingSummary,
    PaymentCreate,
    Purchase,
    PurchaseCreate,
    PurchasePayment,
    SalesPayment,
    SalesRecord,
    SalesRecordCreate,
)

from ricemill.services.ledger.outstanding_service import (
    outstanding_entries,
    outstanding_summary,
)
from ricemill.services.ledger.trade_service import (
    create_purchase,
    create_sale,
    delete_purchase,
    delete_sale,
    get_purchase,
    get_sale,
    list_purchase_payments,
    list_purchases,
    list_sales,
    list_sales_payments,
    record_purchase_payment,
    record_sales_payment,
)

router = APIRouter(
    prefix="/ledger",
    tags=["Ledger"],
)


# =====================================================
# PURCHASES
# =====================================================
@router.post("/purchases", response_model=APIResponse[Purchase])
def create_purchase_api(payload: PurchaseCreate, store=Depends(get_store)):
    purchase = create_purchase(store, payload)
    return success_response("Purchase recorded successfully", purchase)


@router.get("/purchases", response_model=APIResponse[ListData[Purchase]])
def list_purchases_api(store=Depends(get_store)):
    return success_response("Purchases fetched successfully", list_data(list_purchases(store)))


@router.get("/purchases/{purchase_id}", response_model=APIResponse[Purchase])
def get_purchase_api(purchase_id: str, store=Depends(get_store)):
    return success_response("Purchase fetched successfully", get_purchase(store, purchase_id))


@router.post("/purchases/{purchase_id}/payments", response_model=APIResponse[PurchasePayment])
def record_purchase_payment_api(
    purchase_id: str,
    payload: PaymentCreate,
    store=Depends(get_store),
):
    payment = record_purchase_payment(store, purchase_id, payload)
    return success_response("Payment recorded successfully", payment)


@router.get(
    "/purchases/{purchase_id}/payments",
    response_model=APIResponse[ListData[PurchasePayment]],
)
def list_purchase_payments_api(purchase_id: str, store=Depends(get_store)):
    payments = list_purchase_payments(store, purchase_id)
    return success_response("Payments fetched successfully", list_data(payments))


@router.delete("/purchases/{purchase_id}", response_model=APIResponse[Purchase])
def delete_purchase_api(purchase_id: str, store=Depends(get_store)):
    purchase = delete_purchase(store, purchase_id)
    return success_response("Purchase deleted successfully", purchase)


# =====================================================
# SALES
# =====================================================
@router.post("/sales", response_model=APIResponse[SalesRecord])
def create_sale_api(payload: SalesRecordCreate, store=Depends(get_store)):
    sale = create_sale(store, payload)
    return success_response("Sale recorded successfully", sale)


@router.get("/sales", response_model=APIResponse[ListData[SalesRecord]])
def list_sales_api(store=Depends(get_store)):
    return success_response("Sales fetched successfully", list_data(list_sales(store)))


@router.get("/sales/{sales_id}", response_model=APIResponse[SalesRecord])
def get_sale_api(sales_id: str, store=Depends(get_store)):
    return success_response("Sale fetched successfully", get_sale(store, sales_id))


@router.post("/sales/{sales_id}/payments", response_model=APIResponse[SalesPayment])
def record_sales_payment_api(
    sales_id: str,
    payload: PaymentCreate,
    store=Depends(get_store),
):
    payment = record_sales_payment(store, sales_id, payload)
    return success_response("Payment recorded successfully", payment)


@router.get("/sales/{sales_id}/payments", response_model=APIResponse[ListData[SalesPayment]])
def list_sales_payments_api(sales_id: str, store=Depends(get_store)):
    payments = list_sales_payments(store, sales_id)
    return success_response("Payments fetched successfully", list_data(payments))


@router.delete("/sales/{sales_id}", response_model=APIResponse[SalesRecord])
def delete_sale_api(sales_id: str, store=Depends(get_store)):
    sale = delete_sale(store, sales_id)
    return success_response("Sale deleted successfully", sale)


# =====================================================
# OUTSTANDING
# =====================================================
@router.get("/outstanding", response_model=APIResponse[ListData[OutstandingEntry]])
def outstanding_entries_api(
    store=Depends(get_store),
    today: date | None = Query(None),
):
    entries = outstanding_entries(store, today)
    return success_response("Outstanding entries fetched", list_data(entries))


@router.get("/outstanding/summary", response_model=APIResponse[OutstandingSummary])
def outstanding_summary_api(
    store=Depends(get_store),
    today: date | None = Query(None),
):
    return success_response("Outstanding summary fetched", outstanding_summary(store, today))
