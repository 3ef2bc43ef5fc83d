from fastapi import APIRouter, Depends, Query

from ricemill.core.store import get_store
from ricemill.utils.response import APIResponse, ListData, list_data, success_response

from ricemill.schemas.ledger.trade_schemas import PaymentCreate
from ricemill.schemas.production.by_product_schemas import (
    ByProductPayment,
    ByProductProduction,
    ByProductProductionCreate,
    ByProductSale,
    ByProductSaleCreate,
    ByProductStock,
    ByProductSummary,
)

from ricemill.services.production.by_product_service import (
    by_product_summary,
    create_sale,
    delete_payment,
    delete_production,
    delete_sale,
    list_payments,
    list_productions,
    list_sales,
    record_payment,
    record_production,
    stock_levels,
    update_production,
)

router = APIRouter(
    prefix="/by-products",
    tags=["By-Products"],
)


# =====================================================
# PRODUCTION
# =====================================================
@router.post("/productions", response_model=APIResponse[ByProductProduction])
def record_production_api(payload: ByProductProductionCreate, store=Depends(get_store)):
    production = record_production(store, payload)
    return success_response("By-product production recorded", production)


@router.get("/productions", response_model=APIResponse[ListData[ByProductProduction]])
def list_productions_api(store=Depends(get_store)):
    productions = list_productions(store)
    return success_response("Productions fetched successfully", list_data(productions))


@router.put("/productions/{production_id}", response_model=APIResponse[ByProductProduction])
def update_production_api(
    production_id: str,
    payload: ByProductProductionCreate,
    store=Depends(get_store),
):
    production = update_production(store, production_id, payload)
    return success_response("Production updated successfully", production)


@router.delete("/productions/{production_id}", response_model=APIResponse[ByProductProduction])
def delete_production_api(production_id: str, store=Depends(get_store)):
    production = delete_production(store, production_id)
    return success_response("Production deleted successfully", production)


# =====================================================
# STOCK
# =====================================================
@router.get("/stock", response_model=APIResponse[list[ByProductStock]])
def stock_levels_api(store=Depends(get_store)):
    return success_response("Stock levels fetched successfully", stock_levels(store))


@router.get("/summary", response_model=APIResponse[ByProductSummary])
def summary_api(store=Depends(get_store)):
    return success_response("Summary fetched successfully", by_product_summary(store))


# =====================================================
# SALES
# =====================================================
@router.post("/sales", response_model=APIResponse[ByProductSale])
def create_sale_api(payload: ByProductSaleCreate, store=Depends(get_store)):
    sale = create_sale(store, payload)
    return success_response("Sale recorded successfully", sale)


@router.get("/sales", response_model=APIResponse[ListData[ByProductSale]])
def list_sales_api(store=Depends(get_store)):
    return success_response("Sales fetched successfully", list_data(list_sales(store)))


@router.delete("/sales/{sale_id}", response_model=APIResponse[ByProductSale])
def delete_sale_api(sale_id: str, store=Depends(get_store)):
    sale = delete_sale(store, sale_id)
    return success_response("Sale deleted successfully", sale)


# =====================================================
# PAYMENTS
# =====================================================
@router.post("/sales/{sale_id}/payments", response_model=APIResponse[ByProductPayment])
def record_payment_api(sale_id: str, payload: PaymentCreate, store=Depends(get_store)):
    payment = record_payment(store, sale_id, payload)
    return success_response("Payment recorded successfully", payment)


@router.get("/payments", response_model=APIResponse[ListData[ByProductPayment]])
def list_payments_api(
    sale_id: str | None = Query(None, alias="saleId"),
    store=Depends(get_store),
):
    payments = list_payments(store, sale_id)
    return success_response("Payments fetched successfully", list_data(payments))


@router.delete("/payments/{payment_id}", response_model=APIResponse[ByProductPayment])
def delete_payment_api(payment_id: str, store=Depends(get_store)):
    payment = delete_payment(store, payment_id)
    return success_response("Payment deleted successfully", payment)
