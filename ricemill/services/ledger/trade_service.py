from datetime import date
import logging

from ricemill.constants.collections import (
    PURCHASE_PAYMENTS,
    PURCHASES,
    SALES_PAYMENTS,
    SALES_RECORDS,
)
from ricemill.constants.error_codes import ErrorCode
from ricemill.core.exceptions import AppException, NotFoundError, OverpaymentError
from ricemill.schemas.ledger.trade_schemas import (
    LineItem,
    LineItemCreate,
    PaymentCreate,
    Purchase,
    PurchaseCreate,
    PurchasePayment,
    SalesPayment,
    SalesRecord,
    SalesRecordCreate,
)
from ricemill.services.ledger.balance_calculator import (
    compute_balance,
    compute_due_date,
    compute_payment_status,
    document_totals,
    gst_rate_for_slab,
    line_item_total,
)
from ricemill.services.storage.collection_store import CollectionStore, transactional
from ricemill.utils.ids import new_id

logger = logging.getLogger(__name__)


# =====================================================
# HELPERS
# =====================================================
def _build_items(items: list[LineItemCreate]) -> list[LineItem]:
    if not items:
        raise AppException(400, "At least one line item is required", ErrorCode.EMPTY_ITEMS)

    built = []
    for item in items:
        gst_rate = gst_rate_for_slab(item.gst_slab) if item.gst_slab else item.gst_rate
        figures = line_item_total(item.quantity, item.rate, gst_rate)
        built.append(
            LineItem(
                id=new_id(),
                item_name=item.item_name,
                quantity=item.quantity,
                unit=item.unit,
                rate=item.rate,
                gst_rate=gst_rate,
                **figures,
            )
        )
    return built


def _money_fields(items: list[LineItem], terms: int, issued_on: date) -> dict:
    totals = document_totals(
        [{"amount": i.amount, "gst_amount": i.gst_amount} for i in items]
    )
    return {
        **totals,
        "paid_amount": 0,
        "balance_amount": totals["total_amount"],
        "payment_status": compute_payment_status(totals["total_amount"], 0),
        "payment_terms": terms,
        "due_date": compute_due_date(issued_on, terms),
    }


def _apply_payment(document, amount):
    balance = compute_balance(document.total_amount, document.paid_amount)
    if amount > balance:
        raise OverpaymentError(amount, balance)

    paid = document.paid_amount + amount
    return document.model_copy(
        update={
            "paid_amount": paid,
            "balance_amount": compute_balance(document.total_amount, paid),
            "payment_status": compute_payment_status(document.total_amount, paid),
        }
    )


# =====================================================
# PURCHASES
# =====================================================
def _load_purchases(store: CollectionStore) -> list[Purchase]:
    return [Purchase.model_validate(r) for r in store.load(PURCHASES)]


def _find_purchase(purchases: list[Purchase], purchase_id: str) -> Purchase:
    for purchase in purchases:
        if purchase.id == purchase_id:
            return purchase
    raise NotFoundError("Purchase not found", ErrorCode.PURCHASE_NOT_FOUND)


@transactional
def create_purchase(store: CollectionStore, payload: PurchaseCreate) -> Purchase:
    items = _build_items(payload.items)

    purchase = Purchase(
        id=new_id(),
        bill_number=payload.bill_number,
        bill_date=payload.bill_date,
        vendor_name=payload.vendor_name,
        vendor_gst=payload.vendor_gst,
        vendor_address=payload.vendor_address,
        vendor_phone=payload.vendor_phone,
        category=payload.category,
        items=items,
        notes=payload.notes,
        **_money_fields(items, payload.payment_terms, payload.bill_date),
    )

    purchases = _load_purchases(store)
    purchases.append(purchase)
    store.save(PURCHASES, [p.to_document() for p in purchases])

    logger.info(
        "Purchase recorded",
        extra={"purchase_id": purchase.id, "total": str(purchase.total_amount)},
    )
    return purchase


def get_purchase(store: CollectionStore, purchase_id: str) -> Purchase:
    return _find_purchase(_load_purchases(store), purchase_id)


def list_purchases(store: CollectionStore) -> list[Purchase]:
    return _load_purchases(store)


def list_purchase_payments(
    store: CollectionStore,
    purchase_id: str | None = None,
) -> list[PurchasePayment]:
    payments = [PurchasePayment.model_validate(r) for r in store.load(PURCHASE_PAYMENTS)]
    if purchase_id:
        payments = [p for p in payments if p.purchase_id == purchase_id]
    return payments


@transactional
def record_purchase_payment(
    store: CollectionStore,
    purchase_id: str,
    payload: PaymentCreate,
) -> PurchasePayment:
    purchases = _load_purchases(store)
    purchase = _apply_payment(_find_purchase(purchases, purchase_id), payload.amount)

    payment = PurchasePayment(
        id=new_id(),
        purchase_id=purchase_id,
        amount=payload.amount,
        payment_date=payload.payment_date or date.today(),
        payment_method=payload.payment_method,
        reference_number=payload.reference_number,
        notes=payload.notes,
    )

    payments = list_purchase_payments(store)
    payments.append(payment)

    store.save(
        PURCHASES,
        [(purchase if p.id == purchase_id else p).to_document() for p in purchases],
    )
    store.save(PURCHASE_PAYMENTS, [p.to_document() for p in payments])

    logger.info(
        "Purchase payment recorded",
        extra={
            "purchase_id": purchase_id,
            "amount": str(payment.amount),
            "status": purchase.payment_status.value,
        },
    )
    return payment


@transactional
def delete_purchase(store: CollectionStore, purchase_id: str) -> Purchase:
    purchases = _load_purchases(store)
    purchase = _find_purchase(purchases, purchase_id)

    store.save(PURCHASES, [p.to_document() for p in purchases if p.id != purchase_id])
    store.save(
        PURCHASE_PAYMENTS,
        [
            p.to_document()
            for p in list_purchase_payments(store)
            if p.purchase_id != purchase_id
        ],
    )

    logger.info("Purchase deleted", extra={"purchase_id": purchase_id})
    return purchase


# =====================================================
# SALES
# =====================================================
def _load_sales(store: CollectionStore) -> list[SalesRecord]:
    return [SalesRecord.model_validate(r) for r in store.load(SALES_RECORDS)]


def _find_sale(sales: list[SalesRecord], sales_id: str) -> SalesRecord:
    for sale in sales:
        if sale.id == sales_id:
            return sale
    raise NotFoundError("Sales record not found", ErrorCode.SALE_NOT_FOUND)


@transactional
def create_sale(store: CollectionStore, payload: SalesRecordCreate) -> SalesRecord:
    items = _build_items(payload.items)

    sale = SalesRecord(
        id=new_id(),
        invoice_number=payload.invoice_number,
        invoice_date=payload.invoice_date,
        party_name=payload.party_name,
        party_gst=payload.party_gst,
        party_address=payload.party_address,
        party_phone=payload.party_phone,
        lorry_number=payload.lorry_number,
        items=items,
        notes=payload.notes,
        **_money_fields(items, payload.payment_terms, payload.invoice_date),
    )

    sales = _load_sales(store)
    sales.append(sale)
    store.save(SALES_RECORDS, [s.to_document() for s in sales])

    logger.info(
        "Sale recorded",
        extra={"sales_id": sale.id, "total": str(sale.total_amount)},
    )
    return sale


def get_sale(store: CollectionStore, sales_id: str) -> SalesRecord:
    return _find_sale(_load_sales(store), sales_id)


def list_sales(store: CollectionStore) -> list[SalesRecord]:
    return _load_sales(store)


def list_sales_payments(
    store: CollectionStore,
    sales_id: str | None = None,
) -> list[SalesPayment]:
    payments = [SalesPayment.model_validate(r) for r in store.load(SALES_PAYMENTS)]
    if sales_id:
        payments = [p for p in payments if p.sales_id == sales_id]
    return payments


@transactional
def record_sales_payment(
    store: CollectionStore,
    sales_id: str,
    payload: PaymentCreate,
) -> SalesPayment:
    sales = _load_sales(store)
    sale = _apply_payment(_find_sale(sales, sales_id), payload.amount)

    payment = SalesPayment(
        id=new_id(),
        sales_id=sales_id,
        amount=payload.amount,
        payment_date=payload.payment_date or date.today(),
        payment_method=payload.payment_method,
        reference_number=payload.reference_number,
        notes=payload.notes,
    )

    payments = list_sales_payments(store)
    payments.append(payment)

    store.save(
        SALES_RECORDS,
        [(sale if s.id == sales_id else s).to_document() for s in sales],
    )
    store.save(SALES_PAYMENTS, [p.to_document() for p in payments])

    logger.info(
        "Sales payment recorded",
        extra={
            "sales_id": sales_id,
            "amount": str(payment.amount),
            "status": sale.payment_status.value,
        },
    )
    return payment


@transactional
def delete_sale(store: CollectionStore, sales_id: str) -> SalesRecord:
    sales = _load_sales(store)
    sale = _find_sale(sales, sales_id)

    store.save(SALES_RECORDS, [s.to_document() for s in sales if s.id != sales_id])
    store.save(
        SALES_PAYMENTS,
        [p.to_document() for p in list_sales_payments(store) if p.sales_id != sales_id],
    )

    logger.info("Sales record deleted", extra={"sales_id": sales_id})
    return sale
