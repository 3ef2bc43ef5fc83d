from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
import logging

from ricemill.constants.collections import (
    BY_PRODUCT_PAYMENTS,
    BY_PRODUCT_PRODUCTIONS,
    BY_PRODUCT_SALES,
)
from ricemill.constants.error_codes import ErrorCode
from ricemill.constants.production import (
    BY_PRODUCT_NAMES,
    CORRELATION_WINDOW_DAYS,
    ByProductType,
    RiceType,
)
from ricemill.core.exceptions import (
    AppException,
    InsufficientStockError,
    NotFoundError,
    OverpaymentError,
)
from ricemill.models.enums.payment_status import PaymentStatus
from ricemill.schemas.ledger.trade_schemas import PaymentCreate
from ricemill.schemas.production.by_product_schemas import (
    ByProductPayment,
    ByProductProduction,
    ByProductProductionCreate,
    ByProductSale,
    ByProductSaleCreate,
    ByProductSaleItem,
    ByProductStock,
    ByProductSummary,
    CorrelatedAcks,
)
from ricemill.services.ledger.balance_calculator import (
    compute_balance,
    compute_due_date,
    document_totals,
    line_item_total,
)
from ricemill.services.production.rice_production_service import (
    ack_count,
    productions_between,
)
from ricemill.services.storage.collection_store import CollectionStore, transactional
from ricemill.utils.decimal_utils import ZERO, sum_decimals
from ricemill.utils.ids import new_id

logger = logging.getLogger(__name__)


# =====================================================
# SHARED LOADERS
# =====================================================
def _load_productions(store: CollectionStore) -> list[ByProductProduction]:
    return [ByProductProduction.model_validate(r) for r in store.load(BY_PRODUCT_PRODUCTIONS)]


def _load_sales(store: CollectionStore) -> list[ByProductSale]:
    return [ByProductSale.model_validate(r) for r in store.load(BY_PRODUCT_SALES)]


def _load_payments(store: CollectionStore) -> list[ByProductPayment]:
    return [ByProductPayment.model_validate(r) for r in store.load(BY_PRODUCT_PAYMENTS)]


def _find(records, record_id: str, what: str):
    for record in records:
        if record.id == record_id:
            return record
    raise NotFoundError(f"{what} not found", ErrorCode.BY_PRODUCT_ENTRY_NOT_FOUND)


def _sale_status(total: Decimal, paid: Decimal) -> PaymentStatus:
    # a settled balance wins; otherwise any money received is partial
    if compute_balance(total, paid) <= 0:
        return PaymentStatus.paid
    if paid > 0:
        return PaymentStatus.partial
    return PaymentStatus.pending


# =====================================================
# PRODUCTION
# =====================================================
def correlated_acks(store: CollectionStore, production_date: date) -> CorrelatedAcks:
    """ACKs of rice milled within the correlation window of a date."""
    window = timedelta(days=CORRELATION_WINDOW_DAYS)
    acks = {RiceType.BOILED: 0, RiceType.RAW: 0}

    for production in productions_between(
        store, production_date - window, production_date + window
    ):
        acks[production.rice_type] += ack_count(production)

    return CorrelatedAcks(boiled_acks=acks[RiceType.BOILED], raw_acks=acks[RiceType.RAW])


def _production_record(
    store: CollectionStore,
    production_id: str,
    payload: ByProductProductionCreate,
) -> ByProductProduction:
    acks = correlated_acks(store, payload.production_date).total
    return ByProductProduction(
        id=production_id,
        production_date=payload.production_date,
        product_type=payload.product_type,
        product_name=BY_PRODUCT_NAMES[payload.product_type],
        quantity=payload.quantity,
        correlated_acks=acks,
        yield_per_ack=payload.quantity / acks if acks else ZERO,
        notes=payload.notes,
    )


@transactional
def record_production(
    store: CollectionStore,
    payload: ByProductProductionCreate,
) -> ByProductProduction:
    production = _production_record(store, new_id(), payload)

    productions = _load_productions(store)
    productions.append(production)
    store.save(BY_PRODUCT_PRODUCTIONS, [p.to_document() for p in productions])

    logger.info(
        "By-product production recorded",
        extra={
            "production_id": production.id,
            "product_type": production.product_type.value,
            "quantity": str(production.quantity),
            "correlated_acks": production.correlated_acks,
        },
    )
    return production


@transactional
def update_production(
    store: CollectionStore,
    production_id: str,
    payload: ByProductProductionCreate,
) -> ByProductProduction:
    productions = _load_productions(store)
    _find(productions, production_id, "By-product production")

    # the ACK correlation follows the (possibly new) date
    updated = _production_record(store, production_id, payload)
    store.save(
        BY_PRODUCT_PRODUCTIONS,
        [(updated if p.id == production_id else p).to_document() for p in productions],
    )
    return updated


def list_productions(store: CollectionStore) -> list[ByProductProduction]:
    return _load_productions(store)


@transactional
def delete_production(store: CollectionStore, production_id: str) -> ByProductProduction:
    productions = _load_productions(store)
    production = _find(productions, production_id, "By-product production")
    store.save(
        BY_PRODUCT_PRODUCTIONS,
        [p.to_document() for p in productions if p.id != production_id],
    )

    logger.info("By-product production deleted", extra={"production_id": production_id})
    return production


# =====================================================
# STOCK
# =====================================================
def _stock_levels(
    productions: list[ByProductProduction],
    sales: list[ByProductSale],
) -> dict[ByProductType, ByProductStock]:
    stock = {
        product_type: ByProductStock(product_type=product_type, product_name=name)
        for product_type, name in BY_PRODUCT_NAMES.items()
    }

    for production in productions:
        level = stock[production.product_type]
        level.total_produced += production.quantity
        level.current_stock += production.quantity

    for sale in sales:
        for item in sale.items:
            level = stock[item.product_type]
            level.total_sold += item.quantity
            level.current_stock -= item.quantity
            level.total_revenue += item.total_amount
            if level.last_sale_date is None or sale.sale_date > level.last_sale_date:
                level.last_sale_date = sale.sale_date

    for level in stock.values():
        if level.total_sold > 0:
            level.average_rate = level.total_revenue / level.total_sold

    return stock


def stock_levels(store: CollectionStore) -> list[ByProductStock]:
    return list(_stock_levels(_load_productions(store), _load_sales(store)).values())


# =====================================================
# SALES
# =====================================================
def _build_items(items) -> list[ByProductSaleItem]:
    if not items:
        raise AppException(400, "At least one line item is required", ErrorCode.EMPTY_ITEMS)

    built = []
    for item in items:
        figures = line_item_total(item.quantity, item.rate, item.gst_rate)
        built.append(
            ByProductSaleItem(
                id=new_id(),
                product_type=item.product_type,
                product_name=BY_PRODUCT_NAMES[item.product_type],
                quantity=item.quantity,
                rate=item.rate,
                gst_rate=item.gst_rate,
                **figures,
            )
        )
    return built


@transactional
def create_sale(store: CollectionStore, payload: ByProductSaleCreate) -> ByProductSale:
    sales = _load_sales(store)
    stock = _stock_levels(_load_productions(store), sales)

    # two lines of one product draw on the same stock
    requested: dict[ByProductType, Decimal] = defaultdict(Decimal)
    for item in payload.items:
        requested[item.product_type] += item.quantity

    shortfalls = {
        product_type.value: (quantity, stock[product_type].current_stock)
        for product_type, quantity in requested.items()
        if quantity > stock[product_type].current_stock
    }
    if shortfalls:
        logger.info(
            "By-product sale refused: insufficient stock",
            extra={"invoice_number": payload.invoice_number, "products": sorted(shortfalls)},
        )
        raise InsufficientStockError(shortfalls)

    items = _build_items(payload.items)
    totals = document_totals(
        [{"amount": i.amount, "gst_amount": i.gst_amount} for i in items]
    )

    sale = ByProductSale(
        id=new_id(),
        sale_date=payload.sale_date,
        invoice_number=payload.invoice_number,
        party_name=payload.party_name,
        party_phone=payload.party_phone,
        party_address=payload.party_address,
        items=items,
        **totals,
        paid_amount=ZERO,
        balance_amount=totals["total_amount"],
        payment_status=PaymentStatus.pending,
        payment_terms=payload.payment_terms,
        due_date=compute_due_date(payload.sale_date, payload.payment_terms),
        notes=payload.notes,
    )
    sales.append(sale)
    store.save(BY_PRODUCT_SALES, [s.to_document() for s in sales])

    logger.info(
        "By-product sale recorded",
        extra={"sale_id": sale.id, "total": str(sale.total_amount)},
    )
    return sale


def list_sales(store: CollectionStore) -> list[ByProductSale]:
    return _load_sales(store)


@transactional
def delete_sale(store: CollectionStore, sale_id: str) -> ByProductSale:
    sales = _load_sales(store)
    sale = _find(sales, sale_id, "By-product sale")

    store.save(BY_PRODUCT_SALES, [s.to_document() for s in sales if s.id != sale_id])
    store.save(
        BY_PRODUCT_PAYMENTS,
        [p.to_document() for p in _load_payments(store) if p.sale_id != sale_id],
    )

    logger.info("By-product sale deleted", extra={"sale_id": sale_id})
    return sale


# =====================================================
# PAYMENTS
# =====================================================
def _with_paid(sale: ByProductSale, paid: Decimal) -> ByProductSale:
    return sale.model_copy(
        update={
            "paid_amount": paid,
            "balance_amount": compute_balance(sale.total_amount, paid),
            "payment_status": _sale_status(sale.total_amount, paid),
        }
    )


@transactional
def record_payment(
    store: CollectionStore,
    sale_id: str,
    payload: PaymentCreate,
) -> ByProductPayment:
    sales = _load_sales(store)
    sale = _find(sales, sale_id, "By-product sale")

    if payload.amount > sale.balance_amount:
        raise OverpaymentError(payload.amount, sale.balance_amount)

    updated = _with_paid(sale, sale.paid_amount + payload.amount)
    payment = ByProductPayment(
        id=new_id(),
        sale_id=sale_id,
        party_name=sale.party_name,
        amount=payload.amount,
        payment_date=payload.payment_date or date.today(),
        payment_method=payload.payment_method,
        reference_number=payload.reference_number,
        notes=payload.notes,
    )

    payments = _load_payments(store)
    payments.append(payment)
    store.save(
        BY_PRODUCT_SALES,
        [(updated if s.id == sale_id else s).to_document() for s in sales],
    )
    store.save(BY_PRODUCT_PAYMENTS, [p.to_document() for p in payments])

    logger.info(
        "By-product payment recorded",
        extra={
            "sale_id": sale_id,
            "amount": str(payment.amount),
            "status": updated.payment_status.value,
        },
    )
    return payment


def list_payments(store: CollectionStore, sale_id: str | None = None) -> list[ByProductPayment]:
    payments = _load_payments(store)
    if sale_id:
        payments = [p for p in payments if p.sale_id == sale_id]
    return payments


@transactional
def delete_payment(store: CollectionStore, payment_id: str) -> ByProductPayment:
    payments = _load_payments(store)
    payment = _find(payments, payment_id, "By-product payment")

    # the sale may already be gone; then only the payment goes
    sales = _load_sales(store)
    store.save(
        BY_PRODUCT_SALES,
        [
            (_with_paid(s, s.paid_amount - payment.amount) if s.id == payment.sale_id else s)
            .to_document()
            for s in sales
        ],
    )
    store.save(
        BY_PRODUCT_PAYMENTS,
        [p.to_document() for p in payments if p.id != payment_id],
    )

    logger.info("By-product payment deleted", extra={"payment_id": payment_id})
    return payment


# =====================================================
# SUMMARY
# =====================================================
def by_product_summary(
    store: CollectionStore,
    today: date | None = None,
) -> ByProductSummary:
    today = today or date.today()
    productions = _load_productions(store)
    sales = _load_sales(store)
    stock = _stock_levels(productions, sales)

    total_revenue = sum_decimals(s.total_amount for s in sales)
    total_paid = sum_decimals(p.amount for p in _load_payments(store))
    yields = [p.yield_per_ack for p in productions if p.correlated_acks > 0]

    return ByProductSummary(
        total_revenue=total_revenue,
        total_paid=total_paid,
        pending_receivables=total_revenue - total_paid,
        stock_value=sum_decimals(s.current_stock * s.average_rate for s in stock.values()),
        overdue_sales=sum(1 for s in sales if s.balance_amount > 0 and s.due_date < today),
        products_in_stock=sum(1 for s in stock.values() if s.current_stock > 0),
        average_yield_per_ack=sum_decimals(yields) / len(yields) if yields else None,
    )
