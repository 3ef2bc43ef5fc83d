from datetime import date
from decimal import Decimal

import pytest

from ricemill.constants.collections import BY_PRODUCT_PAYMENTS, BY_PRODUCT_SALES
from ricemill.constants.production import ByProductType, RiceType
from ricemill.core.exceptions import (
    InsufficientStockError,
    NotFoundError,
    OverpaymentError,
)
from ricemill.models.enums.payment_status import PaymentStatus
from ricemill.schemas.ledger.trade_schemas import PaymentCreate
from ricemill.schemas.production.by_product_schemas import (
    ByProductProductionCreate,
    ByProductSaleCreate,
    ByProductSaleItemCreate,
)
from ricemill.schemas.production.production_schemas import (
    PaddyRecordCreate,
    RiceProductionCreate,
)
from ricemill.services.production.by_product_service import (
    by_product_summary,
    correlated_acks,
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
from ricemill.services.production.rice_production_service import (
    create_production,
    receive_paddy,
)


def mill(store, on, acks=1, rice_type=RiceType.BOILED):
    return create_production(
        store,
        RiceProductionCreate(ack_quantity=acks, rice_type=rice_type, production_date=on),
    )


def produce(store, product_type, quantity, on=date(2025, 1, 1)):
    return record_production(
        store,
        ByProductProductionCreate(
            production_date=on,
            product_type=product_type,
            quantity=quantity,
        ),
    )


def sell(store, *lines, on=date(2025, 3, 1), terms=30):
    return create_sale(
        store,
        ByProductSaleCreate(
            sale_date=on,
            invoice_number="BP-001",
            party_name="Lakshmi Feeds",
            items=[
                ByProductSaleItemCreate(product_type=t, quantity=q, rate=r)
                for t, q, r in lines
            ],
            payment_terms=terms,
        ),
    )


def pay(store, sale_id, amount):
    return record_payment(
        store,
        sale_id,
        PaymentCreate(amount=amount, payment_date=date(2025, 3, 10)),
    )


@pytest.fixture
def milled(store):
    receive_paddy(store, PaddyRecordCreate(date=date(2025, 1, 20), total_quintals=3000))
    mill(store, date(2025, 2, 1), acks=2)
    mill(store, date(2025, 2, 6), rice_type=RiceType.RAW)
    mill(store, date(2025, 2, 20))
    return store


# -------------------------
# PRODUCTION
# -------------------------
def test_acks_within_a_week_feed_the_yield(milled):
    acks = correlated_acks(milled, date(2025, 2, 5))
    assert acks.boiled_acks == 2
    assert acks.raw_acks == 1

    husk = produce(milled, ByProductType.HUSK, 30, on=date(2025, 2, 5))

    assert husk.product_name == "Rice Husk"
    assert husk.correlated_acks == 3
    assert husk.yield_per_ack == 10
    assert by_product_summary(milled).average_yield_per_ack == 10


def test_production_without_nearby_rice_has_no_yield(milled):
    ash = produce(milled, ByProductType.ASH, 5, on=date(2025, 3, 20))

    assert ash.correlated_acks == 0
    assert ash.yield_per_ack == 0
    assert by_product_summary(milled).average_yield_per_ack is None


def test_update_follows_the_new_date(milled):
    husk = produce(milled, ByProductType.HUSK, 30, on=date(2025, 2, 5))

    updated = update_production(
        milled,
        husk.id,
        ByProductProductionCreate(
            production_date=date(2025, 2, 20),
            product_type=ByProductType.HUSK,
            quantity=30,
        ),
    )

    assert updated.id == husk.id
    assert updated.correlated_acks == 1
    assert updated.yield_per_ack == 30
    assert [p.correlated_acks for p in list_productions(milled)] == [1]


def test_delete_production(store):
    husk = produce(store, ByProductType.HUSK, 10)

    delete_production(store, husk.id)

    assert list_productions(store) == []
    with pytest.raises(NotFoundError):
        delete_production(store, husk.id)


# -------------------------
# STOCK / SALES
# -------------------------
def test_sale_draws_stock_and_sets_average_rate(store):
    produce(store, ByProductType.HUSK, 100)
    produce(store, ByProductType.BRAN_BOILED, 50)

    sale = sell(store, (ByProductType.HUSK, 40, 500))

    assert sale.subtotal == 20000
    assert sale.gst_amount == 1000
    assert sale.total_amount == 21000
    assert sale.balance_amount == 21000
    assert sale.payment_status == PaymentStatus.pending
    assert sale.due_date == date(2025, 3, 31)
    assert sale.items[0].product_name == "Rice Husk"

    levels = {s.product_type: s for s in stock_levels(store)}
    husk = levels[ByProductType.HUSK]
    assert husk.total_produced == 100
    assert husk.total_sold == 40
    assert husk.current_stock == 60
    assert husk.total_revenue == 21000
    assert husk.average_rate == 525
    assert husk.last_sale_date == date(2025, 3, 1)
    assert levels[ByProductType.BRAN_BOILED].current_stock == 50
    assert levels[ByProductType.ASH].current_stock == 0


def test_lines_of_one_product_share_its_stock(store):
    produce(store, ByProductType.HUSK, 100)

    with pytest.raises(InsufficientStockError) as exc:
        sell(store, (ByProductType.HUSK, 60, 500), (ByProductType.HUSK, 50, 480))

    assert exc.value.shortfalls == {"husk": (Decimal("110"), Decimal("100"))}
    assert list_sales(store) == []


def test_selling_unproduced_by_product_is_refused(store):
    with pytest.raises(InsufficientStockError) as exc:
        sell(store, (ByProductType.PARAM, 1, 900))

    assert exc.value.available("param") == 0
    assert store.load(BY_PRODUCT_SALES) == []


# -------------------------
# PAYMENTS
# -------------------------
def test_payments_settle_the_sale(store):
    produce(store, ByProductType.HUSK, 100)
    sale = sell(store, (ByProductType.HUSK, 40, 500))

    first = pay(store, sale.id, 10000)
    assert first.party_name == "Lakshmi Feeds"
    assert list_sales(store)[0].payment_status == PaymentStatus.partial

    pay(store, sale.id, 11000)
    settled = list_sales(store)[0]
    assert settled.balance_amount == 0
    assert settled.payment_status == PaymentStatus.paid

    with pytest.raises(OverpaymentError):
        pay(store, sale.id, 1)
    assert len(list_payments(store, sale.id)) == 2


def test_deleting_payment_reopens_balance(store):
    produce(store, ByProductType.HUSK, 100)
    sale = sell(store, (ByProductType.HUSK, 40, 500))
    first = pay(store, sale.id, 10000)
    pay(store, sale.id, 11000)

    delete_payment(store, first.id)

    reopened = list_sales(store)[0]
    assert reopened.paid_amount == 11000
    assert reopened.balance_amount == 10000
    assert reopened.payment_status == PaymentStatus.partial
    with pytest.raises(NotFoundError):
        delete_payment(store, first.id)


def test_deleting_sale_removes_its_payments(store):
    produce(store, ByProductType.HUSK, 100)
    sale = sell(store, (ByProductType.HUSK, 40, 500))
    pay(store, sale.id, 5000)

    delete_sale(store, sale.id)

    assert list_sales(store) == []
    assert store.load(BY_PRODUCT_PAYMENTS) == []
    husk = {s.product_type: s for s in stock_levels(store)}[ByProductType.HUSK]
    assert husk.current_stock == 100


# -------------------------
# SUMMARY
# -------------------------
def test_summary_counts_overdue_and_stock_value(store):
    produce(store, ByProductType.HUSK, 100)
    produce(store, ByProductType.BRAN_BOILED, 50)
    sale = sell(store, (ByProductType.HUSK, 40, 500))
    pay(store, sale.id, 10000)

    summary = by_product_summary(store, today=date(2025, 4, 15))

    assert summary.total_revenue == 21000
    assert summary.total_paid == 10000
    assert summary.pending_receivables == 11000
    assert summary.stock_value == 60 * 525
    assert summary.overdue_sales == 1
    assert summary.products_in_stock == 2

    assert by_product_summary(store, today=date(2025, 3, 15)).overdue_sales == 0
