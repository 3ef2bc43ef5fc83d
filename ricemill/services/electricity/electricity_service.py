from datetime import date
from decimal import Decimal
import logging

from ricemill.constants.collections import ELECTRICITY_BILLS
from ricemill.constants.electricity import KWH_PER_ACK
from ricemill.constants.error_codes import ErrorCode
from ricemill.core.exceptions import NotFoundError
from ricemill.models.enums.payment_status import PaymentStatus
from ricemill.schemas.electricity.electricity_schemas import (
    BillPaymentCreate,
    ElectricityBill,
    ElectricityBillCreate,
    ElectricityStats,
)
from ricemill.services.electricity.bill_calculator import (
    compute_bill_from_readings,
    consumption,
)
from ricemill.services.storage.collection_store import CollectionStore, transactional
from ricemill.utils.decimal_utils import parse_non_negative, sum_decimals
from ricemill.utils.ids import new_id

logger = logging.getLogger(__name__)


def _load(store: CollectionStore) -> list[ElectricityBill]:
    return [ElectricityBill.model_validate(r) for r in store.load(ELECTRICITY_BILLS)]


def _save(store: CollectionStore, bills: list[ElectricityBill]) -> None:
    store.save(ELECTRICITY_BILLS, [b.to_document() for b in bills])


def _find(bills: list[ElectricityBill], bill_id: str) -> ElectricityBill:
    for bill in bills:
        if bill.id == bill_id:
            return bill
    raise NotFoundError("Electricity bill not found", ErrorCode.BILL_NOT_FOUND)


# =====================================================
# CREATE / UPDATE
# =====================================================
def build_bill(bill_id: str, payload: ElectricityBillCreate, **extra) -> ElectricityBill:
    # derived figures always come from the raw readings
    breakdown = compute_bill_from_readings(payload)
    return ElectricityBill(
        id=bill_id,
        **payload.model_dump(),
        **breakdown.model_dump(),
        payable_amount=breakdown.bill_amount + payload.manual_adjustment,
        **extra,
    )


@transactional
def create_bill(store: CollectionStore, payload: ElectricityBillCreate) -> ElectricityBill:
    bill = build_bill(new_id(), payload)

    bills = _load(store)
    bills.append(bill)
    _save(store, bills)

    logger.info(
        "Electricity bill recorded",
        extra={
            "bill_id": bill.id,
            "kwh": str(bill.kwh_consumed),
            "amount": str(bill.bill_amount),
        },
    )
    return bill


@transactional
def update_bill(
    store: CollectionStore,
    bill_id: str,
    payload: ElectricityBillCreate,
) -> ElectricityBill:
    bills = _load(store)
    current = _find(bills, bill_id)

    updated = build_bill(
        bill_id,
        payload,
        payment_status=current.payment_status,
        payment_date=current.payment_date,
    )
    _save(store, [updated if b.id == bill_id else b for b in bills])

    logger.info("Electricity bill recalculated", extra={"bill_id": bill_id})
    return updated


@transactional
def mark_bill_paid(
    store: CollectionStore,
    bill_id: str,
    payload: BillPaymentCreate,
) -> ElectricityBill:
    bills = _load(store)
    bill = _find(bills, bill_id)

    updated = bill.model_copy(
        update={
            "payment_status": PaymentStatus.paid,
            "payment_date": payload.payment_date or date.today(),
            "payment_method": payload.payment_method,
        }
    )
    _save(store, [updated if b.id == bill_id else b for b in bills])
    return updated


# =====================================================
# READ / DELETE
# =====================================================
def get_bill(store: CollectionStore, bill_id: str) -> ElectricityBill:
    return _find(_load(store), bill_id)


def list_bills(store: CollectionStore) -> list[ElectricityBill]:
    return _load(store)


@transactional
def delete_bill(store: CollectionStore, bill_id: str) -> ElectricityBill:
    bills = _load(store)
    bill = _find(bills, bill_id)
    _save(store, [b for b in bills if b.id != bill_id])

    logger.info("Electricity bill deleted", extra={"bill_id": bill_id})
    return bill


# =====================================================
# AGGREGATES
# =====================================================
def electricity_stats(store: CollectionStore) -> ElectricityStats:
    bills = _load(store)

    total_kwh = sum_decimals(b.kwh_consumed for b in bills)
    total_kvah = sum_decimals(b.kvah_consumed for b in bills)
    total_amount = sum_decimals(b.payable_amount for b in bills)
    acks = total_kwh / KWH_PER_ACK

    return ElectricityStats(
        bill_count=len(bills),
        total_kwh=total_kwh,
        total_kvah=total_kvah,
        total_bill_amount=total_amount,
        average_power_factor=total_kwh / total_kvah if total_kvah > 0 else None,
        average_cost_per_unit=total_amount / total_kwh if total_kwh > 0 else None,
        cost_per_ack=total_amount / acks if acks > 0 else None,
        pending_amount=sum_decimals(
            b.payable_amount for b in bills if b.payment_status == PaymentStatus.pending
        ),
    )


def live_estimate(store: CollectionStore, current_kwh) -> Decimal | None:
    """Cost of consumption since the last bill at that bill's unit rate."""
    current_kwh = parse_non_negative(current_kwh, "currentKwh")
    bills = _load(store)
    if not bills:
        return None

    last = bills[-1]
    if last.kwh_consumed == 0:
        return None

    rate = last.bill_amount / last.kwh_consumed
    return consumption(last.current_kwh, current_kwh, "Kwh") * rate
