from decimal import Decimal
import logging

from ricemill.constants.collections import FCI_CONSIGNMENTS, LORRY_FREIGHTS
from ricemill.constants.error_codes import ErrorCode
from ricemill.constants.fci import BRAN_CONSIGNMENT_MT, RICE_CONSIGNMENT_MT
from ricemill.core.exceptions import NotFoundError, OverpaymentError
from ricemill.models.enums.payment_status import FreightPaymentStatus
from ricemill.schemas.fci.consignment_schemas import Consignment
from ricemill.schemas.ledger.freight_schemas import (
    FreightDeduction,
    FreightFigures,
    FreightPaymentCreate,
    LorryFreight,
    LorryFreightCreate,
)
from ricemill.services.storage.collection_store import CollectionStore, transactional
from ricemill.utils.decimal_utils import ZERO, parse_non_negative, sum_decimals
from ricemill.utils.ids import new_id

logger = logging.getLogger(__name__)


# =====================================================
# COMPUTATION
# =====================================================
def freight_payment_status(balance: Decimal, advance: Decimal) -> FreightPaymentStatus:
    if balance <= 0:
        return FreightPaymentStatus.fully_paid
    if advance > 0:
        return FreightPaymentStatus.advance_paid
    return FreightPaymentStatus.pending


def compute_freight(
    freight_per_mt,
    deductions=(),
    advance_paid=0,
    *,
    is_bran_consignment: bool = False,
) -> FreightFigures:
    """Freight for one lorry: 58 MT of rice, or 29 MT for a bran load."""
    rate = parse_non_negative(freight_per_mt, "freightPerMT")
    advance = parse_non_negative(advance_paid, "advancePaid")
    total_deductions = sum_decimals(
        parse_non_negative(amount, "deduction") for amount in deductions
    )

    quantity = Decimal(BRAN_CONSIGNMENT_MT if is_bran_consignment else RICE_CONSIGNMENT_MT)
    gross = quantity * rate
    net = gross - total_deductions
    balance = net - advance

    return FreightFigures(
        quantity_mt=quantity,
        gross_freight_amount=gross,
        total_deductions=total_deductions,
        net_freight_amount=net,
        balance_amount=balance,
        payment_status=freight_payment_status(balance, advance),
    )


# =====================================================
# LOADERS
# =====================================================
def _load_freights(store: CollectionStore) -> list[LorryFreight]:
    return [LorryFreight.model_validate(r) for r in store.load(LORRY_FREIGHTS)]


def _save_freights(store: CollectionStore, freights: list[LorryFreight]) -> None:
    store.save(LORRY_FREIGHTS, [f.to_document() for f in freights])


def _find(freights: list[LorryFreight], freight_id: str) -> LorryFreight:
    for freight in freights:
        if freight.id == freight_id:
            return freight
    raise NotFoundError("Lorry freight not found", ErrorCode.FREIGHT_NOT_FOUND)


def _consignment(store: CollectionStore, consignment_id: str) -> Consignment | None:
    for record in store.load(FCI_CONSIGNMENTS):
        if record.get("id") == consignment_id:
            return Consignment.model_validate(record)
    return None


# =====================================================
# CREATE
# =====================================================
@transactional
def create_freight(store: CollectionStore, payload: LorryFreightCreate) -> LorryFreight:
    deductions = [
        FreightDeduction(id=new_id(), description=d.description, amount=d.amount)
        for d in payload.deductions
        if d.description
    ]
    figures = compute_freight(
        payload.freight_per_mt,
        [d.amount for d in deductions],
        payload.advance_paid,
        is_bran_consignment=payload.is_bran_consignment,
    )

    consignment = _consignment(store, payload.consignment_id)
    if consignment is None:
        # kept as a dangling reference; reported by the reference index
        logger.warning(
            "Freight recorded for unknown consignment",
            extra={"consignment_id": payload.consignment_id},
        )

    freight = LorryFreight(
        id=new_id(),
        consignment_id=payload.consignment_id,
        ack_number=consignment.ack_number if consignment else None,
        lorry_number=payload.lorry_number or (consignment.lorry_number if consignment else None),
        transporter_name=payload.transporter_name,
        quantity_mt=figures.quantity_mt,
        freight_per_mt=payload.freight_per_mt,
        gross_freight_amount=figures.gross_freight_amount,
        deductions=deductions,
        net_freight_amount=figures.net_freight_amount,
        advance_paid=payload.advance_paid,
        balance_amount=figures.balance_amount,
        dispatch_date=payload.dispatch_date
        or (consignment.consignment_date if consignment else None),
        payment_status=figures.payment_status,
        is_bran_consignment=payload.is_bran_consignment,
        notes=payload.notes,
    )

    freights = _load_freights(store)
    freights.append(freight)
    _save_freights(store, freights)

    logger.info(
        "Lorry freight recorded",
        extra={
            "freight_id": freight.id,
            "consignment_id": freight.consignment_id,
            "net": str(freight.net_freight_amount),
        },
    )
    return freight


# =====================================================
# READ
# =====================================================
def get_freight(store: CollectionStore, freight_id: str) -> LorryFreight:
    return _find(_load_freights(store), freight_id)


def list_freights(
    store: CollectionStore,
    consignment_id: str | None = None,
) -> list[LorryFreight]:
    freights = _load_freights(store)
    if consignment_id:
        freights = [f for f in freights if f.consignment_id == consignment_id]
    return freights


# =====================================================
# PAYMENT
# =====================================================
@transactional
def record_freight_payment(
    store: CollectionStore,
    freight_id: str,
    payload: FreightPaymentCreate,
) -> LorryFreight:
    freights = _load_freights(store)
    freight = _find(freights, freight_id)

    if payload.amount > max(freight.balance_amount, ZERO):
        raise OverpaymentError(payload.amount, freight.balance_amount)

    advance = freight.advance_paid + payload.amount
    balance = freight.net_freight_amount - advance
    updated = freight.model_copy(
        update={
            "advance_paid": advance,
            "balance_amount": balance,
            "payment_status": freight_payment_status(balance, advance),
        }
    )
    _save_freights(store, [updated if f.id == freight_id else f for f in freights])

    logger.info(
        "Freight payment recorded",
        extra={
            "freight_id": freight_id,
            "amount": str(payload.amount),
            "status": updated.payment_status.value,
        },
    )
    return updated


# =====================================================
# DELETE
# =====================================================
@transactional
def delete_freight(store: CollectionStore, freight_id: str) -> LorryFreight:
    freights = _load_freights(store)
    freight = _find(freights, freight_id)
    _save_freights(store, [f for f in freights if f.id != freight_id])

    logger.info("Lorry freight deleted", extra={"freight_id": freight_id})
    return freight
