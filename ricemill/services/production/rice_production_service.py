from datetime import date
from decimal import Decimal
import logging

from ricemill.constants.collections import PADDY_RECORDS, RICE_PRODUCTIONS
from ricemill.constants.error_codes import ErrorCode
from ricemill.constants.production import (
    MILL_NAME,
    MILLERS_DUE_RATE,
    OUTTURN_RATES,
    RICE_PER_ACK,
    RiceType,
)
from ricemill.core.exceptions import InsufficientStockError, NotFoundError
from ricemill.schemas.production.production_schemas import (
    PaddyPosition,
    PaddyRecord,
    PaddyRecordCreate,
    ProductionPlan,
    ProductionSummary,
    RiceProduction,
    RiceProductionCreate,
)
from ricemill.services.storage.collection_store import CollectionStore, transactional
from ricemill.utils.decimal_utils import sum_decimals
from ricemill.utils.ids import new_id

logger = logging.getLogger(__name__)


# =====================================================
# SHARED LOADERS
# =====================================================
def _load_paddy(store: CollectionStore) -> list[PaddyRecord]:
    return [PaddyRecord.model_validate(r) for r in store.load(PADDY_RECORDS)]


def _load_productions(store: CollectionStore) -> list[RiceProduction]:
    return [RiceProduction.model_validate(r) for r in store.load(RICE_PRODUCTIONS)]


def ack_count(production: RiceProduction) -> int:
    """ACKs covered by one production run.

    Runs without a stored count carry it in their "<n> ACK <TYPE>" label;
    anything else counts as a single ACK.
    """
    if production.ack_count is not None:
        return production.ack_count

    label = production.ack_number
    if "ACK" in label:
        head = label.split(" ")[0]
        if head.isdigit():
            return int(head)
    return 1


# =====================================================
# PADDY
# =====================================================
@transactional
def receive_paddy(store: CollectionStore, payload: PaddyRecordCreate) -> PaddyRecord:
    records = _load_paddy(store)

    record = PaddyRecord(
        id=new_id(),
        s_no=len(records) + 1,
        total_bags=payload.new_bags + payload.old_bags,
        **payload.model_dump(),
    )
    records.append(record)
    store.save(PADDY_RECORDS, [r.to_document() for r in records])

    logger.info(
        "Paddy received",
        extra={"record_id": record.id, "quintals": str(record.total_quintals)},
    )
    return record


def list_paddy(store: CollectionStore) -> list[PaddyRecord]:
    return _load_paddy(store)


@transactional
def delete_paddy(store: CollectionStore, record_id: str) -> PaddyRecord:
    records = _load_paddy(store)
    for record in records:
        if record.id == record_id:
            break
    else:
        raise NotFoundError("Paddy record not found", ErrorCode.PADDY_RECORD_NOT_FOUND)

    store.save(PADDY_RECORDS, [r.to_document() for r in records if r.id != record_id])
    logger.info("Paddy record deleted", extra={"record_id": record_id})
    return record


def paddy_position(store: CollectionStore) -> PaddyPosition:
    received = sum_decimals(r.total_quintals for r in _load_paddy(store))
    used = sum_decimals(p.paddy_used for p in _load_productions(store))
    # a deleted receipt can leave more paddy used than is on record
    return PaddyPosition(
        received=received,
        used=used,
        remaining=max(received - used, Decimal("0")),
    )


# =====================================================
# PRODUCTION
# =====================================================
def plan_production(ack_quantity: int, rice_type: RiceType) -> ProductionPlan:
    rice_type = RiceType(rice_type)
    rice = RICE_PER_ACK * ack_quantity
    outturn = OUTTURN_RATES[rice_type]
    paddy_required = rice / outturn

    return ProductionPlan(
        ack_quantity=ack_quantity,
        rice_type=rice_type,
        rice_produced=rice,
        outturn_rate=outturn,
        paddy_required=paddy_required,
        millers_due=paddy_required * MILLERS_DUE_RATE,
    )


@transactional
def create_production(store: CollectionStore, payload: RiceProductionCreate) -> RiceProduction:
    plan = plan_production(payload.ack_quantity, payload.rice_type)
    position = paddy_position(store)

    if plan.paddy_required > position.remaining:
        logger.info(
            "Production refused: insufficient paddy",
            extra={
                "required": str(plan.paddy_required),
                "available": str(position.remaining),
            },
        )
        raise InsufficientStockError({"paddy": (plan.paddy_required, position.remaining)})

    label = f"{payload.ack_quantity} ACK {plan.rice_type.value.upper()}"
    production = RiceProduction(
        id=new_id(),
        ack_number=(payload.ack_number or "").strip() or label,
        ack_count=payload.ack_quantity,
        rice_type=plan.rice_type,
        paddy_used=plan.paddy_required,
        rice_produced=plan.rice_produced,
        millers_due=plan.millers_due,
        production_date=payload.production_date,
        mill_name=MILL_NAME,
        notes=payload.notes,
    )

    productions = _load_productions(store)
    productions.append(production)
    store.save(RICE_PRODUCTIONS, [p.to_document() for p in productions])

    logger.info(
        "Rice production recorded",
        extra={
            "production_id": production.id,
            "ack_number": production.ack_number,
            "paddy_used": str(production.paddy_used),
        },
    )
    return production


def list_productions(
    store: CollectionStore,
    rice_type: RiceType | None = None,
) -> list[RiceProduction]:
    productions = _load_productions(store)
    if rice_type:
        productions = [p for p in productions if p.rice_type == rice_type]
    return productions


def productions_between(store: CollectionStore, start: date, end: date) -> list[RiceProduction]:
    return [p for p in _load_productions(store) if start <= p.production_date <= end]


@transactional
def delete_production(store: CollectionStore, production_id: str) -> RiceProduction:
    productions = _load_productions(store)
    for production in productions:
        if production.id == production_id:
            break
    else:
        raise NotFoundError("Rice production not found", ErrorCode.PRODUCTION_NOT_FOUND)

    store.save(
        RICE_PRODUCTIONS,
        [p.to_document() for p in productions if p.id != production_id],
    )
    logger.info("Rice production deleted", extra={"production_id": production_id})
    return production


def production_summary(store: CollectionStore) -> ProductionSummary:
    productions = _load_productions(store)
    return ProductionSummary(
        batches=len(productions),
        total_acks=sum(ack_count(p) for p in productions),
        rice_produced=sum_decimals(p.rice_produced for p in productions),
        millers_due=sum_decimals(p.millers_due for p in productions),
        paddy=paddy_position(store),
    )
