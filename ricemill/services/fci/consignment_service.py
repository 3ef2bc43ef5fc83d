from collections import Counter
import logging

from ricemill.constants.collections import FCI_CONSIGNMENTS, LORRY_FREIGHTS
from ricemill.constants.error_codes import ErrorCode
from ricemill.constants.fci import FRK_QTY, REQUIRED_BAGS, REQUIRED_STICKERS, RICE_QTY
from ricemill.constants.materials import MaterialType
from ricemill.core.exceptions import (
    AppException,
    DuplicateAckError,
    InsufficientStockError,
    NotFoundError,
)
from ricemill.models.enums.consignment_status import (
    TERMINAL_CONSIGNMENT_STATUSES,
    ConsignmentStatus,
)
from ricemill.schemas.fci.consignment_schemas import (
    Consignment,
    ConsignmentCreate,
    ConsignmentSummary,
    ConsignmentUpdate,
    StockCheck,
)
from ricemill.services.inventory.inventory_ledger import InventoryLedger
from ricemill.services.storage.collection_store import CollectionStore, transactional
from ricemill.utils.decimal_utils import sum_decimals
from ricemill.utils.ids import new_id

logger = logging.getLogger(__name__)


# =====================================================
# SHARED LOADERS
# =====================================================
def _load_consignments(store: CollectionStore) -> list[Consignment]:
    return [Consignment.model_validate(r) for r in store.load(FCI_CONSIGNMENTS)]


def _save_consignments(store: CollectionStore, consignments: list[Consignment]) -> None:
    store.save(FCI_CONSIGNMENTS, [c.to_document() for c in consignments])


def _find(consignments: list[Consignment], consignment_id: str) -> Consignment:
    for consignment in consignments:
        if consignment.id == consignment_id:
            return consignment
    raise NotFoundError("Consignment not found", ErrorCode.CONSIGNMENT_NOT_FOUND)


def _ensure_unique_ack(
    consignments: list[Consignment],
    ack_number: str,
    exclude_id: str | None = None,
) -> None:
    if not ack_number:
        raise AppException(400, "ACK number is required", ErrorCode.ACK_REQUIRED)

    for consignment in consignments:
        if consignment.id != exclude_id and consignment.ack_number == ack_number:
            raise DuplicateAckError(ack_number)


# =====================================================
# STOCK CHECK
# =====================================================
def _stock_checks(gunny: InventoryLedger, stickers: InventoryLedger) -> dict[str, StockCheck]:
    return {
        "gunny": StockCheck(required=REQUIRED_BAGS, available=gunny.available()),
        "stickers": StockCheck(required=REQUIRED_STICKERS, available=stickers.available()),
    }


def stock_availability(store: CollectionStore) -> dict[str, StockCheck]:
    return _stock_checks(
        InventoryLedger(store, MaterialType.GUNNY),
        InventoryLedger(store, MaterialType.STICKER),
    )


# =====================================================
# CREATE
# =====================================================
@transactional
def create_consignment(
    store: CollectionStore,
    payload: ConsignmentCreate,
) -> Consignment:
    consignments = _load_consignments(store)
    _ensure_unique_ack(consignments, payload.ack_number)

    # -------------------------
    # STOCK CHECK (fresh read)
    # -------------------------
    gunny = InventoryLedger(store, MaterialType.GUNNY)
    stickers = InventoryLedger(store, MaterialType.STICKER)

    checks = _stock_checks(gunny, stickers)
    if not all(check.sufficient for check in checks.values()):
        logger.info(
            "Consignment refused: insufficient stock",
            extra={
                "ack_number": payload.ack_number,
                "gunny_available": str(checks["gunny"].available),
                "stickers_available": str(checks["stickers"].available),
            },
        )
        raise InsufficientStockError(
            {name: (c.required, c.available) for name, c in checks.items()}
        )

    # -------------------------
    # CONSUME BOTH LEDGERS
    # -------------------------
    gunny.consume(
        REQUIRED_BAGS,
        ack_number=payload.ack_number,
        usage_date=payload.consignment_date,
    )
    stickers.consume(
        REQUIRED_STICKERS,
        ack_number=payload.ack_number,
        usage_date=payload.consignment_date,
    )

    consignment = Consignment(
        id=new_id(),
        ack_number=payload.ack_number,
        rice_quantity=RICE_QTY,
        frk_quantity=FRK_QTY,
        total_bags=REQUIRED_BAGS,
        gunny_type=payload.gunny_type,
        stickers_used=REQUIRED_STICKERS,
        consignment_date=payload.consignment_date,
        status=ConsignmentStatus.in_transit,
        lorry_number=payload.lorry_number,
        transporter_name=payload.transporter_name,
        e_way_bill=payload.e_way_bill,
        notes=payload.notes,
    )
    consignments.append(consignment)

    # -------------------------
    # PERSIST
    # -------------------------
    gunny.save()
    stickers.save()
    _save_consignments(store, consignments)

    logger.info(
        "Consignment created",
        extra={"consignment_id": consignment.id, "ack_number": consignment.ack_number},
    )
    return consignment


# =====================================================
# READ
# =====================================================
def get_consignment(store: CollectionStore, consignment_id: str) -> Consignment:
    return _find(_load_consignments(store), consignment_id)


def list_consignments(
    store: CollectionStore,
    status: ConsignmentStatus | None = None,
) -> list[Consignment]:
    consignments = _load_consignments(store)
    if status:
        consignments = [c for c in consignments if c.status == status]
    return consignments


# =====================================================
# UPDATE
# =====================================================
@transactional
def update_consignment(
    store: CollectionStore,
    consignment_id: str,
    payload: ConsignmentUpdate,
) -> Consignment:
    consignments = _load_consignments(store)
    current = _find(consignments, consignment_id)
    changes = payload.model_dump(exclude_unset=True)

    new_ack = changes.get("ack_number")
    if new_ack is not None:
        new_ack = new_ack.strip()
        changes["ack_number"] = new_ack
        _ensure_unique_ack(consignments, new_ack, exclude_id=consignment_id)

    new_status = changes.get("status")
    if (
        new_status is not None
        and current.status in TERMINAL_CONSIGNMENT_STATUSES
        and new_status != current.status
    ):
        logger.warning(
            "Consignment moved out of a terminal status",
            extra={
                "consignment_id": consignment_id,
                "from_status": current.status.value,
                "to_status": ConsignmentStatus(new_status).value,
            },
        )

    updated = Consignment.model_validate({**current.model_dump(), **changes})
    consignments = [updated if c.id == consignment_id else c for c in consignments]

    # usage logs are keyed by ACK number
    if new_ack is not None and new_ack != current.ack_number:
        for material in (MaterialType.GUNNY, MaterialType.STICKER):
            ledger = InventoryLedger(store, material)
            ledger.usages = [
                u.model_copy(update={"ack_number": new_ack})
                if u.ack_number == current.ack_number
                else u
                for u in ledger.usages
            ]
            ledger.save()

    _save_consignments(store, consignments)

    logger.info("Consignment updated", extra={"consignment_id": consignment_id})
    return updated


# =====================================================
# DELETE (restores stock, drops freight)
# =====================================================
@transactional
def delete_consignment(store: CollectionStore, consignment_id: str) -> Consignment:
    consignments = _load_consignments(store)
    consignment = _find(consignments, consignment_id)

    for material in (MaterialType.GUNNY, MaterialType.STICKER):
        ledger = InventoryLedger(store, material)
        ledger.restore(
            ledger.usages_for_ack(consignment.ack_number),
            returned_on=consignment.consignment_date,
        )
        ledger.save()

    freights = store.load(LORRY_FREIGHTS)
    remaining_freights = [f for f in freights if f.get("consignmentId") != consignment_id]
    store.save(LORRY_FREIGHTS, remaining_freights)

    _save_consignments(store, [c for c in consignments if c.id != consignment_id])

    logger.info(
        "Consignment deleted",
        extra={
            "consignment_id": consignment_id,
            "freights_removed": len(freights) - len(remaining_freights),
        },
    )
    return consignment


# =====================================================
# SUMMARY
# =====================================================
def consignment_summary(store: CollectionStore) -> ConsignmentSummary:
    consignments = _load_consignments(store)
    counts = Counter(c.status.value for c in consignments)

    return ConsignmentSummary(
        total=len(consignments),
        by_status={s.value: counts.get(s.value, 0) for s in ConsignmentStatus},
        rice_dispatched=sum_decimals(
            c.rice_quantity
            for c in consignments
            if c.status == ConsignmentStatus.dispatched
        ),
        bags_used=sum(c.total_bags for c in consignments),
        stickers_used=sum(c.stickers_used for c in consignments),
    )
