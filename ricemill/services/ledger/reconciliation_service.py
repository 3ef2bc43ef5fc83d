from datetime import date
import logging

from ricemill.constants.collections import RECONCILIATIONS
from ricemill.constants.error_codes import ErrorCode
from ricemill.core.exceptions import NotFoundError
from ricemill.models.enums.reconciliation_status import ReconciliationStatus
from ricemill.schemas.ledger.reconciliation_schemas import (
    ReconcileRequest,
    ReconciliationCreate,
    ReconciliationRecord,
    ReconciliationSummary,
)
from ricemill.services.storage.collection_store import CollectionStore, transactional
from ricemill.utils.decimal_utils import ZERO, sum_decimals
from ricemill.utils.ids import new_id

logger = logging.getLogger(__name__)


def _load(store: CollectionStore) -> list[ReconciliationRecord]:
    return [ReconciliationRecord.model_validate(r) for r in store.load(RECONCILIATIONS)]


def _save(store: CollectionStore, records: list[ReconciliationRecord]) -> None:
    store.save(RECONCILIATIONS, [r.to_document() for r in records])


def _find(records: list[ReconciliationRecord], record_id: str) -> ReconciliationRecord:
    for record in records:
        if record.id == record_id:
            return record
    raise NotFoundError("Reconciliation record not found", ErrorCode.RECONCILIATION_NOT_FOUND)


@transactional
def create_center(store: CollectionStore, payload: ReconciliationCreate) -> ReconciliationRecord:
    record = ReconciliationRecord(
        id=new_id(),
        center_name=payload.center_name,
        district=payload.district,
        total_quintals=payload.total_quintals,
        balance_quintals=payload.total_quintals,
        notes=payload.notes,
    )
    records = _load(store)
    records.append(record)
    _save(store, records)

    logger.info("Reconciliation center added", extra={"record_id": record.id})
    return record


def list_reconciliations(store: CollectionStore) -> list[ReconciliationRecord]:
    return _load(store)


@transactional
def reconcile(
    store: CollectionStore,
    record_id: str,
    payload: ReconcileRequest,
) -> ReconciliationRecord:
    """Apply reconciled quintals, never more than the open balance."""
    records = _load(store)
    record = _find(records, record_id)

    applied = min(payload.quintals, max(record.balance_quintals, ZERO))
    reconciled = record.reconciled_quintals + applied
    balance = record.total_quintals - reconciled

    updated = record.model_copy(
        update={
            "reconciled_quintals": reconciled,
            "balance_quintals": balance,
            "reconciliation_status": (
                ReconciliationStatus.completed
                if balance <= 0
                else ReconciliationStatus.in_progress
            ),
            "reconciliation_date": payload.reconciliation_date or date.today(),
            "notes": payload.notes if payload.notes is not None else record.notes,
        }
    )
    _save(store, [updated if r.id == record_id else r for r in records])

    logger.info(
        "Quintals reconciled",
        extra={
            "record_id": record_id,
            "requested": str(payload.quintals),
            "applied": str(applied),
        },
    )
    return updated


@transactional
def set_status(
    store: CollectionStore,
    record_id: str,
    status: ReconciliationStatus,
    notes: str | None = None,
) -> ReconciliationRecord:
    records = _load(store)
    record = _find(records, record_id)

    updated = record.model_copy(
        update={
            "reconciliation_status": ReconciliationStatus(status),
            "notes": notes if notes is not None else record.notes,
        }
    )
    _save(store, [updated if r.id == record_id else r for r in records])
    return updated


@transactional
def delete_reconciliation(store: CollectionStore, record_id: str) -> ReconciliationRecord:
    records = _load(store)
    record = _find(records, record_id)
    _save(store, [r for r in records if r.id != record_id])
    return record


def reconciliation_summary(store: CollectionStore) -> ReconciliationSummary:
    records = _load(store)
    return ReconciliationSummary(
        centers=len(records),
        total_quintals=sum_decimals(r.total_quintals for r in records),
        reconciled_quintals=sum_decimals(r.reconciled_quintals for r in records),
        balance_quintals=sum_decimals(r.balance_quintals for r in records),
        completed=sum(
            1
            for r in records
            if r.reconciliation_status == ReconciliationStatus.completed
        ),
    )
