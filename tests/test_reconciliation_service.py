from datetime import date

import pytest

from ricemill.core.exceptions import NotFoundError
from ricemill.models.enums.reconciliation_status import ReconciliationStatus
from ricemill.schemas.ledger.reconciliation_schemas import (
    ReconcileRequest,
    ReconciliationCreate,
)
from ricemill.services.ledger.reconciliation_service import (
    create_center,
    delete_reconciliation,
    list_reconciliations,
    reconcile,
    reconciliation_summary,
    set_status,
)


def test_new_center_is_fully_open(store):
    record = create_center(store, ReconciliationCreate(center_name="Miryalaguda", total_quintals=1000))

    assert record.balance_quintals == 1000
    assert record.reconciled_quintals == 0
    assert record.reconciliation_status == ReconciliationStatus.pending


def test_reconcile_is_capped_at_balance(store):
    record = create_center(store, ReconciliationCreate(center_name="Nalgonda", total_quintals=1000))

    step = reconcile(store, record.id, ReconcileRequest(quintals=400, reconciliation_date=date(2025, 3, 1)))
    assert step.balance_quintals == 600
    assert step.reconciliation_status == ReconciliationStatus.in_progress

    done = reconcile(store, record.id, ReconcileRequest(quintals=800))
    assert done.reconciled_quintals == 1000
    assert done.balance_quintals == 0
    assert done.reconciliation_status == ReconciliationStatus.completed


def test_status_override_and_summary(store):
    a = create_center(store, ReconciliationCreate(center_name="A", total_quintals=500))
    create_center(store, ReconciliationCreate(center_name="B", total_quintals=300))
    reconcile(store, a.id, ReconcileRequest(quintals=500))

    set_status(store, a.id, ReconciliationStatus.completed, notes="verified")
    summary = reconciliation_summary(store)

    assert summary.centers == 2
    assert summary.total_quintals == 800
    assert summary.reconciled_quintals == 500
    assert summary.balance_quintals == 300
    assert summary.completed == 1
    assert list_reconciliations(store)[0].notes == "verified"


def test_unknown_center(store):
    with pytest.raises(NotFoundError):
        reconcile(store, "nope", ReconcileRequest(quintals=1))
    with pytest.raises(NotFoundError):
        delete_reconciliation(store, "nope")
