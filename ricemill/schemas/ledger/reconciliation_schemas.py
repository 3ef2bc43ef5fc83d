from datetime import date
from decimal import Decimal
from typing import Optional

from ricemill.models.enums.reconciliation_status import ReconciliationStatus
from ricemill.schemas.base.types import NonNegative, Number, Positive, RecordModel


class ReconciliationRecord(RecordModel):
    id: str
    center_name: str
    district: Optional[str] = None
    total_quintals: NonNegative
    reconciled_quintals: NonNegative = Decimal("0")
    balance_quintals: Number
    reconciliation_status: ReconciliationStatus = ReconciliationStatus.pending
    reconciliation_date: Optional[date] = None
    notes: Optional[str] = None


class ReconciliationCreate(RecordModel):
    center_name: str
    district: Optional[str] = None
    total_quintals: NonNegative
    notes: Optional[str] = None


class ReconcileRequest(RecordModel):
    quintals: Positive
    reconciliation_date: Optional[date] = None
    notes: Optional[str] = None


class ReconciliationSummary(RecordModel):
    centers: int
    total_quintals: NonNegative
    reconciled_quintals: NonNegative
    balance_quintals: Number
    completed: int
