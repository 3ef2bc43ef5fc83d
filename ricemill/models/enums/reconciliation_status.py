# ricemill/models/enums/reconciliation_status.py
import enum


class ReconciliationStatus(str, enum.Enum):
    pending = "pending"
    in_progress = "in-progress"
    completed = "completed"
