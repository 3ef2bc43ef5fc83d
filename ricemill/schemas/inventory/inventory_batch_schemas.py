from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from ricemill.constants.materials import MaterialType
from ricemill.schemas.base.types import NonNegative, Positive, RecordModel


# ==============================
# BATCH
# ==============================
class InventoryBatch(RecordModel):
    id: str
    material_type: MaterialType
    quantity_received: NonNegative
    quantity_used: NonNegative = Decimal("0")
    quantity_remaining: NonNegative
    date_received: date
    source_tag: Optional[str] = None
    notes: Optional[str] = None

    # FRK batches
    supplier: Optional[str] = None
    batch_number: Optional[str] = None
    certificate_number: Optional[str] = None
    expiry_date: Optional[date] = None

    @property
    def is_exhausted(self) -> bool:
        return self.quantity_remaining <= 0


class InventoryBatchCreate(RecordModel):
    quantity: Positive
    date_received: date
    source_tag: Optional[str] = None
    notes: Optional[str] = None

    supplier: Optional[str] = None
    batch_number: Optional[str] = None
    certificate_number: Optional[str] = None
    expiry_date: Optional[date] = None


# ==============================
# USAGE LOG
# ==============================
class StockUsage(RecordModel):
    id: str
    material_type: MaterialType
    batch_id: str
    ack_number: Optional[str] = None
    quantity_used: Positive
    usage_date: date
    source_tag: Optional[str] = None
    notes: Optional[str] = None


class ConsumeRequest(RecordModel):
    amount: Positive
    ack_number: Optional[str] = None
    usage_date: Optional[date] = None


# ==============================
# RESULTS
# ==============================
class ConsumeResult(RecordModel):
    ok: bool
    requested: NonNegative
    available: NonNegative
    batches: List[InventoryBatch] = Field(default_factory=list)
    usages: List[StockUsage] = Field(default_factory=list)


class LedgerSummary(RecordModel):
    material_type: MaterialType
    batch_count: int
    total_received: NonNegative
    total_used: NonNegative
    total_remaining: NonNegative
