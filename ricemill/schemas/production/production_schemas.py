from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import Field

from ricemill.constants.production import RiceType
from ricemill.schemas.base.types import (
    NonNegative,
    OptionalNonNegative,
    Positive,
    RecordModel,
)


# ==============================
# PADDY RECEIPTS
# ==============================
class PaddyRecord(RecordModel):
    id: str
    s_no: Optional[int] = None
    date: date
    vehicle_no: Optional[str] = None
    w_slip_no: Optional[str] = None
    truckchit_no: Optional[str] = None
    center_name: Optional[str] = None
    district: Optional[str] = None
    new_bags: int = 0
    old_bags: int = 0
    total_bags: int = 0
    total_quintals: NonNegative
    moisture: OptionalNonNegative = None
    unloading_point: Optional[str] = None


class PaddyRecordCreate(RecordModel):
    date: date
    vehicle_no: Optional[str] = None
    w_slip_no: Optional[str] = None
    truckchit_no: Optional[str] = None
    center_name: Optional[str] = None
    district: Optional[str] = None
    new_bags: int = Field(0, ge=0)
    old_bags: int = Field(0, ge=0)
    total_quintals: Positive
    moisture: OptionalNonNegative = None
    unloading_point: Optional[str] = None


class PaddyPosition(RecordModel):
    received: NonNegative
    used: NonNegative
    remaining: NonNegative


# ==============================
# RICE PRODUCTION
# ==============================
class RiceProduction(RecordModel):
    id: str
    ack_number: str
    ack_count: Optional[int] = None
    rice_type: RiceType
    paddy_used: NonNegative
    rice_produced: NonNegative
    millers_due: NonNegative = Decimal("0")
    production_date: date
    mill_name: Optional[str] = None
    notes: Optional[str] = None


class RiceProductionCreate(RecordModel):
    ack_quantity: int = Field(1, ge=1)
    rice_type: RiceType = RiceType.BOILED
    production_date: date
    # consignment ACK this run backs; a "<n> ACK <TYPE>" label otherwise
    ack_number: Optional[str] = None
    notes: Optional[str] = None


class ProductionPlan(RecordModel):
    ack_quantity: int
    rice_type: RiceType
    rice_produced: NonNegative
    outturn_rate: NonNegative
    paddy_required: NonNegative
    millers_due: NonNegative


class ProductionSummary(RecordModel):
    batches: int
    total_acks: int
    rice_produced: NonNegative
    millers_due: NonNegative
    paddy: PaddyPosition
