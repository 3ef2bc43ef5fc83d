from datetime import date
from decimal import Decimal
from typing import Dict, Optional

from pydantic import Field, field_validator

from ricemill.constants.fci import FRK_QTY, REQUIRED_BAGS, REQUIRED_STICKERS, RICE_QTY
from ricemill.constants.materials import GunnyType
from ricemill.models.enums.consignment_status import ConsignmentStatus
from ricemill.schemas.base.types import (
    NonNegative,
    OptionalNonNegative,
    RecordModel,
)


# ==============================
# RECORD
# ==============================
class Consignment(RecordModel):
    id: str
    ack_number: str
    rice_quantity: NonNegative = RICE_QTY
    frk_quantity: NonNegative = FRK_QTY
    total_bags: int = REQUIRED_BAGS
    gunny_type: GunnyType = GunnyType.NEW_2024_25
    stickers_used: int = REQUIRED_STICKERS
    consignment_date: date
    status: ConsignmentStatus = ConsignmentStatus.in_transit

    lorry_number: Optional[str] = None
    transporter_name: Optional[str] = None
    e_way_bill: Optional[str] = None

    fci_weight: OptionalNonNegative = None
    fci_moisture: OptionalNonNegative = None
    fci_unloading_hamali: OptionalNonNegative = None
    fci_passing_fee: OptionalNonNegative = None
    passing_fee_paid: bool = False
    notes: Optional[str] = None


# ==============================
# INPUT
# ==============================
class ConsignmentCreate(RecordModel):
    ack_number: str
    gunny_type: GunnyType = GunnyType.NEW_2024_25
    consignment_date: date
    lorry_number: Optional[str] = None
    transporter_name: Optional[str] = None
    e_way_bill: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("ack_number")
    @classmethod
    def strip_ack(cls, v: str) -> str:
        return v.strip()


class ConsignmentUpdate(RecordModel):
    ack_number: Optional[str] = None
    gunny_type: Optional[GunnyType] = None
    consignment_date: Optional[date] = None
    lorry_number: Optional[str] = None
    transporter_name: Optional[str] = None
    e_way_bill: Optional[str] = None
    fci_weight: OptionalNonNegative = None
    fci_moisture: OptionalNonNegative = None
    fci_unloading_hamali: OptionalNonNegative = None
    fci_passing_fee: OptionalNonNegative = None
    passing_fee_paid: Optional[bool] = None
    status: Optional[ConsignmentStatus] = None
    notes: Optional[str] = None


# ==============================
# OUTPUT
# ==============================
class StockCheck(RecordModel):
    required: NonNegative
    available: NonNegative

    @property
    def sufficient(self) -> bool:
        return self.available >= self.required


class ConsignmentSummary(RecordModel):
    total: int
    by_status: Dict[str, int] = Field(default_factory=dict)
    rice_dispatched: NonNegative = Decimal("0")
    bags_used: int = 0
    stickers_used: int = 0
