from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from ricemill.models.enums.payment_status import FreightPaymentStatus
from ricemill.schemas.base.types import NonNegative, Number, Positive, RecordModel


# ==============================
# DEDUCTIONS
# ==============================
class FreightDeduction(RecordModel):
    id: str
    description: str
    amount: NonNegative


class FreightDeductionCreate(RecordModel):
    description: str
    amount: NonNegative


# ==============================
# RECORD
# ==============================
class LorryFreight(RecordModel):
    id: str
    consignment_id: str
    ack_number: Optional[str] = None
    lorry_number: Optional[str] = None
    transporter_name: str
    quantity_mt: NonNegative = Field(alias="quantityMT")
    freight_per_mt: NonNegative = Field(alias="freightPerMT")
    gross_freight_amount: Number
    deductions: List[FreightDeduction] = Field(default_factory=list)
    net_freight_amount: Number
    advance_paid: NonNegative = Decimal("0")
    balance_amount: Number
    dispatch_date: Optional[date] = None
    payment_status: FreightPaymentStatus = FreightPaymentStatus.pending
    is_bran_consignment: bool = False
    notes: Optional[str] = None


# ==============================
# INPUT
# ==============================
class LorryFreightCreate(RecordModel):
    consignment_id: str
    transporter_name: str
    freight_per_mt: NonNegative = Field(alias="freightPerMT")
    deductions: List[FreightDeductionCreate] = Field(default_factory=list)
    advance_paid: NonNegative = Decimal("0")
    is_bran_consignment: bool = False
    lorry_number: Optional[str] = None
    dispatch_date: Optional[date] = None
    notes: Optional[str] = None


class FreightPaymentCreate(RecordModel):
    amount: Positive


# ==============================
# COMPUTATION RESULT
# ==============================
class FreightFigures(RecordModel):
    quantity_mt: NonNegative = Field(alias="quantityMT")
    gross_freight_amount: Number
    total_deductions: NonNegative
    net_freight_amount: Number
    balance_amount: Number
    payment_status: FreightPaymentStatus
