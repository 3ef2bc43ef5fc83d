from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import Field

from ricemill.constants.electricity import DEFAULT_CONTRACT_DEMAND
from ricemill.models.enums.payment_status import PaymentMethod, PaymentStatus
from ricemill.schemas.base.types import (
    NonNegative,
    Number,
    OptionalNumber,
    RecordModel,
)


# ==============================
# COMPUTED FIGURES
# ==============================
class BillBreakdown(RecordModel):
    kwh_consumed: NonNegative
    kvah_consumed: NonNegative
    power_factor: Number
    billing_demand: NonNegative
    fixed_charges: NonNegative
    energy_charges: NonNegative
    fuel_surcharge: NonNegative
    ed_duty: NonNegative
    customer_charges: NonNegative
    pf_adjustment: Number
    bill_amount: Number


# ==============================
# RECORD
# ==============================
class ElectricityBill(BillBreakdown):
    id: str
    bill_month: Optional[str] = None
    bill_number: Optional[str] = None
    bill_date: date
    due_date: Optional[date] = None

    previous_kwh: NonNegative
    current_kwh: NonNegative
    previous_kvah: NonNegative
    current_kvah: NonNegative
    rmd: NonNegative
    contract_demand: NonNegative = DEFAULT_CONTRACT_DEMAND

    manual_adjustment: Number = Decimal("0")
    payable_amount: Number

    payment_status: PaymentStatus = PaymentStatus.pending
    payment_date: Optional[date] = None
    payment_method: PaymentMethod = PaymentMethod.cash
    notes: Optional[str] = None


# ==============================
# INPUT
# ==============================
class ElectricityReadings(RecordModel):
    previous_kwh: NonNegative
    current_kwh: NonNegative
    previous_kvah: NonNegative
    current_kvah: NonNegative
    rmd: NonNegative
    contract_demand: NonNegative = DEFAULT_CONTRACT_DEMAND


class ElectricityBillCreate(ElectricityReadings):
    bill_month: Optional[str] = None
    bill_number: Optional[str] = None
    bill_date: date
    due_date: Optional[date] = None
    manual_adjustment: Number = Decimal("0")
    payment_method: PaymentMethod = PaymentMethod.cash
    notes: Optional[str] = None


class BillPaymentCreate(RecordModel):
    payment_date: Optional[date] = None
    payment_method: PaymentMethod = PaymentMethod.cash


class LiveEstimateRequest(RecordModel):
    current_kwh: NonNegative


# ==============================
# AGGREGATES
# ==============================
class ElectricityStats(RecordModel):
    bill_count: int
    total_kwh: NonNegative
    total_kvah: NonNegative
    total_bill_amount: Number
    average_power_factor: OptionalNumber = None
    average_cost_per_unit: OptionalNumber = None
    cost_per_ack: OptionalNumber = None
    pending_amount: Number = Field(default=Decimal("0"))


class LiveEstimate(RecordModel):
    current_kwh: NonNegative
    estimated_amount: OptionalNumber = None
