from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from ricemill.models.enums.payment_status import PaymentMethod, PaymentStatus
from ricemill.schemas.base.types import NonNegative, Number, Positive, RecordModel


# ==============================
# HAMALI
# ==============================
class HamaliWork(RecordModel):
    id: str
    worker_name: Optional[str] = None
    work_type: str
    work_description: Optional[str] = None
    quantity: NonNegative
    unit: str
    rate_per_unit: NonNegative
    total_amount: NonNegative
    work_date: date
    payment_status: PaymentStatus = PaymentStatus.pending
    notes: Optional[str] = None


class HamaliWorkCreate(RecordModel):
    worker_name: Optional[str] = None
    work_type: str
    work_description: Optional[str] = None
    quantity: NonNegative
    unit: str = "bags"
    rate_per_unit: NonNegative
    work_date: date
    notes: Optional[str] = None


class HamaliPayment(RecordModel):
    id: str
    amount: Positive
    payment_date: date
    payment_method: PaymentMethod = PaymentMethod.cash
    work_period: Optional[str] = None
    notes: Optional[str] = None


class HamaliPaymentCreate(RecordModel):
    amount: Positive
    payment_date: Optional[date] = None
    payment_method: PaymentMethod = PaymentMethod.cash
    work_period: Optional[str] = None
    notes: Optional[str] = None


class HamaliSettlement(RecordModel):
    payment: HamaliPayment
    settled_work_ids: List[str] = Field(default_factory=list)
    settled_amount: NonNegative
    unapplied_amount: NonNegative


# ==============================
# LABOUR
# ==============================
class LabourWage(RecordModel):
    id: str
    worker_name: str
    work_description: Optional[str] = None
    days_worked: NonNegative
    rate_per_day: NonNegative
    total_amount: NonNegative
    advance_paid: NonNegative = Decimal("0")
    remaining_amount: Number
    work_date: date
    payment_status: PaymentStatus = PaymentStatus.pending
    notes: Optional[str] = None


class LabourWageCreate(RecordModel):
    worker_name: str
    work_description: Optional[str] = None
    days_worked: NonNegative
    rate_per_day: NonNegative
    advance_paid: NonNegative = Decimal("0")
    work_date: date
    notes: Optional[str] = None


# ==============================
# SUPERVISOR
# ==============================
class SupervisorSalary(RecordModel):
    id: str
    supervisor_name: str
    designation: Optional[str] = None
    monthly_salary: NonNegative
    month: str
    paid_amount: NonNegative = Decimal("0")
    balance_amount: Number
    payment_date: Optional[date] = None
    payment_status: PaymentStatus = PaymentStatus.pending
    notes: Optional[str] = None


class SupervisorSalaryCreate(RecordModel):
    supervisor_name: str
    designation: Optional[str] = None
    monthly_salary: NonNegative
    month: str = Field(pattern=r"^\d{4}-\d{2}$")
    paid_amount: NonNegative = Decimal("0")
    payment_date: Optional[date] = None
    notes: Optional[str] = None


class WagePaymentCreate(RecordModel):
    amount: Positive
    payment_date: Optional[date] = None


# ==============================
# SUMMARY
# ==============================
class PayrollSummary(RecordModel):
    hamali_total: NonNegative
    hamali_pending: NonNegative
    hamali_paid_out: NonNegative
    labour_remaining: Number
    supervisor_balance: Number
