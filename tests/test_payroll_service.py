from datetime import date

import pytest
from pydantic import ValidationError

from ricemill.core.exceptions import NotFoundError, OverpaymentError
from ricemill.models.enums.payment_status import PaymentStatus
from ricemill.schemas.payroll.payroll_schemas import (
    HamaliPaymentCreate,
    HamaliWorkCreate,
    LabourWageCreate,
    SupervisorSalaryCreate,
    WagePaymentCreate,
)
from ricemill.services.payroll.payroll_service import (
    add_hamali_work,
    add_labour_wage,
    add_supervisor_salary,
    delete_hamali_work,
    list_hamali_payments,
    list_hamali_work,
    list_supervisor_salaries,
    pay_hamali,
    pay_labour_wage,
    pay_supervisor_salary,
    payroll_summary,
)


def hamali(quantity, rate, on):
    return HamaliWorkCreate(
        work_type="loading",
        quantity=quantity,
        rate_per_unit=rate,
        work_date=on,
    )


# -------------------------
# HAMALI
# -------------------------
def test_hamali_work_total(store):
    work = add_hamali_work(store, hamali(580, "1.5", date(2025, 1, 3)))

    assert work.total_amount == 870
    assert work.unit == "bags"
    assert work.payment_status == PaymentStatus.pending


def test_bulk_payment_settles_oldest_first_and_stops(store):
    late = add_hamali_work(store, hamali(100, 3, date(2025, 1, 20)))  # 300
    first = add_hamali_work(store, hamali(100, 10, date(2025, 1, 1)))  # 1000
    middle = add_hamali_work(store, hamali(100, 5, date(2025, 1, 10)))  # 500

    settlement = pay_hamali(
        store, HamaliPaymentCreate(amount=1400, payment_date=date(2025, 1, 25))
    )

    assert settlement.settled_work_ids == [first.id]
    assert settlement.settled_amount == 1000
    assert settlement.unapplied_amount == 400

    pending = {w.id for w in list_hamali_work(store, PaymentStatus.pending)}
    assert pending == {middle.id, late.id}
    assert len(list_hamali_payments(store)) == 1


def test_bulk_payment_can_settle_everything(store):
    add_hamali_work(store, hamali(10, 10, date(2025, 1, 1)))
    add_hamali_work(store, hamali(10, 20, date(2025, 1, 2)))

    settlement = pay_hamali(store, HamaliPaymentCreate(amount=300))

    assert len(settlement.settled_work_ids) == 2
    assert settlement.unapplied_amount == 0
    assert list_hamali_work(store, PaymentStatus.pending) == []


def test_delete_unknown_hamali_work(store):
    with pytest.raises(NotFoundError):
        delete_hamali_work(store, "missing")


# -------------------------
# LABOUR
# -------------------------
def test_labour_wage_advance_and_payment(store):
    wage = add_labour_wage(
        store,
        LabourWageCreate(
            worker_name="Ramesh",
            days_worked=6,
            rate_per_day=500,
            advance_paid=1000,
            work_date=date(2025, 1, 7),
        ),
    )
    assert wage.total_amount == 3000
    assert wage.remaining_amount == 2000
    assert wage.payment_status == PaymentStatus.partial

    with pytest.raises(OverpaymentError):
        pay_labour_wage(store, wage.id, WagePaymentCreate(amount=2001))

    paid = pay_labour_wage(store, wage.id, WagePaymentCreate(amount=2000))
    assert paid.remaining_amount == 0
    assert paid.payment_status == PaymentStatus.paid


def test_labour_advance_above_total_is_rejected(store):
    with pytest.raises(OverpaymentError):
        add_labour_wage(
            store,
            LabourWageCreate(
                worker_name="Ramesh",
                days_worked=1,
                rate_per_day=500,
                advance_paid=600,
                work_date=date(2025, 1, 7),
            ),
        )


# -------------------------
# SUPERVISOR
# -------------------------
def test_supervisor_salary_by_month(store):
    jan = add_supervisor_salary(
        store,
        SupervisorSalaryCreate(supervisor_name="Venkat", monthly_salary=25000, month="2025-01"),
    )
    add_supervisor_salary(
        store,
        SupervisorSalaryCreate(supervisor_name="Venkat", monthly_salary=25000, month="2025-02"),
    )

    paid = pay_supervisor_salary(
        store, jan.id, WagePaymentCreate(amount=25000, payment_date=date(2025, 2, 1))
    )

    assert paid.payment_status == PaymentStatus.paid
    assert paid.balance_amount == 0
    assert [s.month for s in list_supervisor_salaries(store, "2025-02")] == ["2025-02"]


def test_supervisor_month_format():
    with pytest.raises(ValidationError):
        SupervisorSalaryCreate(supervisor_name="Venkat", monthly_salary=1, month="Jan 2025")


def test_payroll_summary(store):
    add_hamali_work(store, hamali(100, 10, date(2025, 1, 1)))
    add_hamali_work(store, hamali(100, 5, date(2025, 1, 2)))
    pay_hamali(store, HamaliPaymentCreate(amount=1000))
    add_labour_wage(
        store,
        LabourWageCreate(worker_name="R", days_worked=2, rate_per_day=400, work_date=date(2025, 1, 3)),
    )
    add_supervisor_salary(
        store,
        SupervisorSalaryCreate(supervisor_name="V", monthly_salary=20000, paid_amount=5000, month="2025-01"),
    )

    summary = payroll_summary(store)

    assert summary.hamali_total == 1500
    assert summary.hamali_pending == 500
    assert summary.hamali_paid_out == 1000
    assert summary.labour_remaining == 800
    assert summary.supervisor_balance == 15000
