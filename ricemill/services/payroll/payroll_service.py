from datetime import date
import logging

from ricemill.constants.collections import (
    HAMALI_PAYMENTS,
    HAMALI_WORK,
    LABOUR_WAGES,
    SUPERVISOR_SALARIES,
)
from ricemill.constants.error_codes import ErrorCode
from ricemill.core.exceptions import NotFoundError, OverpaymentError
from ricemill.models.enums.payment_status import PaymentStatus
from ricemill.schemas.payroll.payroll_schemas import (
    HamaliPayment,
    HamaliPaymentCreate,
    HamaliSettlement,
    HamaliWork,
    HamaliWorkCreate,
    LabourWage,
    LabourWageCreate,
    PayrollSummary,
    SupervisorSalary,
    SupervisorSalaryCreate,
    WagePaymentCreate,
)
from ricemill.services.ledger.balance_calculator import (
    compute_balance,
    compute_payment_status,
)
from ricemill.services.storage.collection_store import CollectionStore, transactional
from ricemill.utils.decimal_utils import ZERO, sum_decimals
from ricemill.utils.ids import new_id

logger = logging.getLogger(__name__)


def _load(store: CollectionStore, key: str, model):
    return [model.model_validate(r) for r in store.load(key)]


def _save(store: CollectionStore, key: str, records) -> None:
    store.save(key, [r.to_document() for r in records])


def _find(records, record_id: str, what: str):
    for record in records:
        if record.id == record_id:
            return record
    raise NotFoundError(f"{what} not found", ErrorCode.PAYROLL_ENTRY_NOT_FOUND)


# =====================================================
# HAMALI WORK
# =====================================================
@transactional
def add_hamali_work(store: CollectionStore, payload: HamaliWorkCreate) -> HamaliWork:
    work = HamaliWork(
        id=new_id(),
        total_amount=payload.quantity * payload.rate_per_unit,
        payment_status=PaymentStatus.pending,
        **payload.model_dump(),
    )
    records = _load(store, HAMALI_WORK, HamaliWork)
    records.append(work)
    _save(store, HAMALI_WORK, records)

    logger.info(
        "Hamali work recorded",
        extra={"work_id": work.id, "amount": str(work.total_amount)},
    )
    return work


def list_hamali_work(
    store: CollectionStore,
    status: PaymentStatus | None = None,
) -> list[HamaliWork]:
    works = _load(store, HAMALI_WORK, HamaliWork)
    if status:
        works = [w for w in works if w.payment_status == status]
    return works


@transactional
def delete_hamali_work(store: CollectionStore, work_id: str) -> HamaliWork:
    works = _load(store, HAMALI_WORK, HamaliWork)
    work = _find(works, work_id, "Hamali work")
    _save(store, HAMALI_WORK, [w for w in works if w.id != work_id])
    return work


@transactional
def pay_hamali(store: CollectionStore, payload: HamaliPaymentCreate) -> HamaliSettlement:
    """Record a bulk hamali payment and settle pending work oldest-first.

    Work is settled only in full; settlement stops at the first entry the
    remaining amount cannot cover. Whatever is left stays unapplied.
    """
    payment = HamaliPayment(
        id=new_id(),
        amount=payload.amount,
        payment_date=payload.payment_date or date.today(),
        payment_method=payload.payment_method,
        work_period=payload.work_period,
        notes=payload.notes,
    )

    works = _load(store, HAMALI_WORK, HamaliWork)
    pending = sorted(
        (w for w in works if w.payment_status == PaymentStatus.pending),
        key=lambda w: w.work_date,
    )

    remaining = payment.amount
    settled: set[str] = set()
    for work in pending:
        if remaining < work.total_amount:
            break
        remaining -= work.total_amount
        settled.add(work.id)

    works = [
        w.model_copy(update={"payment_status": PaymentStatus.paid}) if w.id in settled else w
        for w in works
    ]
    payments = _load(store, HAMALI_PAYMENTS, HamaliPayment)
    payments.append(payment)

    _save(store, HAMALI_WORK, works)
    _save(store, HAMALI_PAYMENTS, payments)

    logger.info(
        "Hamali payment recorded",
        extra={
            "payment_id": payment.id,
            "amount": str(payment.amount),
            "settled_works": len(settled),
            "unapplied": str(remaining),
        },
    )
    return HamaliSettlement(
        payment=payment,
        settled_work_ids=[w.id for w in pending if w.id in settled],
        settled_amount=payment.amount - remaining,
        unapplied_amount=remaining,
    )


def list_hamali_payments(store: CollectionStore) -> list[HamaliPayment]:
    return _load(store, HAMALI_PAYMENTS, HamaliPayment)


# =====================================================
# LABOUR WAGES
# =====================================================
def _labour_figures(total, advance) -> dict:
    return {
        "remaining_amount": compute_balance(total, advance),
        "payment_status": compute_payment_status(total, advance),
    }


@transactional
def add_labour_wage(store: CollectionStore, payload: LabourWageCreate) -> LabourWage:
    total = payload.days_worked * payload.rate_per_day
    if payload.advance_paid > total:
        raise OverpaymentError(payload.advance_paid, total)

    wage = LabourWage(
        id=new_id(),
        total_amount=total,
        **_labour_figures(total, payload.advance_paid),
        **payload.model_dump(),
    )
    records = _load(store, LABOUR_WAGES, LabourWage)
    records.append(wage)
    _save(store, LABOUR_WAGES, records)

    logger.info("Labour wage recorded", extra={"wage_id": wage.id, "total": str(total)})
    return wage


def list_labour_wages(store: CollectionStore) -> list[LabourWage]:
    return _load(store, LABOUR_WAGES, LabourWage)


@transactional
def pay_labour_wage(
    store: CollectionStore,
    wage_id: str,
    payload: WagePaymentCreate,
) -> LabourWage:
    wages = _load(store, LABOUR_WAGES, LabourWage)
    wage = _find(wages, wage_id, "Labour wage")

    if payload.amount > wage.remaining_amount:
        raise OverpaymentError(payload.amount, wage.remaining_amount)

    advance = wage.advance_paid + payload.amount
    updated = wage.model_copy(
        update={"advance_paid": advance, **_labour_figures(wage.total_amount, advance)}
    )
    _save(store, LABOUR_WAGES, [updated if w.id == wage_id else w for w in wages])
    return updated


@transactional
def delete_labour_wage(store: CollectionStore, wage_id: str) -> LabourWage:
    wages = _load(store, LABOUR_WAGES, LabourWage)
    wage = _find(wages, wage_id, "Labour wage")
    _save(store, LABOUR_WAGES, [w for w in wages if w.id != wage_id])
    return wage


# =====================================================
# SUPERVISOR SALARIES
# =====================================================
@transactional
def add_supervisor_salary(
    store: CollectionStore,
    payload: SupervisorSalaryCreate,
) -> SupervisorSalary:
    if payload.paid_amount > payload.monthly_salary:
        raise OverpaymentError(payload.paid_amount, payload.monthly_salary)

    salary = SupervisorSalary(
        id=new_id(),
        balance_amount=compute_balance(payload.monthly_salary, payload.paid_amount),
        payment_status=compute_payment_status(payload.monthly_salary, payload.paid_amount),
        **payload.model_dump(),
    )
    records = _load(store, SUPERVISOR_SALARIES, SupervisorSalary)
    records.append(salary)
    _save(store, SUPERVISOR_SALARIES, records)

    logger.info(
        "Supervisor salary recorded",
        extra={"salary_id": salary.id, "month": salary.month},
    )
    return salary


def list_supervisor_salaries(
    store: CollectionStore,
    month: str | None = None,
) -> list[SupervisorSalary]:
    salaries = _load(store, SUPERVISOR_SALARIES, SupervisorSalary)
    if month:
        salaries = [s for s in salaries if s.month == month]
    return salaries


@transactional
def pay_supervisor_salary(
    store: CollectionStore,
    salary_id: str,
    payload: WagePaymentCreate,
) -> SupervisorSalary:
    salaries = _load(store, SUPERVISOR_SALARIES, SupervisorSalary)
    salary = _find(salaries, salary_id, "Supervisor salary")

    if payload.amount > salary.balance_amount:
        raise OverpaymentError(payload.amount, salary.balance_amount)

    paid = salary.paid_amount + payload.amount
    updated = salary.model_copy(
        update={
            "paid_amount": paid,
            "balance_amount": compute_balance(salary.monthly_salary, paid),
            "payment_status": compute_payment_status(salary.monthly_salary, paid),
            "payment_date": payload.payment_date or date.today(),
        }
    )
    _save(
        store,
        SUPERVISOR_SALARIES,
        [updated if s.id == salary_id else s for s in salaries],
    )
    return updated


@transactional
def delete_supervisor_salary(store: CollectionStore, salary_id: str) -> SupervisorSalary:
    salaries = _load(store, SUPERVISOR_SALARIES, SupervisorSalary)
    salary = _find(salaries, salary_id, "Supervisor salary")
    _save(store, SUPERVISOR_SALARIES, [s for s in salaries if s.id != salary_id])
    return salary


# =====================================================
# SUMMARY
# =====================================================
def payroll_summary(store: CollectionStore) -> PayrollSummary:
    works = list_hamali_work(store)
    return PayrollSummary(
        hamali_total=sum_decimals(w.total_amount for w in works),
        hamali_pending=sum_decimals(
            w.total_amount for w in works if w.payment_status == PaymentStatus.pending
        ),
        hamali_paid_out=sum_decimals(p.amount for p in list_hamali_payments(store)),
        labour_remaining=sum_decimals(
            max(w.remaining_amount, ZERO) for w in list_labour_wages(store)
        ),
        supervisor_balance=sum_decimals(
            max(s.balance_amount, ZERO) for s in list_supervisor_salaries(store)
        ),
    )
