from fastapi import APIRouter, Depends, Query

from ricemill.core.store import get_store
from ricemill.models.enums.payment_status import PaymentStatus
from ricemill.utils.response import APIResponse, ListData, list_data, success_response

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

from ricemill.services.payroll.payroll_service import (
    add_hamali_work,
    add_labour_wage,
    add_supervisor_salary,
    delete_hamali_work,
    delete_labour_wage,
    delete_supervisor_salary,
    list_hamali_payments,
    list_hamali_work,
    list_labour_wages,
    list_supervisor_salaries,
    pay_hamali,
    pay_labour_wage,
    pay_supervisor_salary,
    payroll_summary,
)

router = APIRouter(
    prefix="/payroll",
    tags=["Payroll"],
)


# =========================
# HAMALI
# =========================
@router.post("/hamali/work", response_model=APIResponse[HamaliWork])
def add_hamali_work_api(payload: HamaliWorkCreate, store=Depends(get_store)):
    return success_response("Hamali work recorded", add_hamali_work(store, payload))


@router.get("/hamali/work", response_model=APIResponse[ListData[HamaliWork]])
def list_hamali_work_api(
    store=Depends(get_store),
    status: PaymentStatus | None = Query(None),
):
    works = list_hamali_work(store, status)
    return success_response("Hamali work fetched", list_data(works))


@router.delete("/hamali/work/{work_id}", response_model=APIResponse[HamaliWork])
def delete_hamali_work_api(work_id: str, store=Depends(get_store)):
    return success_response("Hamali work deleted", delete_hamali_work(store, work_id))


@router.post("/hamali/payments", response_model=APIResponse[HamaliSettlement])
def pay_hamali_api(payload: HamaliPaymentCreate, store=Depends(get_store)):
    return success_response("Hamali payment recorded", pay_hamali(store, payload))


@router.get("/hamali/payments", response_model=APIResponse[ListData[HamaliPayment]])
def list_hamali_payments_api(store=Depends(get_store)):
    return success_response("Hamali payments fetched", list_data(list_hamali_payments(store)))


# =========================
# LABOUR
# =========================
@router.post("/labour", response_model=APIResponse[LabourWage])
def add_labour_wage_api(payload: LabourWageCreate, store=Depends(get_store)):
    return success_response("Labour wage recorded", add_labour_wage(store, payload))


@router.get("/labour", response_model=APIResponse[ListData[LabourWage]])
def list_labour_wages_api(store=Depends(get_store)):
    return success_response("Labour wages fetched", list_data(list_labour_wages(store)))


@router.post("/labour/{wage_id}/payments", response_model=APIResponse[LabourWage])
def pay_labour_wage_api(
    wage_id: str,
    payload: WagePaymentCreate,
    store=Depends(get_store),
):
    return success_response("Wage payment recorded", pay_labour_wage(store, wage_id, payload))


@router.delete("/labour/{wage_id}", response_model=APIResponse[LabourWage])
def delete_labour_wage_api(wage_id: str, store=Depends(get_store)):
    return success_response("Labour wage deleted", delete_labour_wage(store, wage_id))


# =========================
# SUPERVISORS
# =========================
@router.post("/supervisors", response_model=APIResponse[SupervisorSalary])
def add_supervisor_salary_api(payload: SupervisorSalaryCreate, store=Depends(get_store)):
    return success_response("Supervisor salary recorded", add_supervisor_salary(store, payload))


@router.get("/supervisors", response_model=APIResponse[ListData[SupervisorSalary]])
def list_supervisor_salaries_api(
    store=Depends(get_store),
    month: str | None = Query(None, description="YYYY-MM"),
):
    salaries = list_supervisor_salaries(store, month)
    return success_response("Supervisor salaries fetched", list_data(salaries))


@router.post("/supervisors/{salary_id}/payments", response_model=APIResponse[SupervisorSalary])
def pay_supervisor_salary_api(
    salary_id: str,
    payload: WagePaymentCreate,
    store=Depends(get_store),
):
    salary = pay_supervisor_salary(store, salary_id, payload)
    return success_response("Salary payment recorded", salary)


@router.delete("/supervisors/{salary_id}", response_model=APIResponse[SupervisorSalary])
def delete_supervisor_salary_api(salary_id: str, store=Depends(get_store)):
    return success_response("Supervisor salary deleted", delete_supervisor_salary(store, salary_id))


# =========================
# SUMMARY
# =========================
@router.get("/summary", response_model=APIResponse[PayrollSummary])
def payroll_summary_api(store=Depends(get_store)):
    return success_response("Payroll summary fetched", payroll_summary(store))
