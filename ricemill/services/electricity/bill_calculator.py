from decimal import Decimal

from ricemill.constants.electricity import (
    BILLING_DEMAND_FACTOR,
    CUSTOMER_CHARGES,
    DEFAULT_CONTRACT_DEMAND,
    ED_DUTY_RATE,
    ENERGY_CHARGE_PER_UNIT,
    FIXED_CHARGE_PER_KVA,
    FUEL_SURCHARGE_PER_UNIT,
    PF_PENALTY_RATE,
    PF_REBATE_RATE,
    PF_THRESHOLD,
)
from ricemill.core.exceptions import DivideByZeroError, InvalidNumericInputError
from ricemill.schemas.electricity.electricity_schemas import BillBreakdown
from ricemill.utils.decimal_utils import ZERO, parse_non_negative


def power_factor(kwh_consumed, kvah_consumed) -> Decimal | None:
    """kWh / kVAh, or ``None`` when nothing was consumed."""
    kwh = parse_non_negative(kwh_consumed, "kwhConsumed")
    kvah = parse_non_negative(kvah_consumed, "kvahConsumed")
    if kvah == 0:
        return None
    return kwh / kvah


def pf_adjustment(base: Decimal, pf: Decimal) -> Decimal:
    """Penalty below the threshold, rebate (negative) above it.

    Rates apply per 0.01 of deviation, on fixed plus energy charges.
    """
    if pf < PF_THRESHOLD:
        return base * (PF_THRESHOLD - pf) * 100 * PF_PENALTY_RATE
    if pf > PF_THRESHOLD:
        return -(base * (pf - PF_THRESHOLD) * 100 * PF_REBATE_RATE)
    return ZERO


def compute_bill(
    kwh_consumed,
    kvah_consumed,
    rmd,
    contract_demand=DEFAULT_CONTRACT_DEMAND,
) -> BillBreakdown:
    kwh = parse_non_negative(kwh_consumed, "kwhConsumed")
    kvah = parse_non_negative(kvah_consumed, "kvahConsumed")
    rmd = parse_non_negative(rmd, "rmd")
    contract_demand = parse_non_negative(contract_demand, "contractDemand")

    pf = power_factor(kwh, kvah)
    if pf is None:
        raise DivideByZeroError("kvahConsumed")

    billing_demand = max(contract_demand * BILLING_DEMAND_FACTOR, rmd)
    fixed = billing_demand * FIXED_CHARGE_PER_KVA
    energy = kwh * ENERGY_CHARGE_PER_UNIT
    fuel = kwh * FUEL_SURCHARGE_PER_UNIT
    ed_duty = (fixed + energy) * ED_DUTY_RATE
    adjustment = pf_adjustment(fixed + energy, pf)

    return BillBreakdown(
        kwh_consumed=kwh,
        kvah_consumed=kvah,
        power_factor=pf,
        billing_demand=billing_demand,
        fixed_charges=fixed,
        energy_charges=energy,
        fuel_surcharge=fuel,
        ed_duty=ed_duty,
        customer_charges=CUSTOMER_CHARGES,
        pf_adjustment=adjustment,
        bill_amount=fixed + energy + fuel + ed_duty + CUSTOMER_CHARGES + adjustment,
    )


def consumption(previous, current, field: str) -> Decimal:
    previous = parse_non_negative(previous, f"previous{field}")
    current = parse_non_negative(current, f"current{field}")
    if current < previous:
        raise InvalidNumericInputError(
            f"current{field}", current, "cannot be below the previous reading"
        )
    return current - previous


def compute_bill_from_readings(readings) -> BillBreakdown:
    return compute_bill(
        consumption(readings.previous_kwh, readings.current_kwh, "Kwh"),
        consumption(readings.previous_kvah, readings.current_kvah, "Kvah"),
        readings.rmd,
        readings.contract_demand,
    )
