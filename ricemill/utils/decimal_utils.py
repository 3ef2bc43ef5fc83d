# ricemill/utils/decimal_utils.py
from decimal import Decimal, InvalidOperation

from ricemill.core.exceptions import InvalidNumericInputError

ZERO = Decimal("0")


def parse_decimal(value, field: str = "value") -> Decimal:
    """Strictly parse a numeric input.

    Empty strings, ``None``, booleans, NaN and infinities are rejected with
    ``InvalidNumericInputError`` instead of leaking into downstream sums.
    """
    if value is None or isinstance(value, bool):
        raise InvalidNumericInputError(field, value, "is required")

    if isinstance(value, Decimal):
        result = value
    else:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise InvalidNumericInputError(field, value, "is required")
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise InvalidNumericInputError(field, value)

    if not result.is_finite():
        raise InvalidNumericInputError(field, value, "must be finite")
    return result


def parse_non_negative(value, field: str = "value") -> Decimal:
    result = parse_decimal(value, field)
    if result < 0:
        raise InvalidNumericInputError(field, value, "cannot be negative")
    return result


def parse_positive(value, field: str = "value") -> Decimal:
    result = parse_decimal(value, field)
    if result <= 0:
        raise InvalidNumericInputError(field, value, "must be greater than zero")
    return result


def compute_balance(total_amount: Decimal, total_paid: Decimal) -> Decimal:
    # no quantize: the balance must add back to the total exactly
    return total_amount - total_paid


def sum_decimals(values) -> Decimal:
    return sum(values, ZERO)
