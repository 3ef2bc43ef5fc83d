from datetime import date, timedelta
from decimal import Decimal

from ricemill.models.enums.payment_status import PaymentStatus
from ricemill.utils.decimal_utils import (
    ZERO,
    compute_balance as _balance,
    parse_decimal,
    parse_non_negative,
    sum_decimals,
)

GST_SLAB_RATES = {
    "exempt": Decimal("0"),
    "0%": Decimal("0"),
    "5%": Decimal("5"),
    "12%": Decimal("12"),
    "18%": Decimal("18"),
    "28%": Decimal("28"),
}


# =====================================================
# BALANCE / STATUS
# =====================================================
def compute_balance(total, paid) -> Decimal:
    return _balance(
        parse_decimal(total, "totalAmount"),
        parse_decimal(paid, "paidAmount"),
    )


def compute_payment_status(total, paid) -> PaymentStatus:
    total = parse_decimal(total, "totalAmount")
    paid = parse_decimal(paid, "paidAmount")

    if paid >= total:
        return PaymentStatus.paid
    if paid > 0:
        return PaymentStatus.partial
    return PaymentStatus.pending


# =====================================================
# DATES
# =====================================================
def compute_due_date(issue_date: date, term_days: int) -> date:
    return issue_date + timedelta(days=int(term_days))


def compute_days_overdue(due_date: date, today: date | None = None) -> int:
    """Signed day count; negative while the entry is not yet due."""
    today = today or date.today()
    return (today - due_date).days


def display_days_overdue(due_date: date, today: date | None = None) -> int:
    return max(compute_days_overdue(due_date, today), 0)


# =====================================================
# LINE ITEMS
# =====================================================
def line_item_total(quantity, rate, gst_rate_percent) -> dict[str, Decimal]:
    """GST is charged on the pre-tax amount only."""
    quantity = parse_non_negative(quantity, "quantity")
    rate = parse_non_negative(rate, "rate")
    gst_rate = parse_non_negative(gst_rate_percent, "gstRate")

    amount = quantity * rate
    gst_amount = amount * gst_rate / 100

    return {
        "amount": amount,
        "gst_amount": gst_amount,
        "total_amount": amount + gst_amount,
    }


def document_totals(items) -> dict[str, Decimal]:
    subtotal = sum_decimals(i["amount"] for i in items)
    gst_amount = sum_decimals(i["gst_amount"] for i in items)
    return {
        "subtotal": subtotal,
        "gst_amount": gst_amount,
        "total_amount": subtotal + gst_amount,
    }


def gst_rate_for_slab(slab: str | None) -> Decimal:
    # unknown slabs are treated as exempt
    if not slab:
        return ZERO
    return GST_SLAB_RATES.get(slab.strip().lower(), ZERO)
