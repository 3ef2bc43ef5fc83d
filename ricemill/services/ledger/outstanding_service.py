from datetime import date
import logging

from ricemill.schemas.ledger.trade_schemas import OutstandingEntry, OutstandingSummary
from ricemill.services.ledger.balance_calculator import compute_days_overdue
from ricemill.services.ledger.freight_service import list_freights
from ricemill.services.ledger.trade_service import list_purchases, list_sales
from ricemill.services.storage.collection_store import CollectionStore
from ricemill.utils.decimal_utils import ZERO, sum_decimals

logger = logging.getLogger(__name__)


def outstanding_entries(
    store: CollectionStore,
    today: date | None = None,
) -> list[OutstandingEntry]:
    """Open purchases and sales with a positive balance, most overdue first."""
    today = today or date.today()
    entries = []

    for p in list_purchases(store):
        if p.balance_amount > 0:
            entries.append(
                OutstandingEntry(
                    id=p.id,
                    kind="payable",
                    reference=p.bill_number,
                    party=p.vendor_name,
                    total_amount=p.total_amount,
                    balance_amount=p.balance_amount,
                    due_date=p.due_date,
                    days_overdue=compute_days_overdue(p.due_date, today),
                    payment_status=p.payment_status,
                )
            )

    for s in list_sales(store):
        if s.balance_amount > 0:
            entries.append(
                OutstandingEntry(
                    id=s.id,
                    kind="receivable",
                    reference=s.invoice_number,
                    party=s.party_name,
                    total_amount=s.total_amount,
                    balance_amount=s.balance_amount,
                    due_date=s.due_date,
                    days_overdue=compute_days_overdue(s.due_date, today),
                    payment_status=s.payment_status,
                )
            )

    return sorted(entries, key=lambda e: e.days_overdue, reverse=True)


def outstanding_summary(
    store: CollectionStore,
    today: date | None = None,
) -> OutstandingSummary:
    entries = outstanding_entries(store, today)
    overdue = [e for e in entries if e.days_overdue > 0]

    def _total(items, kind):
        return sum_decimals(e.balance_amount for e in items if e.kind == kind)

    freight_due = sum_decimals(
        max(f.balance_amount, ZERO) for f in list_freights(store)
    )

    summary = OutstandingSummary(
        total_payables=_total(entries, "payable"),
        total_receivables=_total(entries, "receivable"),
        freight_due=freight_due,
        overdue_payables=_total(overdue, "payable"),
        overdue_receivables=_total(overdue, "receivable"),
        overdue_entries=overdue,
    )

    logger.debug(
        "Outstanding summary computed",
        extra={"open_entries": len(entries), "overdue_entries": len(overdue)},
    )
    return summary
