from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from ricemill.models.enums.payment_status import PaymentMethod, PaymentStatus
from ricemill.schemas.base.types import NonNegative, Number, Positive, RecordModel


# ==============================
# LINE ITEMS
# ==============================
class LineItem(RecordModel):
    id: str
    item_name: str
    description: str = ""
    quantity: NonNegative
    unit: str
    rate: NonNegative
    gst_rate: NonNegative
    amount: NonNegative
    gst_amount: NonNegative
    total_amount: NonNegative


class LineItemCreate(RecordModel):
    item_name: str
    quantity: NonNegative
    unit: str = "kg"
    rate: NonNegative
    gst_rate: NonNegative = Decimal("0")
    # named slab such as "5%" or "exempt"; wins over gstRate when given
    gst_slab: Optional[str] = None


# ==============================
# SHARED MONEY FIELDS
# ==============================
class _TradeDocument(RecordModel):
    id: str
    items: List[LineItem] = Field(default_factory=list)
    subtotal: NonNegative
    gst_amount: NonNegative
    total_amount: NonNegative
    paid_amount: NonNegative = Decimal("0")
    balance_amount: Number
    payment_status: PaymentStatus = PaymentStatus.pending
    payment_terms: int = 30
    due_date: date
    notes: Optional[str] = None


class _TradeDocumentCreate(RecordModel):
    items: List[LineItemCreate]
    payment_terms: int = Field(30, ge=0)
    notes: Optional[str] = None


# ==============================
# PURCHASES
# ==============================
class Purchase(_TradeDocument):
    bill_number: str
    bill_date: date
    vendor_name: str
    vendor_gst: Optional[str] = Field(None, alias="vendorGST")
    vendor_address: Optional[str] = None
    vendor_phone: Optional[str] = None
    category: str = "gst"


class PurchaseCreate(_TradeDocumentCreate):
    bill_number: str
    bill_date: date
    vendor_name: str
    vendor_gst: Optional[str] = Field(None, alias="vendorGST")
    vendor_address: Optional[str] = None
    vendor_phone: Optional[str] = None
    category: str = "gst"


class PurchasePayment(RecordModel):
    id: str
    purchase_id: str
    amount: Positive
    payment_date: date
    payment_method: PaymentMethod = PaymentMethod.cash
    reference_number: Optional[str] = None
    notes: Optional[str] = None


# ==============================
# SALES
# ==============================
class SalesRecord(_TradeDocument):
    invoice_number: str
    invoice_date: date
    party_name: str
    party_gst: Optional[str] = Field(None, alias="partyGST")
    party_address: Optional[str] = None
    party_phone: Optional[str] = None
    lorry_number: Optional[str] = None


class SalesRecordCreate(_TradeDocumentCreate):
    invoice_number: str
    invoice_date: date
    party_name: str
    party_gst: Optional[str] = Field(None, alias="partyGST")
    party_address: Optional[str] = None
    party_phone: Optional[str] = None
    lorry_number: Optional[str] = None


class SalesPayment(RecordModel):
    id: str
    sales_id: str
    amount: Positive
    payment_date: date
    payment_method: PaymentMethod = PaymentMethod.cash
    reference_number: Optional[str] = None
    notes: Optional[str] = None


# ==============================
# PAYMENT INPUT
# ==============================
class PaymentCreate(RecordModel):
    amount: Positive
    payment_date: Optional[date] = None
    payment_method: PaymentMethod = PaymentMethod.cash
    reference_number: Optional[str] = None
    notes: Optional[str] = None


# ==============================
# OUTSTANDING
# ==============================
class OutstandingEntry(RecordModel):
    id: str
    kind: str
    reference: str
    party: str
    total_amount: NonNegative
    balance_amount: Number
    due_date: date
    days_overdue: int
    payment_status: PaymentStatus


class OutstandingSummary(RecordModel):
    total_payables: Number
    total_receivables: Number
    freight_due: Number
    overdue_payables: Number
    overdue_receivables: Number
    overdue_entries: List[OutstandingEntry] = Field(default_factory=list)
