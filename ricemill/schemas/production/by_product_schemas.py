from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from ricemill.constants.production import BY_PRODUCT_DEFAULT_GST, ByProductType
from ricemill.models.enums.payment_status import PaymentMethod, PaymentStatus
from ricemill.schemas.base.types import (
    NonNegative,
    Number,
    OptionalNumber,
    Positive,
    RecordModel,
)


# ==============================
# PRODUCTION
# ==============================
class ByProductProduction(RecordModel):
    id: str
    production_date: date
    product_type: ByProductType
    product_name: str
    quantity: Positive
    correlated_acks: int = Field(0, alias="correlatedACKs")
    yield_per_ack: NonNegative = Field(Decimal("0"), alias="yieldPerACK")
    notes: Optional[str] = None


class ByProductProductionCreate(RecordModel):
    production_date: date
    product_type: ByProductType
    quantity: Positive
    notes: Optional[str] = None


class CorrelatedAcks(RecordModel):
    boiled_acks: int = Field(0, alias="boiledACKs")
    raw_acks: int = Field(0, alias="rawACKs")

    @property
    def total(self) -> int:
        return self.boiled_acks + self.raw_acks


# ==============================
# SALES
# ==============================
class ByProductSaleItem(RecordModel):
    id: str
    product_type: ByProductType
    product_name: str
    quantity: Positive
    rate: NonNegative
    gst_rate: NonNegative
    amount: NonNegative
    gst_amount: NonNegative
    total_amount: NonNegative


class ByProductSaleItemCreate(RecordModel):
    product_type: ByProductType
    quantity: Positive
    rate: NonNegative
    gst_rate: NonNegative = BY_PRODUCT_DEFAULT_GST


class ByProductSale(RecordModel):
    id: str
    sale_date: date
    invoice_number: str
    party_name: str
    party_phone: Optional[str] = None
    party_address: Optional[str] = None
    items: List[ByProductSaleItem] = Field(default_factory=list)
    subtotal: NonNegative
    gst_amount: NonNegative
    total_amount: NonNegative
    paid_amount: NonNegative = Decimal("0")
    balance_amount: Number
    payment_status: PaymentStatus = PaymentStatus.pending
    payment_terms: int = 30
    due_date: date
    notes: Optional[str] = None


class ByProductSaleCreate(RecordModel):
    sale_date: date
    invoice_number: str
    party_name: str
    party_phone: Optional[str] = None
    party_address: Optional[str] = None
    items: List[ByProductSaleItemCreate]
    payment_terms: int = Field(30, ge=0)
    notes: Optional[str] = None


# ==============================
# PAYMENTS
# ==============================
class ByProductPayment(RecordModel):
    id: str
    sale_id: str
    party_name: Optional[str] = None
    amount: Positive
    payment_date: date
    payment_method: PaymentMethod = PaymentMethod.cash
    reference_number: Optional[str] = None
    notes: Optional[str] = None


# ==============================
# STOCK / SUMMARY
# ==============================
class ByProductStock(RecordModel):
    product_type: ByProductType
    product_name: str
    total_produced: NonNegative = Decimal("0")
    total_sold: NonNegative = Decimal("0")
    current_stock: Number = Decimal("0")
    average_rate: NonNegative = Decimal("0")
    total_revenue: NonNegative = Decimal("0")
    last_sale_date: Optional[date] = None


class ByProductSummary(RecordModel):
    total_revenue: NonNegative
    total_paid: NonNegative
    pending_receivables: Number
    stock_value: Number
    overdue_sales: int
    products_in_stock: int
    average_yield_per_ack: OptionalNumber = Field(None, alias="averageYieldPerACK")
