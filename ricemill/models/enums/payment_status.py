# ricemill/models/enums/payment_status.py
import enum


class PaymentStatus(str, enum.Enum):
    pending = "pending"
    partial = "partial"
    paid = "paid"


class FreightPaymentStatus(str, enum.Enum):
    pending = "pending"
    advance_paid = "advance-paid"
    fully_paid = "fully-paid"


class PaymentMethod(str, enum.Enum):
    cash = "cash"
    cheque = "cheque"
    bank_transfer = "bank-transfer"
    upi = "upi"
    other = "other"
