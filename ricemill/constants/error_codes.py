# ricemill/constants/error_codes.py

from enum import Enum


class ErrorCode(str, Enum):
    # ---------------- GENERIC ----------------
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # ---------------- NUMERIC INPUT ----------------
    INVALID_NUMERIC_INPUT = "INVALID_NUMERIC_INPUT"
    UNDEFINED_RATIO = "UNDEFINED_RATIO"

    # ---------------- INVENTORY ----------------
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    BATCH_NOT_FOUND = "BATCH_NOT_FOUND"

    # ---------------- FCI CONSIGNMENTS ----------------
    CONSIGNMENT_NOT_FOUND = "CONSIGNMENT_NOT_FOUND"
    DUPLICATE_ACK = "DUPLICATE_ACK"
    ACK_REQUIRED = "ACK_REQUIRED"

    # ---------------- LEDGER ----------------
    PURCHASE_NOT_FOUND = "PURCHASE_NOT_FOUND"
    SALE_NOT_FOUND = "SALE_NOT_FOUND"
    FREIGHT_NOT_FOUND = "FREIGHT_NOT_FOUND"
    OVERPAYMENT = "OVERPAYMENT"
    EMPTY_ITEMS = "EMPTY_ITEMS"

    # ---------------- PAYROLL ----------------
    PAYROLL_ENTRY_NOT_FOUND = "PAYROLL_ENTRY_NOT_FOUND"

    # ---------------- ELECTRICITY ----------------
    BILL_NOT_FOUND = "BILL_NOT_FOUND"

    # ---------------- PRODUCTION ----------------
    PRODUCTION_NOT_FOUND = "PRODUCTION_NOT_FOUND"
    PADDY_RECORD_NOT_FOUND = "PADDY_RECORD_NOT_FOUND"
    BY_PRODUCT_ENTRY_NOT_FOUND = "BY_PRODUCT_ENTRY_NOT_FOUND"

    # ---------------- RECONCILIATION ----------------
    RECONCILIATION_NOT_FOUND = "RECONCILIATION_NOT_FOUND"

    # ---------------- BACKUP ----------------
    INVALID_BACKUP = "INVALID_BACKUP"
