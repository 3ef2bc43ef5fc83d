from decimal import Decimal

from fastapi import HTTPException
from ricemill.constants.error_codes import ErrorCode


class AppException(HTTPException):
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: ErrorCode,
        details: dict | None = None,
    ):
        super().__init__(status_code=status_code, detail=message)
        self.error_code = error_code
        self.details = details

    @property
    def message(self) -> str:
        return self.detail


class NotFoundError(AppException):
    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.NOT_FOUND):
        super().__init__(404, message, error_code)


class InvalidNumericInputError(AppException):
    """A required numeric field is empty, unparseable or out of range.

    Raised before any record is built, so callers never see NaN-like state.
    """

    def __init__(self, field: str, value=None, reason: str = "must be a number"):
        super().__init__(
            400,
            f"Invalid value for {field}: {reason}",
            ErrorCode.INVALID_NUMERIC_INPUT,
            {"field": field, "value": None if value is None else str(value)},
        )
        self.field = field
        self.value = value


class DivideByZeroError(AppException):
    """A ratio was requested over a zero denominator (e.g. kVAh consumed)."""

    def __init__(self, quantity: str):
        super().__init__(
            422,
            f"Cannot compute ratio: {quantity} is zero",
            ErrorCode.UNDEFINED_RATIO,
            {"quantity": quantity},
        )
        self.quantity = quantity


class InsufficientStockError(AppException):
    """A stock check failed; nothing was consumed.

    Raised for consignment materials, paddy and by-products alike.
    ``shortfalls`` maps material name to ``(required, available)``.
    """

    def __init__(self, shortfalls: dict[str, tuple[Decimal, Decimal]]):
        self.shortfalls = shortfalls
        details = {
            name: {"required": str(required), "available": str(available)}
            for name, (required, available) in shortfalls.items()
        }
        short = [
            f"{name} (required {required}, available {available})"
            for name, (required, available) in shortfalls.items()
            if available < required
        ]
        super().__init__(
            409,
            "Insufficient stock: " + ", ".join(short),
            ErrorCode.INSUFFICIENT_STOCK,
            details,
        )

    def required(self, material: str) -> Decimal:
        return self.shortfalls[material][0]

    def available(self, material: str) -> Decimal:
        return self.shortfalls[material][1]


class DuplicateAckError(AppException):
    def __init__(self, ack_number: str):
        super().__init__(
            409,
            f"Consignment with ACK number {ack_number} already exists",
            ErrorCode.DUPLICATE_ACK,
            {"ackNumber": ack_number},
        )


class OverpaymentError(AppException):
    def __init__(self, amount: Decimal, balance: Decimal):
        super().__init__(
            400,
            "Overpayment not allowed",
            ErrorCode.OVERPAYMENT,
            {"amount": str(amount), "balance": str(balance)},
        )


class InvalidBackupError(AppException):
    def __init__(
        self,
        message: str = "Invalid backup file format",
        details: dict | None = None,
    ):
        super().__init__(400, message, ErrorCode.INVALID_BACKUP, details)
