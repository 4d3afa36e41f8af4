"""Ledger error taxonomy

Every failure a caller can act on is a LedgerError subclass carrying a
stable ``code``, the HTTP status it maps to and optional details.
"""
from typing import Any, Optional


class LedgerError(Exception):
    """Base class for ledger and withdrawal failures"""
    code = "LedgerError"
    status_code = 400
    retryable = False

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
            "details": {k: str(v) for k, v in self.details.items()},
            "retryable": self.retryable,
        }


class InvalidAmount(LedgerError):
    """Raised when an amount is zero, negative or not a number"""
    code = "InvalidAmount"
    status_code = 422


class BelowMinimum(LedgerError):
    """Raised when a withdrawal is smaller than MIN_WITHDRAWAL"""
    code = "BelowMinimum"
    status_code = 422


class InsufficientBalance(LedgerError):
    """Raised when a withdrawal exceeds the available balance"""
    code = "InsufficientBalance"
    status_code = 409


class InvalidTransition(LedgerError):
    """Raised when a withdrawal status change is not allowed"""
    code = "InvalidTransition"
    status_code = 409


class AlreadyCompleted(LedgerError):
    """Raised when completing a withdrawal that was already paid out"""
    code = "AlreadyCompleted"
    status_code = 409


class StalePayoutAmount(LedgerError):
    """Raised when the recomputed pending payout no longer covers the amount"""
    code = "StalePayoutAmount"
    status_code = 409


class ConcurrencyConflict(LedgerError):
    """Raised when a concurrent writer won the race; safe to retry"""
    code = "ConcurrencyConflict"
    status_code = 409
    retryable = True


class OrderConflict(LedgerError):
    """Raised when an order id is replayed for a different trainer"""
    code = "OrderConflict"
    status_code = 409


class NotFound(LedgerError):
    """Raised for unknown trainer or withdrawal ids"""
    code = "NotFound"
    status_code = 404


class MalformedTimestamp(LedgerError):
    """Raised when a sale timestamp cannot be parsed (reporting only)"""
    code = "MalformedTimestamp"
    status_code = 422

    def __init__(self, raw: Optional[str], transaction_id: Optional[int] = None):
        super().__init__(
            f"Unparsable timestamp {raw!r}",
            raw=raw,
            transaction_id=transaction_id,
        )
