"""Pydantic Schemas for Request/Response Validation"""
from trainer_ledger.schemas.payment import (
    PaymentCompletedEvent,
    TransactionResponse,
    TransactionListResponse,
)
from trainer_ledger.schemas.wallet import (
    WalletResponse,
    WalletTransactionResponse,
    WalletTransactionHistoryResponse,
)
from trainer_ledger.schemas.withdrawal import (
    BankDetails,
    WithdrawalSubmitRequest,
    WithdrawalStatusUpdate,
    WithdrawalResponse,
)
from trainer_ledger.schemas.revenue import (
    MonthlyRevenueResponse,
    RevenueSummaryResponse,
    TrainerPayoutResponse,
    MarkPaidRequest,
    PayoutReceiptResponse,
)

__all__ = [
    "PaymentCompletedEvent",
    "TransactionResponse",
    "TransactionListResponse",
    "WalletResponse",
    "WalletTransactionResponse",
    "WalletTransactionHistoryResponse",
    "BankDetails",
    "WithdrawalSubmitRequest",
    "WithdrawalStatusUpdate",
    "WithdrawalResponse",
    "MonthlyRevenueResponse",
    "RevenueSummaryResponse",
    "TrainerPayoutResponse",
    "MarkPaidRequest",
    "PayoutReceiptResponse",
]
