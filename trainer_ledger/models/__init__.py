"""Database Models"""
from trainer_ledger.models.trainer_account import TrainerAccount
from trainer_ledger.models.transaction import Transaction
from trainer_ledger.models.wallet_transaction import WalletTransaction
from trainer_ledger.models.withdrawal_request import WithdrawalRequest

__all__ = [
    "TrainerAccount",
    "Transaction",
    "WalletTransaction",
    "WithdrawalRequest",
]
