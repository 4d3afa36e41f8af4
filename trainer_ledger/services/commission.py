"""Platform/trainer revenue split"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import NamedTuple, Optional, Union

from trainer_ledger.config import settings
from trainer_ledger.services.errors import InvalidAmount

Number = Union[Decimal, int, float, str]


class CommissionSplit(NamedTuple):
    commission: Decimal
    trainer_share: Decimal


def to_decimal(amount: Number) -> Decimal:
    """Convert an incoming amount to Decimal without binary float artifacts"""
    if isinstance(amount, bool):
        raise InvalidAmount(f"Amount must be a number, got {amount!r}", amount=amount)
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise InvalidAmount(f"Amount must be a number, got {amount!r}", amount=amount)
    if not value.is_finite():
        raise InvalidAmount(f"Amount must be finite, got {amount!r}", amount=amount)
    return value


def round_currency(value: Decimal, quantum: Optional[Decimal] = None) -> Decimal:
    """Round half up to the configured currency unit (whole rupees by default)"""
    return value.quantize(quantum or settings.CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


def compute_split(amount: Number, rate: Optional[Decimal] = None) -> CommissionSplit:
    """
    Split a payment into platform commission and trainer share.

    The trainer share is the exact complement of the rounded commission,
    so commission + trainer_share == amount always holds.

    >>> compute_split(Decimal("9999"))
    CommissionSplit(commission=Decimal('2000'), trainer_share=Decimal('7999'))
    """
    value = to_decimal(amount)
    if value <= 0:
        raise InvalidAmount(f"Amount must be greater than 0, got {value}", amount=value)

    commission_rate = settings.COMMISSION_RATE if rate is None else rate
    commission = round_currency(value * commission_rate)
    return CommissionSplit(commission=commission, trainer_share=value - commission)


_CENT = Decimal("0.01")


def quantize_money(value) -> Decimal:
    """Normalize a stored or aggregated amount to two decimal places"""
    if value is None:
        return Decimal("0.00")
    return to_decimal(value).quantize(_CENT)
