from decimal import Decimal

import pytest

from trainer_ledger.services.commission import compute_split, quantize_money, round_currency
from trainer_ledger.services.errors import InvalidAmount


def test_split_rounds_commission_half_up_and_takes_complement() -> None:
    split = compute_split(Decimal("9999"))
    assert split.commission == Decimal("2000")
    assert split.trainer_share == Decimal("7999")
    assert split.commission + split.trainer_share == Decimal("9999")


@pytest.mark.parametrize("amount", ["1", "2.5", "499", "1234.56", "3999", "7499", "10000.01"])
def test_split_always_sums_to_amount(amount: str) -> None:
    split = compute_split(Decimal(amount))
    assert split.commission + split.trainer_share == Decimal(amount)


def test_half_rupee_commission_rounds_up() -> None:
    # 2.5 * 0.20 = 0.5
    assert compute_split(Decimal("2.5")).commission == Decimal("1")


def test_split_accepts_ints_and_floats_without_float_noise() -> None:
    assert compute_split(2500) == (Decimal("500"), Decimal("2000"))
    assert compute_split(0.1).trainer_share == Decimal("0.1")


def test_split_with_custom_rate() -> None:
    split = compute_split(Decimal("1000"), rate=Decimal("0.15"))
    assert split == (Decimal("150"), Decimal("850"))


@pytest.mark.parametrize("amount", [0, -1, Decimal("-0.01"), "abc", "NaN", True])
def test_split_rejects_non_positive_or_non_numeric(amount) -> None:
    with pytest.raises(InvalidAmount):
        compute_split(amount)


def test_round_currency_and_quantize_money() -> None:
    assert round_currency(Decimal("1999.5")) == Decimal("2000")
    assert round_currency(Decimal("1999.49")) == Decimal("1999")
    assert quantize_money(None) == Decimal("0.00")
    assert str(quantize_money(7999)) == "7999.00"
