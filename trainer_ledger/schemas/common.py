from decimal import Decimal


def validate_money(v: Decimal) -> Decimal:
    if v <= 0:
        raise ValueError('Amount must be greater than 0')
    # Ensure max 2 decimal places
    if v.as_tuple().exponent < -2:
        raise ValueError('Amount cannot have more than 2 decimal places')
    return v
