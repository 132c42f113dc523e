"""Fixed-point amount utilities for the settlement ledger"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import Iterable, Union

from splitledger.domain.exceptions import PrecisionOverflowError

# Ledger precision: wallet-denominated amounts carry 6 fractional digits
LEDGER_PLACES = 6
QUANTUM = Decimal(1).scaleb(-LEDGER_PLACES)  # 0.000001

# Balances below this magnitude are treated as exactly zero
EPSILON = Decimal("0.000001")

# Tolerance for member shares vs. split total
SPLIT_TOLERANCE = Decimal("0.000001")

MAX_INTEGER_DIGITS = 18
MAX_AMOUNT = Decimal(10) ** MAX_INTEGER_DIGITS

AmountLike = Union[Decimal, int, float, str]


def to_amount(value: AmountLike) -> Decimal:
    """
    Convert a raw amount to Decimal and check it is representable.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not its binary
    expansion.

    Raises:
        PrecisionOverflowError: Not a finite number, or integer part wider
            than MAX_INTEGER_DIGITS
    """
    if isinstance(value, bool):
        raise PrecisionOverflowError(f"Not an amount: {value!r}")

    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError) as e:
            raise PrecisionOverflowError(f"Not an amount: {value!r}") from e

    return ensure_representable(amount)


def ensure_representable(amount: Decimal) -> Decimal:
    """Raise PrecisionOverflowError if amount falls outside the fixed-point range"""
    if not amount.is_finite():
        raise PrecisionOverflowError(f"Amount is not finite: {amount}")
    if abs(amount) >= MAX_AMOUNT:
        raise PrecisionOverflowError(
            f"Amount {amount} exceeds {MAX_INTEGER_DIGITS} integer digits"
        )
    return amount


def quantize(amount: Decimal) -> Decimal:
    """Round to ledger precision (banker's rounding)"""
    try:
        return amount.quantize(QUANTUM, rounding=ROUND_HALF_EVEN)
    except InvalidOperation as e:
        raise PrecisionOverflowError(f"Cannot quantize {amount}") from e


def is_zero(amount: Decimal, epsilon: Decimal = EPSILON) -> bool:
    """True when |amount| is below epsilon"""
    return abs(amount) < epsilon


def total(amounts: Iterable[Decimal]) -> Decimal:
    """Sum amounts starting from Decimal zero"""
    return sum(amounts, Decimal(0))
