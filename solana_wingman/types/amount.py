"""
Token amount codec

Converts between human-facing decimal amounts and integer base units.
All arithmetic is done with Decimal; floats are only accepted through
their shortest string form.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Union

from ..errors import InvalidAmount

AmountLike = Union[str, int, float, Decimal]

LAMPORTS_PER_SOL = 1_000_000_000
SOL_DECIMALS = 9
U64_MAX = 2 ** 64 - 1


def _check_decimals(decimals) -> int:
    if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
        raise InvalidAmount(f"Invalid decimals: {decimals!r}", value=str(decimals))
    return decimals


def parse_display_amount(value: AmountLike) -> Decimal:
    """
    Parse a display amount into a finite, non-negative Decimal.

    Raises:
        InvalidAmount: empty, malformed, negative, NaN or infinite input
    """
    if isinstance(value, bool):
        raise InvalidAmount(f"Invalid amount: {value!r}", value=str(value))

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip().replace("_", "")
        if not text:
            raise InvalidAmount("Amount is empty", value=value)
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise InvalidAmount(f"Invalid amount: {value!r}", value=value)
    else:
        raise InvalidAmount(f"Invalid amount type: {type(value).__name__}", value=str(value))

    if not amount.is_finite():
        raise InvalidAmount(f"Amount must be finite: {value!r}", value=str(value))
    if amount < 0:
        raise InvalidAmount(f"Amount must not be negative: {value!r}", value=str(value))
    return amount


def to_base_units(display: AmountLike, decimals: int) -> int:
    """
    Convert a display amount to integer base units.

    Rounds half away from zero at the last base unit, so
    to_base_units("0.0000000005", 9) == 1.

    Args:
        display: Amount as str, Decimal, int or float
        decimals: Asset's declared decimal precision

    Returns:
        Integer base units, at most U64_MAX

    Raises:
        InvalidAmount: for negative, non-finite, malformed or
            out-of-range input
    """
    decimals = _check_decimals(decimals)
    amount = parse_display_amount(display)
    if not amount:
        return 0

    # Leading digit position of the scaled value, bounded before any scaling
    magnitude = amount.adjusted() + decimals
    if magnitude >= len(str(U64_MAX)):
        raise InvalidAmount(f"Amount exceeds the u64 range: {display}", value=str(display))
    if magnitude < -1:
        return 0

    # Wide enough to hold every digit of the scaled value exactly
    _, digits, exponent = amount.as_tuple()
    precision = len(digits) + abs(exponent) + decimals + 2
    with localcontext() as ctx:
        ctx.prec = max(precision, 28)
        scaled = amount.scaleb(decimals)
        base_units = int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))

    if base_units > U64_MAX:
        raise InvalidAmount(f"Amount exceeds the u64 range: {display}", value=str(display))
    return base_units


def to_display(base_units: int, decimals: int) -> str:
    """
    Render base units as a plain decimal string.

    Trailing fractional zeros and a dangling separator are dropped;
    never uses scientific notation.
    """
    decimals = _check_decimals(decimals)
    if isinstance(base_units, bool) or not isinstance(base_units, int):
        raise InvalidAmount(f"Base units must be an integer: {base_units!r}", value=str(base_units))
    if base_units < 0:
        raise InvalidAmount(f"Base units must not be negative: {base_units}", value=str(base_units))

    if decimals == 0:
        return str(base_units)

    whole, frac = divmod(base_units, 10 ** decimals)
    frac_str = str(frac).zfill(decimals).rstrip("0")
    if not frac_str:
        return str(whole)
    return f"{whole}.{frac_str}"


def lamports_to_sol(lamports: int) -> str:
    return to_display(lamports, SOL_DECIMALS)


def sol_to_lamports(sol: AmountLike) -> int:
    return to_base_units(sol, SOL_DECIMALS)
