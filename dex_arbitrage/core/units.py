"""Fixed-point conversions between human token amounts and on-chain integers.

All conversions go through ``Decimal`` with enough precision for uint256
values, so no float rounding happens before an amount is submitted on chain.
Rounding is always truncation toward zero.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext

# uint256 has 78 decimal digits; leave headroom for the scaling exponent.
_PRECISION = 100


def _as_decimal(value: Decimal | int | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        raise TypeError("Float amounts are not accepted; pass a Decimal or str")
    try:
        return Decimal(value)
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Invalid amount: {value!r}") from exc


def to_integer(amount: Decimal | int | str, decimals: int) -> int:
    """Convert a token amount to its smallest-unit integer representation.

    ``to_integer(Decimal("1.5"), 6) == 1_500_000``. Digits beyond ``decimals``
    are truncated toward zero.
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")
    value = _as_decimal(amount)
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        scaled = value.scaleb(decimals)
        return int(scaled.to_integral_value(rounding=ROUND_DOWN))


def from_integer(raw: int, decimals: int) -> Decimal:
    """Convert a smallest-unit integer back to a token amount."""
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(int(raw)).scaleb(-decimals)


def unit_price(amount_out: int, quote_decimals: int, amount_in: Decimal) -> float:
    """Quote-token units received per one base-token unit."""
    if amount_in <= 0:
        raise ValueError("amount_in must be positive")
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return float(from_integer(amount_out, quote_decimals) / amount_in)
