"""
Fixed-point rendering of raw token amounts and pool prices.

Amounts are rendered with four decimal places; prices are computed as
scaled integers (multiply before divide with ``PRICE_SCALE``) so that large
reserve integers never pass through binary floating point.
"""

import logging
from typing import Optional, Union

logger = logging.getLogger(__name__)

AMOUNT_PLACES = 4
PRICE_PLACES = 2
PRICE_SCALE = 10**12

AMOUNT_FALLBACK = "0.0000"
PRICE_PLACEHOLDER = "N/A"

GWEI = 10**9

RawAmount = Union[int, str]


def _to_int(value: RawAmount) -> int:
    """Coerce a raw on-chain quantity (int, decimal string or 0x-hex string) to int."""
    if isinstance(value, bool):
        raise TypeError("bool is not a token amount")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.lower().startswith("0x"):
            return int(text, 16)
        return int(text)
    raise TypeError(f"Unsupported amount type: {type(value).__name__}")


def _render_ratio(numerator: int, denominator: int, places: int) -> str:
    """Render numerator/denominator with ``places`` decimals, rounding half up."""
    if denominator <= 0:
        raise ZeroDivisionError("non-positive denominator")
    sign = "-" if numerator < 0 else ""
    unit = 10**places
    rounded = (abs(numerator) * unit * 2 + denominator) // (denominator * 2)
    whole, frac = divmod(rounded, unit)
    if places == 0:
        return f"{sign}{whole}"
    return f"{sign}{whole}.{frac:0{places}d}"


def format_amount(raw_amount: RawAmount, decimals: int = 18) -> str:
    """
    Render a raw token amount as a 4-decimal string.

    Args:
        raw_amount: Integer amount in the token's smallest unit
        decimals: Token decimals (0-255)

    Returns:
        Display string, or ``"0.0000"`` for malformed input
    """
    try:
        if isinstance(decimals, bool) or not isinstance(decimals, int) or not 0 <= decimals <= 255:
            raise ValueError(f"invalid decimals: {decimals!r}")
        return _render_ratio(_to_int(raw_amount), 10**decimals, AMOUNT_PLACES)
    except (TypeError, ValueError, ArithmeticError) as e:
        logger.debug(f"Falling back for amount {raw_amount!r}: {e}")
        return AMOUNT_FALLBACK


def format_scaled(raw_amount: RawAmount, scale_divisor: int) -> str:
    """
    Render ``raw_amount / scale_divisor`` with four decimals using integer math.

    Returns ``"0.0000"`` for malformed input or a non-positive divisor.
    """
    try:
        return _render_ratio(_to_int(raw_amount), _to_int(scale_divisor), AMOUNT_PLACES)
    except (TypeError, ValueError, ArithmeticError) as e:
        logger.debug(f"Falling back for scaled amount {raw_amount!r}/{scale_divisor!r}: {e}")
        return AMOUNT_FALLBACK


def compute_price_scaled(
    reserve_base: int,
    reserve_quote: int,
    base_decimals: int,
    quote_decimals: int,
) -> Optional[int]:
    """
    Price of one base token in quote tokens, multiplied by ``PRICE_SCALE``.

    price = (reserve_quote * SCALE * 10^base_decimals) / (reserve_base * 10^quote_decimals)

    Returns:
        Scaled integer price, or None when the base reserve is empty
    """
    denominator = reserve_base * 10**quote_decimals
    if denominator <= 0:
        return None
    return (reserve_quote * PRICE_SCALE * 10**base_decimals) // denominator


def format_price(scaled_price: Optional[int], places: int = PRICE_PLACES) -> str:
    """Render a ``PRICE_SCALE``-scaled price, or the placeholder when undefined."""
    if scaled_price is None:
        return PRICE_PLACEHOLDER
    try:
        return _render_ratio(scaled_price, PRICE_SCALE, places)
    except (TypeError, ArithmeticError):
        return PRICE_PLACEHOLDER


def price_string(
    reserve_base: int,
    reserve_quote: int,
    base_decimals: int,
    quote_decimals: int,
) -> str:
    """Compute and render a pool price in one step; never raises."""
    try:
        scaled = compute_price_scaled(reserve_base, reserve_quote, base_decimals, quote_decimals)
    except (TypeError, ValueError, ArithmeticError) as e:
        logger.warning(f"Price computation failed: {e}")
        return PRICE_PLACEHOLDER
    return format_price(scaled)


def format_gas_price(wei: Optional[RawAmount]) -> str:
    """Render a gas price in gwei with two decimals."""
    if wei is None:
        return ""
    try:
        return f"{_render_ratio(_to_int(wei), GWEI, 2)} gwei"
    except (TypeError, ValueError, ArithmeticError):
        return ""
