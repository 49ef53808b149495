"""
Formatters utility.

Fixed-point token amount formatting and JSON-safe amount rendering.
"""

from decimal import Decimal


def format_units(value: int, decimals: int) -> str:
    """
    Format an integer amount in smallest units as a decimal string.

    Uses integer division and remainder only, so no float rounding is
    involved at any magnitude.

    Args:
        value: Non-negative amount in smallest units
        decimals: Token decimals

    Returns:
        Decimal string without trailing zeros, e.g. "1.5" or "10"

    Examples:
        >>> format_units(1500000000000000000, 18)
        '1.5'
        >>> format_units(10 * 10**18, 18)
        '10'
        >>> format_units(1, 18)
        '0.000000000000000001'
    """
    if value < 0:
        raise ValueError(f"Token amounts are unsigned: {value}")
    if decimals == 0:
        return str(value)

    whole, frac = divmod(value, 10**decimals)
    if frac == 0:
        return str(whole)

    frac_str = str(frac).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{frac_str}"


def to_decimal_amount(value: int, decimals: int) -> Decimal:
    """
    Convert an integer amount in smallest units to an exact Decimal.

    Args:
        value: Non-negative amount in smallest units
        decimals: Token decimals

    Returns:
        Exact Decimal amount
    """
    return Decimal(format_units(value, decimals))


def format_amount(amount: Decimal) -> str:
    """
    Render a Decimal for API responses without exponent or trailing zeros.

    Args:
        amount: Amount to render

    Returns:
        Plain decimal string, "0" for zero

    Examples:
        >>> format_amount(Decimal("5.000000000000000000"))
        '5'
        >>> format_amount(Decimal("0E-18"))
        '0'
    """
    if amount == 0:
        return "0"
    text = format(amount, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
