"""
Unified validators for caller input.

Each validator returns a tuple whose first item says whether the input is
acceptable and whose last item is a human-readable reason when it is not.
JSON booleans are rejected wherever a number is expected.
"""
from decimal import Decimal, InvalidOperation
from typing import Any

from eth_utils import is_hex

ADDRESS_HEX_LENGTH = 40


def validate_wallet_address(address: Any) -> tuple[bool, str | None]:
    """
    Check that a value is a 0x-prefixed 20-byte hex address.

    Checksum casing is not enforced: addresses are compared in lower case
    everywhere.

    Examples:
        >>> validate_wallet_address("0x742d35Cc6634C0532925a3b844Bc9e7595f0bEb0")
        (True, None)
        >>> validate_wallet_address("742d35cc")
        (False, 'Address must start with 0x')
    """
    if not isinstance(address, str) or not address.strip():
        return False, "Address is empty"

    candidate = address.strip()
    if candidate[:2].lower() != "0x":
        return False, "Address must start with 0x"

    if len(candidate) != 2 + ADDRESS_HEX_LENGTH:
        return False, f"Address must have {ADDRESS_HEX_LENGTH} hex digits after 0x"

    if not is_hex(candidate):
        return False, "Address contains non-hex characters"

    return True, None


def normalize_wallet_address(address: str) -> str:
    """
    Lower-case form of a valid address, as stored and compared.

    Raises:
        ValueError: If the address does not validate
    """
    is_valid, error = validate_wallet_address(address)
    if not is_valid:
        raise ValueError(error)
    return address.strip().lower()


def validate_amount(
    amount: Any,
    min_val: Decimal = Decimal("0"),
) -> tuple[bool, Decimal | None, str | None]:
    """
    Parse a token amount given as JSON number or numeric string.

    A comma decimal separator is accepted. Floats are converted through
    their shortest repr, so 0.1 parses as Decimal("0.1").

    Returns:
        (True, value, None) or (False, None, reason)
    """
    if isinstance(amount, bool) or not isinstance(amount, (int, float, str)):
        return False, None, "Amount must be a number"

    text = str(amount).strip().replace(",", ".")
    if not text:
        return False, None, "Amount is empty"

    try:
        value = Decimal(text)
    except InvalidOperation:
        return False, None, f"Amount {text!r} is not a number"

    if not value.is_finite():
        return False, None, "Amount must be finite"
    if value < min_val:
        return False, None, f"Amount must not be below {min_val}"

    return True, value, None


def validate_int_in_range(
    value: Any,
    min_val: int,
    max_val: int,
) -> tuple[bool, int | None, str | None]:
    """
    Check an integer parameter such as a block count.

    Integral floats (JSON 5.0) are accepted as integers.

    Examples:
        >>> validate_int_in_range(5, 0, 10)
        (True, 5, None)
        >>> validate_int_in_range(5.5, 0, 10)
        (False, None, 'Value must be an integer')
    """
    if isinstance(value, float) and value.is_integer():
        value = int(value)

    if isinstance(value, bool) or not isinstance(value, int):
        return False, None, "Value must be an integer"

    if not min_val <= value <= max_val:
        return False, None, f"Value must be between {min_val} and {max_val}"

    return True, value, None
