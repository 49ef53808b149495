"""
Validators package.

Provides common validation functions for caller input.
"""

from verifier.validators.unified import (
    normalize_wallet_address,
    validate_amount,
    validate_int_in_range,
    validate_wallet_address,
)


__all__ = [
    "normalize_wallet_address",
    "validate_amount",
    "validate_int_in_range",
    "validate_wallet_address",
]
