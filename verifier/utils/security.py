"""
Security utilities.

Masking helpers for log output and verification of caller access tokens.
"""

from jose import JWTError, jwt
from loguru import logger


def _mask(value: str | None, head: int, tail: int) -> str:
    """Keep head and tail characters of a hex identifier."""
    if not value or len(value) < head + tail:
        return "***"
    return f"{value[:head]}...{value[-tail:]}"


def mask_address(address: str | None) -> str:
    """
    Shorten an address for log lines.

    Examples:
        >>> mask_address("0x742d35cc6634c0532925a3b844bc9e7595f0beb0")
        '0x742d...beb0'
        >>> mask_address(None)
        '***'
    """
    return _mask(address, 6, 4)


def mask_tx_hash(tx_hash: str | None) -> str:
    """Shorten a transaction hash for log lines: 0x12345678...abcdef"""
    return _mask(tx_hash, 10, 6)


def decode_access_token(
    token: str,
    secret: str,
    algorithm: str = "HS256",
    audience: str | None = None,
) -> dict | None:
    """
    Decode and verify a bearer token issued by the identity provider.

    Args:
        token: Raw token, with or without "Bearer " prefix
        secret: Signing secret
        algorithm: Signing algorithm
        audience: Expected "aud" claim, not checked when None

    Returns:
        Token claims or None if the token is invalid or expired
    """
    if token.startswith("Bearer "):
        token = token.split(" ", 1)[1]

    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            audience=audience,
            options={"verify_aud": audience is not None},
        )
    except JWTError as e:
        logger.debug(f"Access token rejected: {e}")
        return None
