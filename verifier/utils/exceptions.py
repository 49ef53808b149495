"""
Exception handling utilities.

Defines categorized exception types for deposit verification.
Request-level errors carry the HTTP status they are reported with.
"""


class DepositVerificationError(Exception):
    """Base exception for deposit verification failures."""

    http_status = 500


class ConfigurationError(DepositVerificationError):
    """Required endpoint or address settings are absent."""

    http_status = 500


class InvalidInput(DepositVerificationError):
    """Caller-supplied parameters are missing or malformed."""

    http_status = 400


class Unauthorized(DepositVerificationError):
    """No valid caller identity for an authenticated operation."""

    http_status = 401


class RpcError(DepositVerificationError):
    """Blockchain endpoint unreachable or returned a JSON-RPC error."""

    http_status = 500


class RpcTimeoutError(RpcError):
    """Blockchain RPC call timed out."""
    pass


class DecodeError(DepositVerificationError):
    """Malformed event log payload."""

    http_status = 500


class LedgerWriteError(DepositVerificationError):
    """Ledger insert or balance credit failed for a single event."""

    http_status = 500


def is_retryable(exc: Exception) -> bool:
    """
    Check if the caller may safely retry the whole request.

    Chain failures credit nothing beyond what is already durable, and
    crediting is idempotent per transaction hash.

    Args:
        exc: Exception to check

    Returns:
        True for RPC failures
    """
    return isinstance(exc, RpcError)
