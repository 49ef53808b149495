"""
Deposit services module.

Crediting engine and request-level verification orchestration.
"""

from .crediting_service import CreditingService, CreditResult
from .verification_service import (
    DepositConfig,
    VerificationResult,
    VerificationService,
    VerifyParams,
)


__all__ = [
    "CreditResult",
    "CreditingService",
    "DepositConfig",
    "VerificationResult",
    "VerificationService",
    "VerifyParams",
]
