"""
Custom exceptions for internal faults.

Business rule violations are reported as failed transaction results,
never raised. These exceptions cover what is left: bad configuration
and unexpected defects while processing an instruction.
"""
from typing import Any, Dict, Optional


class PaymentInstructionException(Exception):
    """Base exception for all payment instruction service errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize exception.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ProcessingError(PaymentInstructionException):
    """Raised when an instruction cannot be evaluated due to an internal fault."""
    pass


class ConfigurationError(PaymentInstructionException):
    """Raised when configuration is invalid."""
    pass
