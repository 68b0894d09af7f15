"""
Exception hierarchy for the Base0 application.

Every error carries an explicit discriminant (ErrorKind) and the HTTP status
it maps to, so callers branch on type instead of matching message text.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Discriminant carried by every Base0 error."""

    VALIDATION = "validation"
    WALLET = "wallet"
    CONFIGURATION = "configuration"
    UPSTREAM = "upstream"
    NETWORK = "network"
    PAYMENT = "payment"
    SIGNER_TIMING = "signer_timing"
    STORAGE = "storage"
    ACCESS = "access"
    NOT_FOUND = "not_found"


class Base0Exception(Exception):
    """Base exception for all Base0 application errors."""

    kind: ErrorKind = ErrorKind.STORAGE
    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(Base0Exception):
    """Raised when user input is missing or malformed."""

    kind = ErrorKind.VALIDATION
    status_code = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class WalletNotConnectedError(Base0Exception):
    """Raised when an operation needs a wallet address and none was given."""

    kind = ErrorKind.WALLET
    status_code = 401

    def __init__(self, message: str = "Wallet not connected - no address available") -> None:
        super().__init__(message)


class ConfigurationError(Base0Exception):
    """Raised when the server is missing required configuration."""

    kind = ErrorKind.CONFIGURATION
    status_code = 500


class UpstreamError(Base0Exception):
    """Raised when an upstream service answers with a non-success status."""

    kind = ErrorKind.UPSTREAM

    def __init__(
        self,
        message: str,
        status_code: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize upstream error.

        Args:
            message: Error message
            status_code: Upstream HTTP status, passed through to the caller
            details: Additional context (e.g. upstream body)
        """
        self.status_code = status_code
        super().__init__(message, details)


class GenerationError(Base0Exception):
    """Raised when the upstream response cannot be interpreted."""

    kind = ErrorKind.UPSTREAM
    status_code = 500


class NetworkError(Base0Exception):
    """Raised when an upstream service is unreachable after all retries."""

    kind = ErrorKind.NETWORK

    def __init__(
        self,
        message: str,
        timed_out: bool = False,
        attempts: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize network error.

        Args:
            message: Error message
            timed_out: Whether the final failure was a timeout
            attempts: Number of attempts made
            details: Additional context
        """
        details = details or {}
        if attempts is not None:
            details["attempts"] = attempts
        self.timed_out = timed_out
        self.status_code = 408 if timed_out else 503
        super().__init__(message, details)


class PaymentError(Base0Exception):
    """Raised when a storage payment step fails (revert, insufficient funds)."""

    kind = ErrorKind.PAYMENT
    status_code = 402

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize payment error.

        Args:
            message: Error message
            stage: Payment stage that failed (preflight, deposit, approval, upload)
            details: Additional context
        """
        details = details or {}
        if stage:
            details["stage"] = stage
        self.stage = stage
        super().__init__(message, details)


class SignerTimingError(Base0Exception):
    """Raised when the wallet signer never became available."""

    kind = ErrorKind.SIGNER_TIMING
    status_code = 409


class StorageError(Base0Exception):
    """Raised when a non-payment storage operation fails."""

    kind = ErrorKind.STORAGE
    status_code = 502


class ContentAccessError(Base0Exception):
    """Raised when a caller lacks (or has lost) access to registry content."""

    kind = ErrorKind.ACCESS
    status_code = 403

    def __init__(self, message: str, content_id: int | None = None) -> None:
        details = {"content_id": content_id} if content_id is not None else {}
        self.content_id = content_id
        super().__init__(message, details)


class NotFoundError(Base0Exception):
    """Raised when a requested record does not exist."""

    kind = ErrorKind.NOT_FOUND
    status_code = 404
