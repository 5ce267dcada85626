from typing import Optional, Any


class InfrastructureError(Exception):
    """Base exception for infrastructure-related errors."""
    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.details = details


class GCPOperationError(InfrastructureError):
    """Raised when a Google Cloud API call fails."""
    def __init__(self, operation: str, status: Optional[int], message: str,
                 details: Optional[Any] = None):
        super().__init__(f"GCP {operation} failed ({status}): {message}", details)
        self.operation = operation
        self.status = status


class TransientOperationError(GCPOperationError):
    """Raised when the instance is busy with another operation; safe to retry."""
    pass


class OperationTimeoutError(InfrastructureError):
    """Raised when retries of a transient failure run out of time or attempts."""
    def __init__(self, operation: str, timeout_seconds: float, attempts: int,
                 elapsed_seconds: float, details: Optional[Any] = None):
        if elapsed_seconds >= timeout_seconds:
            message = (f"GCP {operation} did not succeed within {timeout_seconds:g}s "
                       f"({attempts} attempts)")
        else:
            message = (f"GCP {operation} gave up after {attempts} attempts "
                       f"({elapsed_seconds:.1f}s of {timeout_seconds:g}s elapsed)")
        super().__init__(message, details)
        self.operation = operation
        self.timeout_seconds = timeout_seconds
        self.attempts = attempts
        self.elapsed_seconds = elapsed_seconds


class CredentialsError(InfrastructureError):
    """Raised when there's an issue with credentials."""
    pass
