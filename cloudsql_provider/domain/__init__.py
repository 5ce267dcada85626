"""
Domain Layer

This domain layer is organized by bounded contexts:
- core/: Base exceptions shared by every context
- base/: Ports implemented by the infrastructure layer
- database/: Cloud SQL databases data source context
"""

from .core.exceptions import (
    ConfigurationError,
    DomainException,
    ResourceNotFoundError,
    ValidationError,
)

__all__ = [
    "DomainException",
    "ValidationError",
    "ResourceNotFoundError",
    "ConfigurationError",
]
