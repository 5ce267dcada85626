"""Google Cloud adapters."""

from .sqladmin_client import SQLAdminClient

__all__ = ["SQLAdminClient"]
