"""Domain ports - interfaces implemented by the infrastructure layer."""

from .database_port import DatabaseFetcherPort

__all__ = ["DatabaseFetcherPort"]
