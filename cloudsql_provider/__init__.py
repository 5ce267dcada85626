"""Open Cloud SQL Provider - Root Package.

This package exposes Google Cloud SQL read operations as declarative data
sources to an external infrastructure orchestrator.

Key Components:
    - application: Data source use cases (read databases, read database)
    - domain: Filter pipeline, projection and verification of databases
    - infrastructure: SQL Admin API client and logging
    - config: Configuration schemas and management
    - cli: Command line entry point invoked by the orchestrator

Usage:
    >>> cloudsql-provider databases read --input request.json
"""

__version__ = "1.0.0"
PACKAGE_NAME = "open-cloudsql-provider"
