"""Infrastructure layer - logging and Google Cloud adapters."""
