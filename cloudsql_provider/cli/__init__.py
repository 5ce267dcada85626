"""Command line interface used by the orchestrator."""
