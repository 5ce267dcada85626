"""Application layer - use cases exposed to the orchestrator."""
