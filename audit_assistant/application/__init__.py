"""Application layer: service orchestrators and adapters."""
