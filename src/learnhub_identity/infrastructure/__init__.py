"""Infrastructure adapters for identity: persistence and OAuth providers."""
