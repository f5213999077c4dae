"""Registry model, persistence and client settings."""
