"""HTTP API for Mecha Board."""
