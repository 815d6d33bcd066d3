"""HTTP API for record boards."""
