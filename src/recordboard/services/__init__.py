"""Service layer for record board business logic."""
