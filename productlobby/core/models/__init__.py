"""API-facing Pydantic models."""
