"""API and domain data models (Pydantic)."""
