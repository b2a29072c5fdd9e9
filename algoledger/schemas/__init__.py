"""Schemas — Pydantic models validating data that crosses the storage boundary."""
