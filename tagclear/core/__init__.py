"""
Core utilities shared across tagclear.

This package hosts:
- configuration helpers (env vars, database URL)
- the error kinds surfaced by the persistence layer
- logging setup for the entry points
"""
