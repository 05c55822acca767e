"""
Core utilities shared across the vault package.

This package hosts configuration helpers (env vars, file paths, database URL)
and the logging setup used by services and scripts.
"""
