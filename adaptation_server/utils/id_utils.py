"""Identifier helpers for store-generated UUID keys."""

import uuid


def normalize_identifier(value: object) -> str | None:
    """
    Return the canonical lowercase form of a UUID string, or None when value is not one.

    Stored ids are always lowercase, so lookups go through this before
    reaching the database.
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        canonical = str(uuid.UUID(value))
    except ValueError:
        return None
    return canonical if canonical == value.lower() else None


def is_valid_identifier(value: object) -> bool:
    """Return True when value is a UUID string in canonical form, in either case."""
    return normalize_identifier(value) is not None
