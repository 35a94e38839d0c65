"""Shared helpers for factories."""

from uuid import uuid4


def short_suffix() -> str:
    """Short random suffix keeping generated names distinguishable."""
    return uuid4().hex[-8:]
