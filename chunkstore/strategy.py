"""
Storage strategy selection: one direct write, or chunks plus a metadata record.

The threshold applies to the raw content length. Content that already looks
like a reference list is always chunked so it is never mistaken for a
metadata record on read.
"""

from __future__ import annotations

from .codec.references import contains_references
from .constants import CHUNK_THRESHOLD


def should_chunk(content: str, threshold: int = CHUNK_THRESHOLD) -> bool:
    """True iff ``len(content) > threshold`` or *content* contains reference tags."""
    return len(content) > threshold or contains_references(content)


__all__ = ["should_chunk"]
