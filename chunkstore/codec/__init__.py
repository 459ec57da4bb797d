"""
chunkstore.codec
================

Pure, side-effect-free helpers shared by the write and read paths.

Submodules
----------
- chunker    : compress / chunk / assemble / estimate_chunk_count
- references : parse and serialize the reference-tag metadata format
"""

from __future__ import annotations

from .chunker import (Chunk, assemble, chunk, compress, encode_for_storage,
                      estimate_chunk_count)
from .references import (Reference, StorageKind, contains_references,
                         detect_storage_kind, embed_tag, format_reference,
                         format_references, parse_references, reference_key,
                         resolve_operator)

__all__ = [
    # chunker
    "Chunk",
    "compress",
    "chunk",
    "encode_for_storage",
    "assemble",
    "estimate_chunk_count",
    # references
    "Reference",
    "StorageKind",
    "parse_references",
    "contains_references",
    "detect_storage_kind",
    "resolve_operator",
    "reference_key",
    "format_reference",
    "format_references",
    "embed_tag",
]
