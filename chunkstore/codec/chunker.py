"""
chunkstore • codec • chunker

Compress content, split the compressed bytes into bounded content-addressed
chunks, and reassemble them on read.

Layout
------
The compressed payload is a gzip stream (mtime pinned to 0, so identical input
always yields identical bytes) over the ASCII ``0x``-hex text of the UTF-8
content. This is the layout already stored on the ledger and expected by the
deployed readers.

API
---
- Chunk: dataclass(index, data: bytes, id: str)
- compress(content) -> bytes
- chunk(data, max_chunk_size=20000) -> list[Chunk]
- encode_for_storage(content, max_chunk_size=20000) -> list[Chunk]
- assemble(chunks) -> str | None
- estimate_chunk_count(content, max_chunk_size=20000) -> int

`assemble` never raises for bad data: corrupted, truncated, or misordered
chunks (and an empty list) all produce None.
"""

from __future__ import annotations

import gzip
import logging
import math
import zlib
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from ..constants import ESTIMATE_SAMPLE_BYTES, ESTIMATE_SAMPLE_WINDOWS, MAX_CHUNK_SIZE
from ..utils.bytes import BytesLike, from_hex, hex_to_text, text_to_hex, to_hex
from ..utils.hash import keccak256_hex

log = logging.getLogger(__name__)

#: gzip default level used by the reference writers.
COMPRESS_LEVEL = 6
#: gzip member framing: 10-byte header + 8-byte CRC32/ISIZE trailer.
GZIP_OVERHEAD = 18


@dataclass(frozen=True)
class Chunk:
    """A single content-addressed piece of a compressed payload."""

    index: int
    data: bytes
    id: str

    def __len__(self) -> int:
        return len(self.data)

    @property
    def hex(self) -> str:
        return to_hex(self.data)

    @classmethod
    def of(cls, index: int, data: BytesLike) -> "Chunk":
        raw = bytes(data)
        return cls(index=index, data=raw, id=keccak256_hex(raw))


ChunkLike = Union[Chunk, bytes, bytearray, memoryview, str]


# --------------------------------------------------------------------------- #
# Write side
# --------------------------------------------------------------------------- #


def _payload(content: str) -> bytes:
    return text_to_hex(content).encode("ascii")


def _gzip(payload: bytes) -> bytes:
    return gzip.compress(payload, compresslevel=COMPRESS_LEVEL, mtime=0)


def compress(content: str) -> bytes:
    """Deterministically compress *content*; inverse of the decode in `assemble`."""
    if not isinstance(content, str):
        raise TypeError(f"content must be str, got {type(content)!r}")
    return _gzip(_payload(content))


def chunk(data: BytesLike, max_chunk_size: int = MAX_CHUNK_SIZE) -> List[Chunk]:
    """
    Split *data* into order-preserving chunks of at most `max_chunk_size` bytes.

    Empty input still yields exactly one (empty) chunk.
    """
    if max_chunk_size <= 0:
        raise ValueError("max_chunk_size must be > 0")
    mv = memoryview(bytes(data))
    if len(mv) == 0:
        return [Chunk.of(0, b"")]
    return [
        Chunk.of(idx, mv[off : off + max_chunk_size])
        for idx, off in enumerate(range(0, len(mv), max_chunk_size))
    ]


def encode_for_storage(content: str, max_chunk_size: int = MAX_CHUNK_SIZE) -> List[Chunk]:
    """compress + chunk in one call."""
    return chunk(compress(content), max_chunk_size=max_chunk_size)


# --------------------------------------------------------------------------- #
# Read side
# --------------------------------------------------------------------------- #


def _chunk_bytes(c: ChunkLike) -> bytes:
    if isinstance(c, Chunk):
        return c.data
    if isinstance(c, (bytes, bytearray, memoryview)):
        return bytes(c)
    if isinstance(c, str):
        return from_hex(c)
    raise TypeError(f"unsupported chunk type: {type(c)!r}")


def assemble(chunks: Sequence[ChunkLike]) -> Optional[str]:
    """
    Concatenate chunk bytes in the given (index) order and decompress.

    Returns the original content, or None when the chunk set cannot be decoded.
    """
    if not chunks:
        return None
    try:
        blob = b"".join(_chunk_bytes(c) for c in chunks)
    except (TypeError, ValueError) as e:
        log.debug("assemble: bad chunk encoding: %s", e)
        return None
    if not blob:
        return None
    try:
        hex_text = gzip.decompress(blob).decode("ascii")
        if not hex_text.startswith("0x"):
            log.debug("assemble: decompressed payload is not 0x-hex")
            return None
        return hex_to_text(hex_text)
    except (OSError, EOFError, zlib.error, ValueError) as e:
        # gzip.BadGzipFile is an OSError; UnicodeDecodeError is a ValueError
        log.debug("assemble: decode failed over %d chunk(s): %s", len(chunks), e)
        return None


# --------------------------------------------------------------------------- #
# Estimation
# --------------------------------------------------------------------------- #


def estimate_chunk_count(
    content: str,
    max_chunk_size: int = MAX_CHUNK_SIZE,
    *,
    sample_bytes: int = ESTIMATE_SAMPLE_BYTES,
    windows: int = ESTIMATE_SAMPLE_WINDOWS,
) -> int:
    """
    Approximate ``len(chunk(compress(content)))`` without compressing everything.

    Small payloads are compressed outright (exact). Larger ones compress
    `windows` evenly spaced slices of `sample_bytes` each and extrapolate the
    ratio to the full payload length.
    """
    if max_chunk_size <= 0:
        raise ValueError("max_chunk_size must be > 0")
    payload = _payload(content)
    n = len(payload)
    windows = max(1, int(windows))

    if n <= sample_bytes * windows:
        compressed = len(_gzip(payload))
    else:
        step = (n - sample_bytes) // max(1, windows - 1)
        sample = b"".join(payload[i * step : i * step + sample_bytes] for i in range(windows))
        body = max(0, len(_gzip(sample)) - GZIP_OVERHEAD)
        compressed = GZIP_OVERHEAD + int(math.ceil(body * n / len(sample)))

    return max(1, math.ceil(compressed / max_chunk_size))


__all__ = [
    "Chunk",
    "ChunkLike",
    "compress",
    "chunk",
    "encode_for_storage",
    "assemble",
    "estimate_chunk_count",
]
