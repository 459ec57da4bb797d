"""
chunkstore constants.

Canonical defaults shared by the codec, the preparation layer and the relay
layer. These values match the deployed storage contracts and are safe to
import from anywhere (no heavy imports).

Runtime overrides live in `chunkstore.config`; these constants define the
defaults that config falls back to.
"""

from __future__ import annotations

from .version import PROTOCOL_VERSION

# ------------------------------- sizing -------------------------------------

#: Maximum bytes per chunk accepted by the chunked-storage contract.
#: Decimal on purpose (20 KB, not 20 KiB).
MAX_CHUNK_SIZE: int = 20_000
#: Raw content length above which content is written as chunks.
CHUNK_THRESHOLD: int = 20_000
#: Chunked-storage contract refuses more than this many chunks per key.
MAX_CHUNKS: int = 255

#: Bytes sampled per window by the chunk-count estimator.
ESTIMATE_SAMPLE_BYTES: int = 16_384
#: Number of evenly spaced windows the estimator compresses.
ESTIMATE_SAMPLE_WINDOWS: int = 4

# ------------------------------ contracts -----------------------------------

#: Primary key/value storage contract (`put(bytes32 key, string text, bytes value)`).
STORAGE_CONTRACT: str = "0x00000000db40fcb9f4466330982372e27fd7bbf5"
#: Secondary chunk storage contract (`put(bytes32 key, string text, bytes[] chunks)`).
CHUNKED_STORAGE_CONTRACT: str = "0x000000A822F09aF21b1951B65223F54ea392E6C6"
#: Write function exposed by both contracts.
PUT_FUNCTION: str = "put"

# ----------------------------- references -----------------------------------

#: Tag name emitted when serializing references.
REFERENCE_TAG: str = "net"
#: Version written into each reference.
REFERENCE_VERSION: str = PROTOCOL_VERSION
#: Source tag marking a reference that points at the primary storage contract.
DIRECT_SOURCE: str = "d"

# ------------------------------- retries ------------------------------------

RETRY_INITIAL_DELAY: float = 1.0
RETRY_MAX_DELAY: float = 30.0
RETRY_BACKOFF_MULTIPLIER: float = 2.0
RETRY_MAX_RETRIES: int = 3

# ------------------------------- batching -----------------------------------

#: Relay accepts at most this many calls per request.
BATCH_MAX_COUNT: int = 100
#: Relay request body ceiling (bytes of JSON).
BATCH_MAX_BYTES: int = 900_000
#: Fixed JSON overhead per request and per call used by the size estimator.
BATCH_REQUEST_OVERHEAD: int = 300
BATCH_CALL_OVERHEAD: int = 200

__all__ = [
    "MAX_CHUNK_SIZE",
    "CHUNK_THRESHOLD",
    "MAX_CHUNKS",
    "ESTIMATE_SAMPLE_BYTES",
    "ESTIMATE_SAMPLE_WINDOWS",
    "STORAGE_CONTRACT",
    "CHUNKED_STORAGE_CONTRACT",
    "PUT_FUNCTION",
    "REFERENCE_TAG",
    "REFERENCE_VERSION",
    "DIRECT_SOURCE",
    "RETRY_INITIAL_DELAY",
    "RETRY_MAX_DELAY",
    "RETRY_BACKOFF_MULTIPLIER",
    "RETRY_MAX_RETRIES",
    "BATCH_MAX_COUNT",
    "BATCH_MAX_BYTES",
    "BATCH_REQUEST_OVERHEAD",
    "BATCH_CALL_OVERHEAD",
]
