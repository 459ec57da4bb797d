"""
chunkstore
==========

Store arbitrary-size content under a logical key on a size-limited ledger
(storage contracts) and read it back exactly.

Small content is written directly. Larger content is gzip-compressed, split
into content-addressed chunks and indexed by a compact metadata record of
reference tags. Writes are prepared deterministically and submitted through a
relay with bounded, backoff-driven retries.

Quick start
-----------
    from chunkstore import prepare_write, submit_with_retry

    txs = prepare_write("docs/readme", "README.md", text, operator="0xabc...")
    result = await submit_with_retry(relay, txs)
    if result.failed_indexes:
        ...  # re-queue or alert

Subpackages
-----------
- chunkstore.codec  : compression, chunking, reference tags
- chunkstore.tx     : transaction preparation and batching
- chunkstore.relay  : resilient submission
- chunkstore.reader : reassembly and idempotency filtering
"""

from __future__ import annotations

from .codec import (Chunk, Reference, StorageKind, assemble, chunk, compress,
                    contains_references, detect_storage_kind, embed_tag,
                    encode_for_storage, estimate_chunk_count,
                    format_reference, format_references, parse_references,
                    reference_key, resolve_operator)
from .config import (BatchConfig, ContractsConfig, RetryConfig, StoreConfig,
                     load_config)
from .errors import (ChunkStoreError, ConfigError, PreparationError,
                     RelayError, RetryInvariantError)
from .keys import storage_key_bytes, to_bytes32
from .reader import StorageReader, filter_existing, read_content
from .relay import (Relay, RelaySubmitResult, SubmitError,
                    make_storage_recheck, retry_failed_transactions,
                    submit_with_retry)
from .strategy import should_chunk
from .tx import (ContractCall, PreparedTransaction, TxType, batch_transactions,
                 prepare_chunked, prepare_direct, prepare_write)
from .version import __version__

__all__ = [
    "__version__",
    # codec
    "Chunk",
    "compress",
    "chunk",
    "encode_for_storage",
    "assemble",
    "estimate_chunk_count",
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
    # keys / strategy
    "storage_key_bytes",
    "to_bytes32",
    "should_chunk",
    # tx
    "TxType",
    "ContractCall",
    "PreparedTransaction",
    "prepare_direct",
    "prepare_chunked",
    "prepare_write",
    "batch_transactions",
    # relay
    "Relay",
    "RelaySubmitResult",
    "SubmitError",
    "retry_failed_transactions",
    "submit_with_retry",
    "make_storage_recheck",
    # reader
    "StorageReader",
    "read_content",
    "filter_existing",
    # config / errors
    "StoreConfig",
    "RetryConfig",
    "ContractsConfig",
    "BatchConfig",
    "load_config",
    "ChunkStoreError",
    "PreparationError",
    "RelayError",
    "RetryInvariantError",
    "ConfigError",
]
