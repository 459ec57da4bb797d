"""
chunkstore.tx.prepare
=====================

Turn a (key, content) pair into the ordered list of ledger calls that stores
it.

Entry points
------------
- prepare_direct(key, label, content) -> PreparedTransaction
    One `normal` write to the storage contract:
    ``put(slot_id, label, hex(content))``.

- prepare_chunked(key, label, content, operator) -> list[PreparedTransaction]
    compress → chunk; one `chunked` write per chunk to the chunked-storage
    contract (``put(chunk_id, "", [chunk_hex])``), preceded by one `metadata`
    write of the serialized reference list under the key's slot. The
    metadata transaction is always first.

- prepare_write(key, label, content, operator) -> list[PreparedTransaction]
    Dispatch on `should_chunk`.

Every function takes an explicit `StoreConfig` (defaulting to the cached
environment config) for contract addresses and sizing.

Example
-------
    from chunkstore.tx.prepare import prepare_write

    txs = prepare_write("my-doc", "doc.md", text, operator="0xabc...")
    # txs[0] is the metadata (or the single normal write)
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..codec.chunker import encode_for_storage
from ..codec.references import Reference, format_references
from ..config import StoreConfig, load_config
from ..constants import PUT_FUNCTION, REFERENCE_VERSION
from ..errors import PreparationError
from ..keys import KeyFormat, storage_key_bytes
from ..metrics import CHUNKS_PER_WRITE, PREPARED_TRANSACTIONS
from ..strategy import should_chunk
from ..utils.bytes import text_to_hex
from .types import ContractCall, PreparedTransaction, TxType

log = logging.getLogger(__name__)


def _require_operator(operator: object, name: str = "operator") -> str:
    if not isinstance(operator, str) or not operator:
        raise PreparationError(f"{name} is required for chunked writes")
    return operator.lower()


def prepare_direct(
    key: str,
    label: str,
    content: str,
    *,
    config: Optional[StoreConfig] = None,
    key_format: Optional[KeyFormat] = None,
) -> PreparedTransaction:
    """Single `normal` write of *content* under *key*."""
    cfg = config or load_config()
    slot = storage_key_bytes(key, key_format)
    call = ContractCall(
        target=cfg.contracts.storage,
        function=PUT_FUNCTION,
        args=(slot, label, text_to_hex(content)),
    )
    PREPARED_TRANSACTIONS.labels(type=TxType.NORMAL.value).inc()
    return PreparedTransaction(id=slot, type=TxType.NORMAL, call=call)


def prepare_chunked(
    key: str,
    label: str,
    content: str,
    operator: str,
    *,
    metadata_operator: Optional[str] = None,
    config: Optional[StoreConfig] = None,
    key_format: Optional[KeyFormat] = None,
) -> List[PreparedTransaction]:
    """
    Metadata write followed by one chunk write per compressed chunk.

    *operator* is the account that will own the chunk writes;
    *metadata_operator* owns the metadata write and defaults to *operator*.
    References carry an explicit operator only when the two differ, since a
    reader resolves a missing operator to the metadata's own.
    """
    cfg = config or load_config()
    chunk_operator = _require_operator(operator)
    writer = _require_operator(metadata_operator, "metadata_operator") if metadata_operator else chunk_operator
    slot = storage_key_bytes(key, key_format)

    chunks = encode_for_storage(content, max_chunk_size=cfg.chunk_size)
    if len(chunks) > cfg.max_chunks:
        raise PreparationError(
            f"too many chunks: {len(chunks)} exceeds maximum of {cfg.max_chunks}",
            data={"chunks": len(chunks), "max": cfg.max_chunks},
        )

    ref_operator = chunk_operator if chunk_operator != writer else None
    refs: List[Reference] = []
    chunk_txs: List[PreparedTransaction] = []
    for c in chunks:
        call = ContractCall(
            target=cfg.contracts.chunked_storage,
            function=PUT_FUNCTION,
            args=(c.id, "", [c.hex]),
        )
        chunk_txs.append(PreparedTransaction(id=c.id, type=TxType.CHUNKED, call=call))
        refs.append(Reference(hash=c.id, version=REFERENCE_VERSION, index=c.index, operator=ref_operator))

    metadata = format_references(refs)
    meta_call = ContractCall(
        target=cfg.contracts.storage,
        function=PUT_FUNCTION,
        args=(slot, label, text_to_hex(metadata)),
    )
    meta_tx = PreparedTransaction(id=slot, type=TxType.METADATA, call=meta_call)

    PREPARED_TRANSACTIONS.labels(type=TxType.METADATA.value).inc()
    PREPARED_TRANSACTIONS.labels(type=TxType.CHUNKED.value).inc(len(chunk_txs))
    CHUNKS_PER_WRITE.observe(len(chunk_txs))
    log.debug("prepared chunked write slot=%s chunks=%d metadata_bytes=%d", slot, len(chunk_txs), len(metadata))
    return [meta_tx, *chunk_txs]


def prepare_write(
    key: str,
    label: str,
    content: str,
    operator: Optional[str] = None,
    *,
    metadata_operator: Optional[str] = None,
    config: Optional[StoreConfig] = None,
    key_format: Optional[KeyFormat] = None,
) -> List[PreparedTransaction]:
    """Direct write when the content is small, chunked write otherwise."""
    cfg = config or load_config()
    if should_chunk(content, threshold=cfg.chunk_threshold):
        return prepare_chunked(
            key,
            label,
            content,
            operator,  # type: ignore[arg-type]
            metadata_operator=metadata_operator,
            config=cfg,
            key_format=key_format,
        )
    return [prepare_direct(key, label, content, config=cfg, key_format=key_format)]


__all__ = ["prepare_direct", "prepare_chunked", "prepare_write"]
