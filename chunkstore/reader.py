"""
chunkstore.reader
=================

Read side: reassemble stored content and decide which prepared writes are
already on the ledger.

The ledger itself is reached through a `StorageReader` supplied by the
caller. Two lookups are needed:

- get_value(slot_id, operator) -> decoded text stored in the storage
  contract, or None when the slot is empty.
- get_chunks(chunk_id, operator) -> list of 0x-hex chunk payloads stored in
  the chunked-storage contract, or None / [] when absent.

A chunk that is not visible yet makes `read_content` return None; callers
treat that as transient (eventual consistency) and try again later.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence, Set, Tuple

from .codec.chunker import assemble
from .codec.references import (Reference, ReferenceKey, StorageKind,
                               detect_storage_kind, parse_references,
                               reference_key, resolve_operator)
from .keys import KeyFormat, storage_key_bytes
from .tx.types import PreparedTransaction, TxType
from .utils.bytes import hex_to_text

log = logging.getLogger(__name__)


class StorageReader(Protocol):
    async def get_value(self, slot_id: str, operator: str) -> Optional[str]: ...

    async def get_chunks(self, chunk_id: str, operator: str) -> Optional[List[str]]: ...


async def chunk_exists(reader: StorageReader, chunk_id: str, operator: str) -> bool:
    return bool(await reader.get_chunks(chunk_id, operator.lower()))


def _ordered(refs: Sequence[Reference]) -> List[Reference]:
    # Index orders chunks when every reference carries one; otherwise
    # document order is authoritative.
    if refs and all(r.index is not None for r in refs):
        return sorted(refs, key=lambda r: r.index)  # type: ignore[arg-type,return-value]
    return list(refs)


def _flush(run: List[str], pieces: List[str], slot: str) -> bool:
    """Assemble a run of consecutive chunk payloads onto *pieces*."""
    if not run:
        return True
    text = assemble(run)
    if text is None:
        log.debug("could not assemble %d chunks for slot %s", len(run), slot)
        return False
    pieces.append(text)
    run.clear()
    return True


async def read_content(
    reader: StorageReader,
    key: str,
    operator: str,
    *,
    key_format: Optional[KeyFormat] = None,
) -> Optional[str]:
    """
    Fetch the content written under *key* by *operator*.

    Direct writes come back as stored. Chunked writes are reassembled from
    their references: consecutive chunked-storage references form one
    compressed stream, while an ``s="d"`` reference contributes the storage
    contract's text as-is. Pieces are joined in reference order. A missing
    piece or an undecodable stream yields None.
    """
    owner = operator.lower()
    slot = storage_key_bytes(key, key_format)
    metadata = await reader.get_value(slot, owner)
    if metadata is None:
        return None
    if detect_storage_kind(metadata) is StorageKind.DIRECT:
        return metadata

    seen: Set[ReferenceKey] = set()
    pieces: List[str] = []
    run: List[str] = []
    for ref in _ordered(parse_references(metadata)):
        rk = reference_key(ref, owner)
        if rk in seen:
            log.debug("skipping duplicate reference %s", ref.hash)
            continue
        seen.add(rk)
        ref_operator = resolve_operator(ref, owner)

        if ref.is_direct:
            value = await reader.get_value(ref.hash, ref_operator)
            if value is None:
                log.info("value %s for slot %s not available yet", ref.hash, slot)
                return None
            if not _flush(run, pieces, slot):
                return None
            pieces.append(value)
            continue

        chunks = await reader.get_chunks(ref.hash, ref_operator)
        if not chunks:
            log.info("chunk %s for slot %s not available yet", ref.hash, slot)
            return None
        run.extend(chunks)

    if not _flush(run, pieces, slot):
        return None
    return "".join(pieces)


async def filter_existing(
    reader: StorageReader,
    transactions: Sequence[PreparedTransaction],
    operator: str,
) -> Tuple[List[PreparedTransaction], List[PreparedTransaction]]:
    """
    Split *transactions* into (to_send, skipped).

    A normal or metadata write is skipped only when the slot already holds
    exactly the prepared value; a chunked write is skipped when its chunk
    exists. Order is preserved in both lists.
    """
    owner = operator.lower()
    to_send: List[PreparedTransaction] = []
    skipped: List[PreparedTransaction] = []
    for tx in transactions:
        if tx.type is TxType.CHUNKED:
            stored = await chunk_exists(reader, tx.id, owner)
        else:
            current = await reader.get_value(tx.id, owner)
            stored = current is not None and current == hex_to_text(tx.call.args[2])
        (skipped if stored else to_send).append(tx)
    if skipped:
        log.info("%d of %d writes already stored", len(skipped), len(transactions))
    return to_send, skipped


__all__ = ["StorageReader", "chunk_exists", "read_content", "filter_existing"]
