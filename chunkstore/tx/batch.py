"""
chunkstore.tx.batch
===================

Split prepared calls into relay-sized batches.

The relay caps both the number of calls per request and the request body
size. Sizes are estimated from the JSON form of each call's args plus a fixed
per-call and per-request overhead. A single call larger than the byte limit
still gets a batch of its own (the relay will reject it with a clear error).

Batches preserve order, so the original index of an item is its batch offset
plus its position in the batch.
"""

from __future__ import annotations

import json
from typing import List, Optional, Sequence, TypeVar, Union

from ..config import BatchConfig
from ..constants import BATCH_CALL_OVERHEAD, BATCH_REQUEST_OVERHEAD
from .types import ContractCall, PreparedTransaction

T = TypeVar("T", ContractCall, PreparedTransaction)


def estimate_call_size(item: Union[ContractCall, PreparedTransaction]) -> int:
    call = item.call if isinstance(item, PreparedTransaction) else item
    d = call.to_dict()
    return len(json.dumps(d["args"], separators=(",", ":"))) + BATCH_CALL_OVERHEAD


def estimate_request_size(items: Sequence[Union[ContractCall, PreparedTransaction]]) -> int:
    return BATCH_REQUEST_OVERHEAD + sum(estimate_call_size(i) for i in items)


def batch_transactions(items: Sequence[T], config: Optional[BatchConfig] = None) -> List[List[T]]:
    """Greedy, order-preserving batching by count and estimated byte size."""
    cfg = config or BatchConfig()
    batches: List[List[T]] = []
    current: List[T] = []
    current_size = BATCH_REQUEST_OVERHEAD

    for item in items:
        size = estimate_call_size(item)
        if current and (len(current) >= cfg.max_count or current_size + size > cfg.max_bytes):
            batches.append(current)
            current = []
            current_size = BATCH_REQUEST_OVERHEAD
        current.append(item)
        current_size += size

    if current:
        batches.append(current)
    return batches


__all__ = ["estimate_call_size", "estimate_request_size", "batch_transactions"]
