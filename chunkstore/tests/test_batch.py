from __future__ import annotations

from chunkstore.config import BatchConfig
from chunkstore.constants import BATCH_REQUEST_OVERHEAD, STORAGE_CONTRACT
from chunkstore.tx.batch import (batch_transactions, estimate_call_size,
                                 estimate_request_size)
from chunkstore.tx.types import ContractCall


def _call(i: int, payload: int = 10) -> ContractCall:
    return ContractCall(target=STORAGE_CONTRACT, function="put", args=(f"0x{i:02x}", "", "0x" + "aa" * payload))


def test_count_limit_preserves_order():
    calls = [_call(i) for i in range(7)]
    batches = batch_transactions(calls, BatchConfig(max_count=3, max_bytes=10**9))
    assert [len(b) for b in batches] == [3, 3, 1]
    assert [c for b in batches for c in b] == calls


def test_byte_limit():
    calls = [_call(i, payload=1000) for i in range(4)]
    one = estimate_call_size(calls[0])
    cfg = BatchConfig(max_count=100, max_bytes=BATCH_REQUEST_OVERHEAD + 2 * one)
    batches = batch_transactions(calls, cfg)
    assert [len(b) for b in batches] == [2, 2]
    assert all(estimate_request_size(b) <= cfg.max_bytes for b in batches)


def test_oversized_call_gets_own_batch():
    calls = [_call(0), _call(1, payload=5000), _call(2)]
    batches = batch_transactions(calls, BatchConfig(max_count=100, max_bytes=2000))
    assert [len(b) for b in batches] == [1, 1, 1]


def test_empty_input():
    assert batch_transactions([]) == []
