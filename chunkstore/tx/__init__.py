"""
chunkstore.tx
=============

Transaction preparation for the storage contracts.

Submodules
----------
- types   : TxType, ContractCall, PreparedTransaction
- prepare : prepare_direct / prepare_chunked / prepare_write
- batch   : relay-sized batching of prepared calls
"""

from __future__ import annotations

from .batch import batch_transactions, estimate_call_size, estimate_request_size
from .prepare import prepare_chunked, prepare_direct, prepare_write
from .types import ContractCall, PreparedTransaction, TxType

__all__ = [
    "TxType",
    "ContractCall",
    "PreparedTransaction",
    "prepare_direct",
    "prepare_chunked",
    "prepare_write",
    "batch_transactions",
    "estimate_call_size",
    "estimate_request_size",
]
