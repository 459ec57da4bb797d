"""Recheck collaborator backed by a `StorageReader`."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..reader import StorageReader, chunk_exists
from ..tx.types import PreparedTransaction, TxType
from .types import RecheckFn

log = logging.getLogger(__name__)


def make_storage_recheck(reader: StorageReader) -> RecheckFn:
    """
    Build a recheck that drops chunked writes whose chunk is already stored
    for the relay's wallet. Other write types are always retried, as is any
    chunk whose lookup fails. Without a wallet address nothing can be
    checked and every index is kept.
    """

    async def recheck(
        failed: List[int],
        transactions: Sequence[PreparedTransaction],
        wallet: Optional[str],
    ) -> List[int]:
        if not wallet:
            return list(failed)
        still: List[int] = []
        for i in failed:
            tx = transactions[i]
            if tx.type is not TxType.CHUNKED:
                still.append(i)
                continue
            try:
                exists = await chunk_exists(reader, tx.id, wallet)
            except Exception as e:  # noqa: BLE001
                log.warning("recheck lookup for chunk %s failed: %s", tx.id, e)
                exists = False
            if not exists:
                still.append(i)
        return still

    return recheck


__all__ = ["make_storage_recheck"]
