"""
chunkstore.relay.submit
=======================

One-call submission: initial send (optionally split into relay-sized
batches), then a retry session for whatever failed.

Batch replies carry batch-local indexes; they are shifted by the batch offset
before merging. A batch whose submit raises is marked failed as a whole and
handed to the retry session with the rest. One `initial_delay` separates the
initial send from the session's first attempt.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence

from ..config import StoreConfig, load_config
from ..metrics import RELAY_SUBMISSIONS, TRANSACTIONS_RESOLVED
from ..tx.batch import batch_transactions
from ..tx.types import PreparedTransaction
from .retry import SleepFn, retry_failed_transactions
from .types import RecheckFn, Relay, RelaySubmitResult, SubmitError, coerce_result

log = logging.getLogger(__name__)


async def submit_with_retry(
    relay: Relay,
    transactions: Sequence[PreparedTransaction],
    *,
    config: Optional[StoreConfig] = None,
    recheck: Optional[RecheckFn] = None,
    batch: bool = True,
    sleep: SleepFn = asyncio.sleep,
) -> RelaySubmitResult:
    cfg = config or load_config()
    result = RelaySubmitResult()
    if not transactions:
        return result

    groups = batch_transactions(list(transactions), cfg.batch) if batch else [list(transactions)]
    failed: List[int] = []
    offset = 0
    for group in groups:
        index_map = tuple(range(offset, offset + len(group)))
        offset += len(group)
        try:
            reply = coerce_result(await relay.submit([tx.call for tx in group]))
        except Exception as e:  # noqa: BLE001
            log.warning("initial submit of %d calls failed: %s", len(group), e, exc_info=True)
            RELAY_SUBMISSIONS.labels(outcome="error").inc()
            result.errors.extend(SubmitError(index=i, error=str(e)) for i in index_map)
            failed.extend(index_map)
            continue
        RELAY_SUBMISSIONS.labels(outcome="ok").inc()
        failed.extend(result.merge(reply, index_map))

    log.debug("initial submission: %d ok, %d failed over %d batches",
              len(result.successful_indexes), len(failed), len(groups))

    TRANSACTIONS_RESOLVED.labels(outcome="succeeded").inc(len(result.successful_indexes))
    if not failed:
        return result

    if cfg.retry.max_retries > 0:
        # the session does not wait before its first attempt
        await sleep(cfg.retry.delay_for(1))
    retried = await retry_failed_transactions(
        relay,
        transactions,
        failed,
        config=cfg.retry,
        recheck=recheck,
        backend_wallet_address=result.backend_wallet_address,
        sleep=sleep,
    )
    result.transaction_hashes.extend(retried.transaction_hashes)
    result.successful_indexes.extend(retried.successful_indexes)
    result.errors.extend(retried.errors)
    result.failed_indexes = list(retried.failed_indexes)
    if retried.backend_wallet_address:
        result.backend_wallet_address = retried.backend_wallet_address
    return result


__all__ = ["submit_with_retry"]
