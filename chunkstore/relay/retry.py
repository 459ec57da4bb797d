"""
chunkstore.relay.retry
======================

Bounded retry session for relay submissions that partially failed.

Each iteration:
  1. optionally asks a `recheck` collaborator which of the failed writes are
     still missing on the ledger (writes that landed despite a reported
     failure are recorded as successful and dropped),
  2. waits an exponential backoff (no wait before the first attempt)::

        delay = min(max_delay, initial_delay * multiplier ** (attempt - 1))

  3. re-submits the remaining writes as one subset call, translating the
     relay's subset-local indexes back to the caller's indexes through a
     table frozen for that iteration.

A relay exception consumes the attempt and leaves the failures unchanged.
Running out of attempts is not an exception: whatever is still failing is
reported in `RelaySubmitResult.failed_indexes`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence

from ..config import RetryConfig, load_config
from ..errors import RetryInvariantError
from ..metrics import RELAY_SUBMISSIONS, RETRY_ATTEMPTS, TRANSACTIONS_RESOLVED
from ..tx.types import PreparedTransaction
from .types import RecheckFn, Relay, RelaySubmitResult, coerce_result

log = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


def _check_indexes(failed_indexes: Sequence[int], total: int) -> List[int]:
    if not failed_indexes:
        raise RetryInvariantError("retry session started with no failed indexes")
    out: List[int] = []
    for i in failed_indexes:
        if not isinstance(i, int) or isinstance(i, bool) or not (0 <= i < total):
            raise RetryInvariantError(
                f"failed index {i!r} is outside the transaction list",
                data={"index": i, "total": total},
            )
        if i not in out:
            out.append(i)
    return out


async def _recheck(
    recheck: RecheckFn,
    failed: List[int],
    transactions: Sequence[PreparedTransaction],
    wallet: Optional[str],
) -> List[int]:
    try:
        still = await recheck(list(failed), transactions, wallet)
    except Exception:  # noqa: BLE001
        log.warning("recheck failed; keeping %d failed indexes", len(failed), exc_info=True)
        return failed
    keep = set(still)
    return [i for i in failed if i in keep]


async def retry_failed_transactions(
    relay: Relay,
    transactions: Sequence[PreparedTransaction],
    failed_indexes: Sequence[int],
    *,
    config: Optional[RetryConfig] = None,
    recheck: Optional[RecheckFn] = None,
    backend_wallet_address: Optional[str] = None,
    sleep: SleepFn = asyncio.sleep,
) -> RelaySubmitResult:
    """
    Re-submit `transactions[i]` for each i in *failed_indexes* until they all
    succeed or `config.max_retries` attempts have been made.

    Raises RetryInvariantError when *failed_indexes* is empty or references a
    position outside *transactions*.
    """
    cfg = config or load_config().retry
    failed = _check_indexes(failed_indexes, len(transactions))
    result = RelaySubmitResult(backend_wallet_address=backend_wallet_address)
    attempt = 0

    while failed and attempt < cfg.max_retries:
        attempt += 1

        if recheck is not None:
            still = await _recheck(recheck, failed, transactions, result.backend_wallet_address)
            pending = set(still)
            cleared = [i for i in failed if i not in pending]
            if cleared:
                log.info("recheck found %d of %d writes already stored", len(cleared), len(failed))
                result.successful_indexes.extend(cleared)
                RETRY_ATTEMPTS.labels(outcome="recheck_cleared").inc()
            failed = still
            if not failed:
                break

        if attempt > 1:
            delay = cfg.delay_for(attempt)
            log.info("retry attempt %d/%d in %.2fs (%d pending)", attempt, cfg.max_retries, delay, len(failed))
            await sleep(delay)
        else:
            log.info("retry attempt %d/%d (%d pending)", attempt, cfg.max_retries, len(failed))

        index_map = tuple(failed)
        calls = [transactions[i].call for i in index_map]
        try:
            reply = coerce_result(await relay.submit(calls))
        except Exception as e:  # noqa: BLE001
            log.warning("relay submit failed on attempt %d: %s", attempt, e, exc_info=True)
            RELAY_SUBMISSIONS.labels(outcome="error").inc()
            RETRY_ATTEMPTS.labels(outcome="error").inc()
            continue

        RELAY_SUBMISSIONS.labels(outcome="ok").inc()
        RETRY_ATTEMPTS.labels(outcome="submitted").inc()
        failed = result.merge(reply, index_map)

    result.failed_indexes = list(failed)
    if failed:
        log.warning("retries exhausted after %d attempts; %d writes still failing", attempt, len(failed))
    TRANSACTIONS_RESOLVED.labels(outcome="succeeded").inc(len(result.successful_indexes))
    TRANSACTIONS_RESOLVED.labels(outcome="failed").inc(len(failed))
    return result


__all__ = ["retry_failed_transactions", "SleepFn"]
