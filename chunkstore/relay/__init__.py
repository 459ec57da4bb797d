"""
chunkstore.relay
================

Resilient submission through an external relay.

- types   : Relay protocol, RelaySubmitResult, SubmitError
- retry   : retry_failed_transactions (bounded backoff session)
- submit  : submit_with_retry (initial batched send + retry session)
- recheck : make_storage_recheck (skip writes that already landed)
"""

from .recheck import make_storage_recheck
from .retry import retry_failed_transactions
from .submit import submit_with_retry
from .types import (RecheckFn, Relay, RelaySubmitResult, RetryConfig,
                    SubmitError, coerce_result)

__all__ = [
    "Relay",
    "RelaySubmitResult",
    "SubmitError",
    "RecheckFn",
    "RetryConfig",
    "coerce_result",
    "retry_failed_transactions",
    "submit_with_retry",
    "make_storage_recheck",
]
