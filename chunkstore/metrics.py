"""
Prometheus metrics for chunkstore.

Counters for:
- Prepared transactions by type (normal / metadata / chunked)
- Relay submissions by outcome (ok / error)
- Retry attempts by outcome (submitted / error / recheck_cleared)
- Transactions resolved by final outcome (succeeded / failed)

All metrics live on a package-local `REGISTRY` so importing chunkstore never
collides with an application's default registry. Expose them with:

    from prometheus_client import generate_latest
    from chunkstore.metrics import REGISTRY

    body = generate_latest(REGISTRY)
"""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram

REGISTRY = CollectorRegistry(auto_describe=True)

PREPARED_TRANSACTIONS = Counter(
    "chunkstore_prepared_transactions_total",
    "Ledger calls produced by transaction preparation",
    labelnames=("type",),
    registry=REGISTRY,
)

CHUNKS_PER_WRITE = Histogram(
    "chunkstore_chunks_per_write",
    "Number of chunks produced for one chunked write",
    buckets=(1, 2, 4, 8, 16, 32, 64, 128, 255),
    registry=REGISTRY,
)

RELAY_SUBMISSIONS = Counter(
    "chunkstore_relay_submissions_total",
    "Relay submit calls by outcome",
    labelnames=("outcome",),
    registry=REGISTRY,
)

RETRY_ATTEMPTS = Counter(
    "chunkstore_retry_attempts_total",
    "Retry session attempts by outcome",
    labelnames=("outcome",),
    registry=REGISTRY,
)

TRANSACTIONS_RESOLVED = Counter(
    "chunkstore_transactions_resolved_total",
    "Transactions whose submission finished, by final outcome",
    labelnames=("outcome",),
    registry=REGISTRY,
)

__all__ = [
    "REGISTRY",
    "PREPARED_TRANSACTIONS",
    "CHUNKS_PER_WRITE",
    "RELAY_SUBMISSIONS",
    "RETRY_ATTEMPTS",
    "TRANSACTIONS_RESOLVED",
]
