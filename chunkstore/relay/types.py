"""
chunkstore.relay.types
======================

Shapes exchanged with the relay collaborator.

The relay is external: anything with an async ``submit(calls)`` returning an
index-aligned report satisfies `Relay`. Reports use the wire names

    {"transactionHashes": [...], "successfulIndexes": [...],
     "failedIndexes": [...], "errors": [{"index": 0, "error": "..."}],
     "backendWalletAddress": "0x..."}

and are held as `RelaySubmitResult` on this side.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import (Any, Awaitable, Callable, Dict, List, Mapping, Optional,
                    Protocol, Sequence, Union)

from ..config import RetryConfig
from ..tx.types import ContractCall, PreparedTransaction

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmitError:
    index: int
    error: str

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "error": self.error}


@dataclass
class RelaySubmitResult:
    """
    Index-aligned outcome of one or more submissions.

    Starts empty and is merged into across attempts by the retry session.
    """

    transaction_hashes: List[str] = field(default_factory=list)
    successful_indexes: List[int] = field(default_factory=list)
    failed_indexes: List[int] = field(default_factory=list)
    errors: List[SubmitError] = field(default_factory=list)
    backend_wallet_address: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.failed_indexes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transactionHashes": list(self.transaction_hashes),
            "successfulIndexes": list(self.successful_indexes),
            "failedIndexes": list(self.failed_indexes),
            "errors": [e.to_dict() for e in self.errors],
            "backendWalletAddress": self.backend_wallet_address,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "RelaySubmitResult":
        return cls(
            transaction_hashes=[str(h) for h in d.get("transactionHashes") or []],
            successful_indexes=[int(i) for i in d.get("successfulIndexes") or []],
            failed_indexes=[int(i) for i in d.get("failedIndexes") or []],
            errors=[
                SubmitError(index=int(e["index"]), error=str(e.get("error", "")))
                for e in d.get("errors") or []
            ],
            backend_wallet_address=d.get("backendWalletAddress"),
        )

    def merge(self, reply: "RelaySubmitResult", index_map: Sequence[int]) -> List[int]:
        """
        Fold a reply for a subset submission into this result.

        `index_map[local]` is the original index of the subset's `local`-th
        call. Returns the original indexes that are still failing, in
        `index_map` order. Subset indexes the reply does not mention are
        treated as still failing.
        """

        def _orig(local: int) -> Optional[int]:
            if 0 <= local < len(index_map):
                return index_map[local]
            log.warning("relay reported out-of-range index %d (subset size %d)", local, len(index_map))
            return None

        succeeded = [o for o in (_orig(i) for i in reply.successful_indexes) if o is not None]
        self.transaction_hashes.extend(reply.transaction_hashes)
        self.successful_indexes.extend(succeeded)
        for err in reply.errors:
            o = _orig(err.index)
            if o is not None:
                self.errors.append(SubmitError(index=o, error=err.error))
        if reply.backend_wallet_address:
            self.backend_wallet_address = reply.backend_wallet_address

        done = set(succeeded)
        return [o for o in index_map if o not in done]


class Relay(Protocol):
    """Minimal interface expected from a relay transport."""

    async def submit(
        self, calls: Sequence[ContractCall]
    ) -> Union[RelaySubmitResult, Mapping[str, Any]]: ...


RecheckFn = Callable[
    [List[int], Sequence[PreparedTransaction], Optional[str]],
    Awaitable[List[int]],
]


def coerce_result(reply: Union[RelaySubmitResult, Mapping[str, Any]]) -> RelaySubmitResult:
    if isinstance(reply, RelaySubmitResult):
        return reply
    if isinstance(reply, Mapping):
        return RelaySubmitResult.from_dict(reply)
    raise TypeError(f"unexpected relay reply: {type(reply)!r}")


__all__ = [
    "SubmitError",
    "RelaySubmitResult",
    "Relay",
    "RecheckFn",
    "RetryConfig",
    "coerce_result",
]
