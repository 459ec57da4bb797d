"""
chunkstore errors.

Typed exception hierarchy with structured metadata so callers can catch the
specific failure mode while still being able to catch the base
`ChunkStoreError`.

    from chunkstore.errors import PreparationError

    raise PreparationError("too many chunks", data={"chunks": 300, "max": 255})

All errors expose:
- .code : stable machine-readable code (snake_case)
- .data : optional structured payload (dict-like)
- .to_dict() : JSON-friendly rendering for logs and API layers

Decode failures and malformed metadata are *not* errors: the codec returns
None and the reference parser returns an empty list.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class ChunkStoreError(Exception):
    """
    Base class for chunkstore errors.

    Subclasses set `default_code`.
    """

    default_code = "chunkstore_error"

    def __init__(
        self,
        message: str = "",
        *,
        code: Optional[str] = None,
        data: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.data: Dict[str, Any] = dict(data) if data else {}

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.message:
            return f"{self.code}: {self.message}"
        return self.code

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message or None,
            "data": self.data or None,
        }


class PreparationError(ChunkStoreError):
    """
    Content or key cannot be turned into ledger calls (empty key, too many
    chunks, malformed call descriptor).
    """

    default_code = "preparation_failed"


class RelayError(ChunkStoreError):
    """
    Raised by relay implementations when a submission fails in transport
    (timeouts, rate limits, RPC errors). The retry session catches these per
    attempt.
    """

    default_code = "relay_failed"


class RetryInvariantError(ChunkStoreError):
    """
    The retry session was invoked in a way that breaks its contract, e.g. with
    no failed indexes and therefore no antecedent result to merge against.

    This is a programming error on the caller's side and is never retried.
    """

    default_code = "retry_invariant_violated"


class ConfigError(ChunkStoreError, ValueError):
    """Invalid configuration value (usually from the environment)."""

    default_code = "invalid_config"


__all__ = [
    "ChunkStoreError",
    "PreparationError",
    "RelayError",
    "RetryInvariantError",
    "ConfigError",
]
