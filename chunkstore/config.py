"""
chunkstore configuration.

This module defines the configuration surface shared by preparation and
submission:
- Chunk sizing (chunk size on compressed bytes, threshold on raw length)
- Contract addresses for the storage and chunked-storage contracts
- Retry/backoff defaults
- Relay batching limits

All fields have sensible defaults (see `chunkstore.constants`) and can be
overridden via environment variables. Config objects are immutable and are
passed explicitly into preparation/submission calls; `load_config()` is only
a cached convenience for callers that do not build their own.

Environment variables (all optional):

  # Sizing
  CHUNKSTORE_CHUNK_SIZE=20000           # bytes (supports KB/KiB suffixes too)
  CHUNKSTORE_CHUNK_THRESHOLD=20000      # raw content length
  CHUNKSTORE_MAX_CHUNKS=255

  # Contracts
  CHUNKSTORE_STORAGE_CONTRACT=0x00000000db40fcb9f4466330982372e27fd7bbf5
  CHUNKSTORE_CHUNKED_STORAGE_CONTRACT=0x000000A822F09aF21b1951B65223F54ea392E6C6

  # Retry (seconds)
  CHUNKSTORE_RETRY_INITIAL_DELAY=1.0
  CHUNKSTORE_RETRY_MAX_DELAY=30.0
  CHUNKSTORE_RETRY_MULTIPLIER=2.0
  CHUNKSTORE_RETRY_MAX=3

  # Batching
  CHUNKSTORE_BATCH_MAX_COUNT=100
  CHUNKSTORE_BATCH_MAX_BYTES=900KB
"""

from __future__ import annotations

import os
import re
from dataclasses import asdict, dataclass, field, replace
from functools import lru_cache
from typing import Any, Dict, Optional

from . import constants as C
from .errors import ConfigError

# ------------------------------- helpers ------------------------------------


_SIZE_RE = re.compile(
    r"^\s*(?P<num>\d+(?:\.\d+)?)\s*(?P<unit>bytes?|b|kb|kib|mb|mib)?\s*$",
    re.IGNORECASE,
)
_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")

_UNITS = {
    "b": 1,
    "byte": 1,
    "bytes": 1,
    "kb": 1000,
    "kib": 1024,
    "mb": 1000**2,
    "mib": 1024**2,
}


def _parse_size(value: str, *, default: int) -> int:
    """Parse human sizes like '20000', '20KB', '1MiB' → bytes."""
    if not value:
        return default
    m = _SIZE_RE.match(value)
    if not m:
        raise ConfigError(f"Invalid size: {value!r}")
    unit = (m.group("unit") or "b").lower()
    return int(float(m.group("num")) * _UNITS[unit])


def _getenv(key: str, default: Optional[str] = None) -> Optional[str]:
    v = os.environ.get(key)
    return v if v is not None and v.strip() != "" else default


def _getenv_int(key: str, default: int) -> int:
    v = _getenv(key)
    if v is None:
        return default
    try:
        return int(v, 16) if v.strip().lower().startswith("0x") else int(v, 10)
    except ValueError as e:
        raise ConfigError(f"Invalid int for {key}: {v!r}") from e


def _getenv_float(key: str, default: float) -> float:
    v = _getenv(key)
    if v is None:
        return default
    try:
        return float(v)
    except ValueError as e:
        raise ConfigError(f"Invalid float for {key}: {v!r}") from e


def _check_address(name: str, value: str) -> str:
    if not _ADDRESS_RE.match(value):
        raise ConfigError(f"{name} must be a 0x-prefixed 20-byte address, got {value!r}")
    return value


# ------------------------------- config -------------------------------------


@dataclass(frozen=True)
class RetryConfig:
    """
    Backoff parameters for the retry session (seconds).

    initial_delay: delay before the second attempt's base computation.
    max_delay: upper bound for any single delay.
    backoff_multiplier: exponential scale factor per attempt.
    max_retries: number of attempts the session may consume.
    """

    initial_delay: float = C.RETRY_INITIAL_DELAY
    max_delay: float = C.RETRY_MAX_DELAY
    backoff_multiplier: float = C.RETRY_BACKOFF_MULTIPLIER
    max_retries: int = C.RETRY_MAX_RETRIES

    def validate(self) -> None:
        if self.initial_delay < 0 or self.max_delay < 0:
            raise ConfigError("retry delays must be >= 0")
        if self.backoff_multiplier < 1.0:
            raise ConfigError("backoff_multiplier must be >= 1.0")
        if self.max_retries < 0:
            raise ConfigError("max_retries must be >= 0")

    def delay_for(self, attempt: int) -> float:
        """
        Delay for the given attempt (1-based).
        attempt = 1 → initial_delay (the session skips sleeping before attempt 1)
        """
        a = max(1, int(attempt))
        raw = self.initial_delay * (self.backoff_multiplier ** (a - 1))
        return float(min(raw, self.max_delay))

    def merged(self, **overrides: Any) -> "RetryConfig":
        """Return a copy with every non-None override applied. Unknown keys are ignored."""
        known = {k: v for k, v in overrides.items() if v is not None and k in asdict(self)}
        cfg = replace(self, **known)
        cfg.validate()
        return cfg


@dataclass(frozen=True)
class ContractsConfig:
    """Addresses of the two storage contracts."""

    storage: str = C.STORAGE_CONTRACT
    chunked_storage: str = C.CHUNKED_STORAGE_CONTRACT

    def validate(self) -> None:
        _check_address("storage", self.storage)
        _check_address("chunked_storage", self.chunked_storage)


@dataclass(frozen=True)
class BatchConfig:
    """Relay request limits used when splitting a submission into batches."""

    max_count: int = C.BATCH_MAX_COUNT
    max_bytes: int = C.BATCH_MAX_BYTES

    def validate(self) -> None:
        if self.max_count <= 0:
            raise ConfigError("batch max_count must be > 0")
        if self.max_bytes <= 0:
            raise ConfigError("batch max_bytes must be > 0")


@dataclass(frozen=True)
class StoreConfig:
    """
    Top-level configuration.

    `chunk_size` bounds compressed chunk bytes; `chunk_threshold` applies to the
    raw content length when deciding whether to chunk at all. The two are
    independent on purpose.
    """

    chunk_size: int = C.MAX_CHUNK_SIZE
    chunk_threshold: int = C.CHUNK_THRESHOLD
    max_chunks: int = C.MAX_CHUNKS
    contracts: ContractsConfig = field(default_factory=ContractsConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)

    def validate(self) -> None:
        if self.chunk_size <= 0:
            raise ConfigError("chunk_size must be > 0")
        if self.chunk_threshold < 0:
            raise ConfigError("chunk_threshold must be >= 0")
        if not (1 <= self.max_chunks <= C.MAX_CHUNKS):
            raise ConfigError(f"max_chunks must be in 1..{C.MAX_CHUNKS}")
        self.contracts.validate()
        self.retry.validate()
        self.batch.validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_env(cls, prefix: str = "CHUNKSTORE_") -> "StoreConfig":
        """Build and validate a config from `{prefix}*` environment variables."""
        contracts = ContractsConfig(
            storage=_getenv(f"{prefix}STORAGE_CONTRACT", C.STORAGE_CONTRACT) or C.STORAGE_CONTRACT,
            chunked_storage=_getenv(f"{prefix}CHUNKED_STORAGE_CONTRACT", C.CHUNKED_STORAGE_CONTRACT)
            or C.CHUNKED_STORAGE_CONTRACT,
        )
        retry = RetryConfig(
            initial_delay=_getenv_float(f"{prefix}RETRY_INITIAL_DELAY", C.RETRY_INITIAL_DELAY),
            max_delay=_getenv_float(f"{prefix}RETRY_MAX_DELAY", C.RETRY_MAX_DELAY),
            backoff_multiplier=_getenv_float(f"{prefix}RETRY_MULTIPLIER", C.RETRY_BACKOFF_MULTIPLIER),
            max_retries=_getenv_int(f"{prefix}RETRY_MAX", C.RETRY_MAX_RETRIES),
        )
        batch = BatchConfig(
            max_count=_getenv_int(f"{prefix}BATCH_MAX_COUNT", C.BATCH_MAX_COUNT),
            max_bytes=_parse_size(_getenv(f"{prefix}BATCH_MAX_BYTES", "") or "", default=C.BATCH_MAX_BYTES),
        )
        cfg = cls(
            chunk_size=_parse_size(_getenv(f"{prefix}CHUNK_SIZE", "") or "", default=C.MAX_CHUNK_SIZE),
            chunk_threshold=_parse_size(
                _getenv(f"{prefix}CHUNK_THRESHOLD", "") or "", default=C.CHUNK_THRESHOLD
            ),
            max_chunks=_getenv_int(f"{prefix}MAX_CHUNKS", C.MAX_CHUNKS),
            contracts=contracts,
            retry=retry,
            batch=batch,
        )
        cfg.validate()
        return cfg


@lru_cache(maxsize=1)
def load_config() -> StoreConfig:
    """
    Load and validate configuration from the environment (cached). Clear the
    cache in tests via `load_config.cache_clear()` to observe env changes.
    """
    return StoreConfig.from_env()


__all__ = [
    "RetryConfig",
    "ContractsConfig",
    "BatchConfig",
    "StoreConfig",
    "load_config",
]
