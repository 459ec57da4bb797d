"""
chunkstore.keys
===============

Map a caller-chosen storage key onto the fixed-width (bytes32) slot id the
storage contracts index by.

Rules (matching the deployed contracts' client convention):

- A key already shaped like ``0x`` + 64 hex characters is used as-is
  (lower-cased) unless ``key_format="raw"``.
- Otherwise the key is lower-cased. Keys longer than 32 characters (or whose
  UTF-8 encoding exceeds 32 bytes) are hashed with Keccak-256; shorter keys are
  left-padded with zero bytes to 32 bytes.

The mapping is deterministic: the same key always yields the same slot id.
"""

from __future__ import annotations

from typing import Literal, Optional

from .errors import PreparationError
from .utils.bytes import is_hex32, to_hex
from .utils.hash import keccak256_text

KeyFormat = Literal["raw", "bytes32"]


def to_bytes32(text: str) -> str:
    """Left-pad the UTF-8 bytes of *text* to 32 bytes and return 0x-hex."""
    raw = text.encode("utf-8")
    if len(raw) > 32:
        raise PreparationError("value does not fit in 32 bytes", data={"length": len(raw)})
    return to_hex(raw.rjust(32, b"\x00"))


def _convert(key: str) -> str:
    lowered = key.lower()
    if len(lowered) > 32 or len(lowered.encode("utf-8")) > 32:
        return keccak256_text(lowered)
    return to_bytes32(lowered)


def storage_key_bytes(key: str, key_format: Optional[KeyFormat] = None) -> str:
    """
    Return the 0x-prefixed bytes32 slot id for *key*.

    key_format:
      - None      : auto-detect (bytes32 hex passes through, anything else converts)
      - "raw"     : always convert, even if the key looks like bytes32 hex
      - "bytes32" : use as-is (lower-cased); must already be bytes32 hex
    """
    if not isinstance(key, str) or key == "":
        raise PreparationError("storage key cannot be empty")

    if key_format == "bytes32":
        if not is_hex32(key.lower()):
            raise PreparationError("key is not a bytes32 hex string", data={"key": key})
        return key.lower()
    if key_format == "raw":
        return _convert(key)
    if key_format is not None:
        raise PreparationError(f"unknown key format: {key_format!r}")

    if is_hex32(key.lower()):
        return key.lower()
    return _convert(key)


__all__ = ["KeyFormat", "to_bytes32", "storage_key_bytes"]
