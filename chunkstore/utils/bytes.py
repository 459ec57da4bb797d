from __future__ import annotations

from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]


def ensure_bytes(data: Union[BytesLike, str]) -> bytes:
    """
    Ensure input is bytes.

    Accepts:
      - bytes / bytearray / memoryview  -> bytes(data)
      - str: treated as hex; optional '0x' prefix; even-length enforced

    Raises:
      ValueError on invalid hex strings.
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        return from_hex(data)
    raise TypeError(f"Unsupported type for ensure_bytes: {type(data)!r}")


def to_hex(b: BytesLike, prefix: bool = True) -> str:
    """
    Bytes -> hex string (lowercase). Prefix with '0x' by default.
    """
    s = bytes(b).hex()
    return f"0x{s}" if prefix else s


def from_hex(s: str) -> bytes:
    """
    Hex string (optionally '0x' prefixed) -> bytes.

    Enforces even-length (nibbles must pair to bytes) and is case agnostic.
    """
    if not isinstance(s, str):
        raise TypeError("from_hex expects a string")
    if s.startswith(("0x", "0X")):
        s = s[2:]
    if len(s) % 2 != 0:
        raise ValueError("hex string must have even length")
    try:
        return bytes.fromhex(s)
    except ValueError as e:
        raise ValueError(f"invalid hex string: {e}") from e


def text_to_hex(text: str) -> str:
    """UTF-8 text -> 0x-prefixed hex (the ledger's `bytes` argument form)."""
    return to_hex(text.encode("utf-8"))


def hex_to_text(s: str) -> str:
    """0x-prefixed hex -> UTF-8 text. Raises ValueError/UnicodeDecodeError on bad input."""
    return from_hex(s).decode("utf-8")


def is_hex32(s: str) -> bool:
    """True for a 0x-prefixed 32-byte hex string (66 characters)."""
    if not isinstance(s, str) or len(s) != 66 or not s.startswith("0x"):
        return False
    try:
        bytes.fromhex(s[2:])
    except ValueError:
        return False
    return True


__all__ = [
    "BytesLike",
    "ensure_bytes",
    "to_hex",
    "from_hex",
    "text_to_hex",
    "hex_to_text",
    "is_hex32",
]
