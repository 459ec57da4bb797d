"""
Utility helpers.

Re-exports:
- bytes: hex/text helpers
- hash: Keccak-256 convenience wrappers
"""

from .bytes import (ensure_bytes, from_hex, hex_to_text, is_hex32, text_to_hex,
                    to_hex)
from .hash import keccak256, keccak256_hex, keccak256_text

__all__ = [
    # bytes
    "to_hex",
    "from_hex",
    "ensure_bytes",
    "text_to_hex",
    "hex_to_text",
    "is_hex32",
    # hash
    "keccak256",
    "keccak256_hex",
    "keccak256_text",
]
