from __future__ import annotations

from Crypto.Hash import keccak as _keccak

from .bytes import BytesLike, ensure_bytes, to_hex

# --- Keccak-256 (Ethereum-style) ----------------------------------------------
# hashlib only ships NIST SHA3; the ledger uses the original Keccak padding,
# provided here by pycryptodome.


def keccak256(data: BytesLike) -> bytes:
    """Return Keccak-256 digest of *data* (bytes)."""
    h = _keccak.new(digest_bits=256)
    h.update(ensure_bytes(data))
    return h.digest()


def keccak256_hex(data: BytesLike, *, prefix: bool = True) -> str:
    """Return hex string of Keccak-256 digest (0x-prefixed by default)."""
    return to_hex(keccak256(data), prefix=prefix)


def keccak256_text(text: str) -> str:
    """Keccak-256 of the UTF-8 bytes of *text*, as 0x-prefixed hex."""
    return keccak256_hex(text.encode("utf-8"))


__all__ = ["keccak256", "keccak256_hex", "keccak256_text"]
