from __future__ import annotations

import gzip
import random

import pytest
from hypothesis import given, settings, strategies as st

from chunkstore.codec.chunker import (Chunk, assemble, chunk, compress,
                                      encode_for_storage, estimate_chunk_count)
from chunkstore.utils.hash import keccak256_hex

_WORDS = (
    "ledger chunk relay operator metadata storage contract gas block nonce "
    "hash index version reference retry backoff wallet slot payload content"
).split()


def _prose(n_chars: int, seed: int = 7) -> str:
    rng = random.Random(seed)
    out = []
    size = 0
    while size < n_chars:
        w = rng.choice(_WORDS)
        out.append(w)
        size += len(w) + 1
    return " ".join(out)[:n_chars]


def _noise(n_chars: int, seed: int = 11) -> str:
    rng = random.Random(seed)
    alphabet = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
    return "".join(rng.choice(alphabet) for _ in range(n_chars))


# ---------------------------------------------------------------------------
# Round trip
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "content",
    ["", "hello", "ünïcødé ✓ 漢字", _prose(30_000), _noise(45_000)],
    ids=["empty", "short", "unicode", "prose-30k", "noise-45k"],
)
def test_round_trip(content):
    assert assemble(chunk(compress(content))) == content


@settings(max_examples=60, deadline=None)
@given(st.text(max_size=3000), st.integers(min_value=1, max_value=512))
def test_round_trip_any_text_any_chunk_size(content, size):
    chunks = chunk(compress(content), max_chunk_size=size)
    assert all(len(c) <= size for c in chunks)
    assert assemble(chunks) == content


def test_assemble_accepts_hex_and_bytes():
    chunks = encode_for_storage(_noise(50_000), max_chunk_size=4096)
    assert assemble([c.hex for c in chunks]) == assemble(chunks)
    assert assemble([c.data for c in chunks]) == assemble(chunks)


def test_compress_is_gzip_of_hex_payload():
    blob = compress("hi")
    assert gzip.decompress(blob) == b"0x6869"


def test_compress_rejects_non_text():
    with pytest.raises(TypeError):
        compress(b"bytes")  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Chunking
# ---------------------------------------------------------------------------


def test_chunk_ids_are_stable():
    content = _noise(60_000)
    first = [c.id for c in encode_for_storage(content)]
    second = [c.id for c in encode_for_storage(content)]
    assert first == second
    assert len(first) > 1


def test_chunk_id_is_keccak_of_chunk_bytes():
    chunks = chunk(b"\x01" * 50, max_chunk_size=20)
    assert [c.index for c in chunks] == [0, 1, 2]
    assert [len(c) for c in chunks] == [20, 20, 10]
    for c in chunks:
        assert c.id == keccak256_hex(c.data)
        assert c == Chunk.of(c.index, c.data)


def test_empty_data_yields_one_empty_chunk():
    chunks = chunk(b"")
    assert len(chunks) == 1
    assert chunks[0].data == b""


def test_chunk_size_must_be_positive():
    with pytest.raises(ValueError):
        chunk(b"abc", max_chunk_size=0)


# ---------------------------------------------------------------------------
# Decode failures
# ---------------------------------------------------------------------------


def test_assemble_empty_list_is_none():
    assert assemble([]) is None


def test_assemble_misordered_is_none():
    chunks = encode_for_storage(_noise(60_000), max_chunk_size=10_000)
    assert len(chunks) >= 3
    assert assemble(list(reversed(chunks))) is None


def test_assemble_corrupted_is_none():
    chunks = encode_for_storage(_prose(5_000), max_chunk_size=1_000)
    bad = bytearray(chunks[0].data)
    bad[12] ^= 0xFF
    assert assemble([bytes(bad)] + [c.data for c in chunks[1:]]) is None


def test_assemble_truncated_is_none():
    chunks = encode_for_storage(_noise(30_000), max_chunk_size=5_000)
    assert assemble(chunks[:-1]) is None


def test_assemble_bad_hex_is_none():
    assert assemble(["0xzz"]) is None
    assert assemble(["0x"]) is None


def test_assemble_non_hex_payload_is_none():
    assert assemble([gzip.compress(b"plain text")]) is None


# ---------------------------------------------------------------------------
# Estimation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "content",
    ["", "x", _prose(10_000), _noise(20_000)],
    ids=["empty", "tiny", "prose-small", "noise-small"],
)
def test_estimate_exact_for_small_payloads(content):
    assert estimate_chunk_count(content) == len(encode_for_storage(content))


@pytest.mark.parametrize(
    "content",
    [_prose(300_000), _noise(120_000)],
    ids=["prose-300k", "noise-120k"],
)
def test_estimate_tracks_real_count(content):
    real = len(encode_for_storage(content))
    assert abs(estimate_chunk_count(content) - real) <= 1


def test_estimate_respects_chunk_size():
    content = _noise(40_000)
    assert estimate_chunk_count(content, max_chunk_size=1_000) > estimate_chunk_count(content)
