from __future__ import annotations

import random

import pytest

from chunkstore.codec.chunker import assemble
from chunkstore.codec.references import parse_references
from chunkstore.config import StoreConfig
from chunkstore.constants import CHUNKED_STORAGE_CONTRACT, STORAGE_CONTRACT
from chunkstore.errors import PreparationError
from chunkstore.keys import storage_key_bytes
from chunkstore.tx.prepare import prepare_chunked, prepare_direct, prepare_write
from chunkstore.tx.types import ContractCall, PreparedTransaction, TxType
from chunkstore.utils.bytes import hex_to_text


def _noise(n: int, seed: int = 3) -> str:
    rng = random.Random(seed)
    return "".join(rng.choice("0123456789abcdefghijklmnopqrstuvwxyz") for _ in range(n))


def test_direct_write_shape():
    tx = prepare_direct("greeting", "hello.txt", "hello world")
    assert tx.type is TxType.NORMAL
    assert tx.id == storage_key_bytes("greeting")
    assert tx.call.target == STORAGE_CONTRACT
    assert tx.call.function == "put"
    assert tx.call.args[0] == tx.id
    assert tx.call.args[1] == "hello.txt"
    assert hex_to_text(tx.call.args[2]) == "hello world"


def test_chunked_ordering(operator):
    content = _noise(80_000)
    txs = prepare_chunked("big", "big.txt", content, operator)
    assert txs[0].type is TxType.METADATA
    assert len(txs) > 2
    for tx in txs[1:]:
        assert tx.type is TxType.CHUNKED
        assert tx.call.args[0] == tx.id
        assert tx.call.target == CHUNKED_STORAGE_CONTRACT


def test_chunked_metadata_points_at_chunks(operator):
    content = _noise(80_000)
    meta, *chunks = prepare_chunked("big", "big.txt", content, operator)
    refs = parse_references(hex_to_text(meta.call.args[2]))
    assert [r.hash for r in refs] == [c.id for c in chunks]
    assert [r.index for r in refs] == list(range(len(chunks)))
    assert all(r.operator is None for r in refs)
    assert assemble([c.call.args[2][0] for c in chunks]) == content


def test_chunked_preparation_is_deterministic(operator):
    content = _noise(50_000)
    a = prepare_chunked("k", "l", content, operator)
    b = prepare_chunked("k", "l", content, operator)
    assert [t.to_dict() for t in a] == [t.to_dict() for t in b]


def test_reference_operator_set_when_metadata_owner_differs(operator, other_operator):
    meta, *_ = prepare_chunked("k", "l", _noise(30_000), operator, metadata_operator=other_operator)
    refs = parse_references(hex_to_text(meta.call.args[2]))
    assert refs and all(r.operator == operator for r in refs)


def test_too_many_chunks(operator):
    cfg = StoreConfig(chunk_size=100, max_chunks=3)
    with pytest.raises(PreparationError) as ei:
        prepare_chunked("k", "l", _noise(5_000), operator, config=cfg)
    assert ei.value.data["max"] == 3


def test_chunked_requires_operator():
    with pytest.raises(PreparationError):
        prepare_chunked("k", "l", "x" * 30_000, "")


def test_prepare_write_dispatch(operator):
    small = prepare_write("k", "l", "a" * 20_000, operator)
    assert [t.type for t in small] == [TxType.NORMAL]

    large = prepare_write("k", "l", "a" * 20_001, operator)
    assert large[0].type is TxType.METADATA
    assert all(t.type is TxType.CHUNKED for t in large[1:])


def test_prepare_write_chunks_reference_lookalikes(operator):
    txs = prepare_write("k", "l", '<net k="0x1" v="0.0.1" />', operator)
    assert txs[0].type is TxType.METADATA
    assert len(txs) == 2


def test_prepare_write_uses_config_threshold(operator):
    cfg = StoreConfig(chunk_threshold=10)
    assert prepare_write("k", "l", "a" * 11, operator, config=cfg)[0].type is TxType.METADATA


# ---------------------------------------------------------------------------
# Call descriptor validation
# ---------------------------------------------------------------------------


def test_call_rejects_bad_target():
    with pytest.raises(PreparationError):
        ContractCall(target="0x1234", function="put", args=("a",))


def test_call_rejects_empty_args():
    with pytest.raises(PreparationError):
        ContractCall(target=STORAGE_CONTRACT, function="put", args=())


def test_call_freezes_nested_args():
    call = ContractCall(target=STORAGE_CONTRACT, function="put", args=["0x01", "", ["0xaa"]])
    assert call.args == ("0x01", "", ("0xaa",))
    assert call.to_dict()["args"] == ["0x01", "", ["0xaa"]]
    assert ContractCall.from_dict(call.to_dict()) == call


def test_transaction_id_must_match_first_arg():
    call = ContractCall(target=STORAGE_CONTRACT, function="put", args=("0x01", "", "0x"))
    with pytest.raises(PreparationError):
        PreparedTransaction(id="0x02", type=TxType.NORMAL, call=call)
    with pytest.raises(PreparationError):
        PreparedTransaction(id="0x01", type="bogus", call=call)  # type: ignore[arg-type]
    assert PreparedTransaction(id="0x01", type="metadata", call=call).type is TxType.METADATA  # type: ignore[arg-type]
