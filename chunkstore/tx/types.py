"""
chunkstore.tx.types
===================

Typed shapes for prepared ledger writes.

- TxType: closed set {normal, metadata, chunked}
- ContractCall: validated call descriptor {target, function, args}
- PreparedTransaction: {id, type, call}

Invariants (checked at construction):
- `call.target` is a 0x-prefixed 20-byte address, `call.function` is a
  non-empty identifier, `call.args` is non-empty.
- `id == call.args[0]` for every type: the storage slot id for
  normal/metadata writes, the chunk id for chunked writes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

from ..errors import PreparationError

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class TxType(str, Enum):
    NORMAL = "normal"
    METADATA = "metadata"
    CHUNKED = "chunked"


def _freeze(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


@dataclass(frozen=True)
class ContractCall:
    """A single contract write: `target.function(*args)`."""

    target: str
    function: str
    args: Tuple[Any, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.target, str) or not _ADDRESS_RE.match(self.target):
            raise PreparationError("call target must be a 20-byte 0x address", data={"target": self.target})
        if not isinstance(self.function, str) or not _IDENT_RE.match(self.function):
            raise PreparationError("call function must be an identifier", data={"function": self.function})
        object.__setattr__(self, "args", _freeze(self.args))
        if len(self.args) == 0:
            raise PreparationError("call args cannot be empty", data={"function": self.function})

    def to_dict(self) -> Dict[str, Any]:
        return {"target": self.target, "function": self.function, "args": _thaw(self.args)}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "ContractCall":
        return cls(target=d["target"], function=d["function"], args=tuple(d["args"]))


@dataclass(frozen=True)
class PreparedTransaction:
    """A ledger call tagged with its kind and its idempotency id."""

    id: str
    type: TxType
    call: ContractCall

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "type", TxType(self.type))
        except ValueError as e:
            raise PreparationError(f"unknown transaction type: {self.type!r}") from e
        if self.call.args[0] != self.id:
            raise PreparationError(
                "transaction id must be the call's first argument",
                data={"id": self.id, "type": self.type.value},
            )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "type": self.type.value, "call": self.call.to_dict()}


__all__ = ["TxType", "ContractCall", "PreparedTransaction"]
