"""
chunkstore • codec • references

The small metadata wire format linking a storage key to its chunks. A
chunked metadata record is a run of self-closing tags:

    <net k="0x<chunk id>" v="0.0.1" i="0" o="0x<operator>" s="d" />

- k (hash)     required
- v (version)  required
- i (index)    optional, decimal integer; orders chunks
- o (operator) optional, lower-cased on parse; resolved from context if absent
- s (source)   optional free-form tag ("d" = primary storage contract)

Attributes appear in that order. Any tag name is accepted on parse; `net` is
emitted. Parsing never raises: anything that does not match is ignored, and
non-text input yields an empty list.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from ..constants import DIRECT_SOURCE, REFERENCE_TAG, REFERENCE_VERSION

_REF_RE = re.compile(
    r"<(?P<tag>[A-Za-z][\w:.-]*)"
    r'\s+k="(?P<k>[^"]+)"'
    r'\s+v="(?P<v>[^"]+)"'
    r'(?:\s+i="(?P<i>\d+)")?'
    r'(?:\s+o="(?P<o>[^"]+)")?'
    r'(?:\s+s="(?P<s>[^"]+)")?'
    r"\s*/>"
)


class StorageKind(str, Enum):
    CHUNKED = "chunked"
    DIRECT = "direct"


@dataclass(frozen=True)
class Reference:
    """Pointer from a metadata record to one stored chunk."""

    hash: str
    version: str
    index: Optional[int] = None
    operator: Optional[str] = None
    source: Optional[str] = None

    @property
    def is_direct(self) -> bool:
        return self.source == DIRECT_SOURCE


ReferenceKey = Tuple[str, str, Optional[int], str]


# --------------------------------------------------------------------------- #
# Parsing
# --------------------------------------------------------------------------- #


def parse_references(metadata: object) -> List[Reference]:
    """Extract every well-formed reference tag from *metadata*, in document order."""
    if not isinstance(metadata, str):
        return []
    refs: List[Reference] = []
    for m in _REF_RE.finditer(metadata):
        idx = m.group("i")
        op = m.group("o")
        refs.append(
            Reference(
                hash=m.group("k"),
                version=m.group("v"),
                index=int(idx) if idx is not None else None,
                operator=op.lower() if op else None,
                source=m.group("s"),
            )
        )
    return refs


def contains_references(text: object) -> bool:
    return isinstance(text, str) and _REF_RE.search(text) is not None


def detect_storage_kind(metadata: object) -> StorageKind:
    return StorageKind.CHUNKED if contains_references(metadata) else StorageKind.DIRECT


def resolve_operator(reference: Reference, default_operator: str) -> str:
    """The reference's own operator if set, else *default_operator*; lower-cased."""
    return (reference.operator or default_operator).lower()


def reference_key(reference: Reference, default_operator: str) -> ReferenceKey:
    """
    Lookup/de-duplication key: (hash, version, index, resolved operator).

    Uses the resolved operator, so an explicit operator equal to the default
    yields the same key as an omitted one.
    """
    return (
        reference.hash,
        reference.version,
        reference.index,
        resolve_operator(reference, default_operator),
    )


# --------------------------------------------------------------------------- #
# Serialization
# --------------------------------------------------------------------------- #


def _attr(name: str, value: object) -> str:
    s = str(value)
    if '"' in s or "<" in s or ">" in s:
        raise ValueError(f"reference attribute {name!r} contains markup: {s!r}")
    return f' {name}="{s}"'


def format_reference(reference: Reference, *, tag: str = REFERENCE_TAG) -> str:
    parts = [f"<{tag}", _attr("k", reference.hash), _attr("v", reference.version)]
    if reference.index is not None:
        parts.append(_attr("i", int(reference.index)))
    if reference.operator:
        parts.append(_attr("o", reference.operator.lower()))
    if reference.source:
        parts.append(_attr("s", reference.source))
    parts.append(" />")
    return "".join(parts)


def format_references(references: Iterable[Reference], *, tag: str = REFERENCE_TAG) -> str:
    return "".join(format_reference(r, tag=tag) for r in references)


def embed_tag(
    slot_id: str,
    operator: str,
    *,
    direct: bool = False,
    version_index: Optional[int] = None,
) -> str:
    """
    Single reference pointing at content stored under *slot_id* by *operator*.
    `direct=True` marks content living in the primary storage contract.
    """
    return format_reference(
        Reference(
            hash=slot_id,
            version=REFERENCE_VERSION,
            index=version_index,
            operator=operator,
            source=DIRECT_SOURCE if direct else None,
        )
    )


__all__ = [
    "StorageKind",
    "Reference",
    "ReferenceKey",
    "parse_references",
    "contains_references",
    "detect_storage_kind",
    "resolve_operator",
    "reference_key",
    "format_reference",
    "format_references",
    "embed_tag",
]
