"""Native reply variant.

The store answers with one of a small, closed set of shapes. Rather than
inspecting arbitrary Python objects at shaping time, replies are first
classified into this variant so the shaper can match on it exhaustively.

    Kind      Python value from the store client
    --------  -------------------------------------
    NULL      None
    SCALAR    str or bytes
    INTEGER   int (bool excluded)
    LIST      list or tuple
    SET       set or frozenset
    MAP       dict (insertion order preserved)
    OTHER     anything else (float, bool, custom objects)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, ClassVar, Union


class ReplyKind(Enum):
    """Kinds of native replies."""

    NULL = auto()
    SCALAR = auto()
    INTEGER = auto()
    LIST = auto()
    SET = auto()
    MAP = auto()
    OTHER = auto()

    def is_collection(self) -> bool:
        return self in (ReplyKind.LIST, ReplyKind.SET, ReplyKind.MAP)


@dataclass(frozen=True, slots=True)
class NullReply:
    """The store returned nil (e.g. GET on a missing key)."""

    kind: ClassVar[ReplyKind] = ReplyKind.NULL


@dataclass(frozen=True, slots=True)
class ScalarReply:
    """A single bulk or simple string."""

    value: str | bytes
    kind: ClassVar[ReplyKind] = ReplyKind.SCALAR


@dataclass(frozen=True, slots=True)
class IntegerReply:
    """An integer reply (counts, lengths, TTLs)."""

    value: int
    kind: ClassVar[ReplyKind] = ReplyKind.INTEGER


@dataclass(frozen=True, slots=True)
class ListReply:
    """An ordered sequence of elements."""

    items: tuple[Any, ...] = ()
    kind: ClassVar[ReplyKind] = ReplyKind.LIST

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True, slots=True)
class SetReply:
    """An unordered collection; items keep the store client's iteration order."""

    items: tuple[Any, ...] = ()
    kind: ClassVar[ReplyKind] = ReplyKind.SET

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True, slots=True)
class MapReply:
    """Field/value pairs in the order the store returned them."""

    entries: tuple[tuple[Any, Any], ...] = ()
    kind: ClassVar[ReplyKind] = ReplyKind.MAP

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True, slots=True)
class OtherReply:
    """A reply that fits none of the other kinds."""

    value: Any
    kind: ClassVar[ReplyKind] = ReplyKind.OTHER


NativeReply = Union[
    NullReply, ScalarReply, IntegerReply, ListReply, SetReply, MapReply, OtherReply
]


def to_native_reply(obj: Any) -> NativeReply:
    """Classify a raw store-client value into the reply variant.

    Values that are already variants are returned unchanged.

    Args:
        obj: Value returned by the store client.

    Returns:
        The matching NativeReply.
    """
    if isinstance(
        obj, (NullReply, ScalarReply, IntegerReply, ListReply, SetReply, MapReply, OtherReply)
    ):
        return obj
    if obj is None:
        return NullReply()
    if isinstance(obj, (str, bytes, bytearray)):
        return ScalarReply(bytes(obj) if isinstance(obj, bytearray) else obj)
    # bool is an int subclass but is not a count.
    if isinstance(obj, int) and not isinstance(obj, bool):
        return IntegerReply(obj)
    if isinstance(obj, (list, tuple)):
        return ListReply(tuple(obj))
    if isinstance(obj, (set, frozenset)):
        return SetReply(tuple(obj))
    if isinstance(obj, dict):
        return MapReply(tuple(obj.items()))
    return OtherReply(obj)
