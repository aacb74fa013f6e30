"""Reply shaper: native replies to tabular results.

The mapping is deterministic and total over the reply variant:

    Native reply        Columns                    Rows
    ------------------  -------------------------  ------------------------------
    null                value:text                 one row, null
    scalar              value:text                 one row, decoded string
    integer             count:integer              one row
    empty list/set      value:text                 one row, null
    list/set            value:text                 one row per element, in order
    empty map           field:text, value:text     one row, both null
    map                 field:text, value:text     one row per entry, reply order
    anything else       result:text                one row, string form

The shaping is lossy but consistent: every reply becomes a table with a
fixed schema, and bytes are always decoded as UTF-8 text.
"""

from __future__ import annotations

from typing import Any

from redis_table.domain.entities import TabularResult
from redis_table.domain.value_objects import (
    COUNT_SCHEMA,
    FIELD_VALUE_SCHEMA,
    RESULT_SCHEMA,
    VALUE_SCHEMA,
    Command,
    IntegerReply,
    ListReply,
    MapReply,
    NativeReply,
    NullReply,
    OtherReply,
    ScalarReply,
    SetReply,
    to_native_reply,
)


def decode_text(value: Any) -> str | None:
    """Render one element as text.

    Bytes are decoded as UTF-8; undecodable sequences are replaced rather
    than raising. Other non-null values use ``str()``.
    """
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, str):
        return value
    return str(value)


class ReplyShaper:
    """Converts native replies into TabularResults.

    Example:
        >>> shaper = ReplyShaper()
        >>> result = shaper.shape(ListReply((b"a", b"b")))
        >>> [row["value"] for row in result]
        ['a', 'b']
    """

    def shape(self, reply: NativeReply | Any, command: Command | None = None) -> TabularResult:
        """Shape a reply into a table.

        Args:
            reply: A NativeReply, or a raw store value to classify first.
            command: The command that produced the reply, kept on the result.

        Returns:
            An immutable TabularResult with at least one column.
        """
        reply = to_native_reply(reply)

        match reply:
            case NullReply():
                return TabularResult.from_values(VALUE_SCHEMA, [(None,)], command)
            case ScalarReply(value=value):
                return TabularResult.from_values(VALUE_SCHEMA, [(decode_text(value),)], command)
            case IntegerReply(value=value):
                return TabularResult.from_values(COUNT_SCHEMA, [(value,)], command)
            case ListReply(items=items) | SetReply(items=items):
                if not items:
                    return TabularResult.from_values(VALUE_SCHEMA, [(None,)], command)
                return TabularResult.from_values(
                    VALUE_SCHEMA, [(decode_text(item),) for item in items], command
                )
            case MapReply(entries=entries):
                if not entries:
                    return TabularResult.from_values(FIELD_VALUE_SCHEMA, [(None, None)], command)
                return TabularResult.from_values(
                    FIELD_VALUE_SCHEMA,
                    [(decode_text(k), decode_text(v)) for k, v in entries],
                    command,
                )
            case OtherReply(value=value):
                return TabularResult.from_values(RESULT_SCHEMA, [(decode_text(value),)], command)

        raise TypeError(f"Unhandled reply kind: {type(reply).__name__}")
