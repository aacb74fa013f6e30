"""Value objects for the redis_table domain.

Value objects are immutable types that represent domain concepts.

Exports:
    Commands:
        - Command: Normalized (verb, args) pair
    Native replies:
        - ReplyKind: Closed set of reply kinds
        - NullReply, ScalarReply, IntegerReply, ListReply, SetReply,
          MapReply, OtherReply: Variant members
        - NativeReply: Union of the variant members
        - to_native_reply: Classify a store-client value
    Columns:
        - ColumnType, Column, ColumnSchema
    Cursor:
        - CursorState, CursorPosition
"""

from redis_table.domain.value_objects.columns import (
    COUNT_SCHEMA,
    FIELD_VALUE_SCHEMA,
    RESULT_SCHEMA,
    VALUE_SCHEMA,
    Column,
    ColumnSchema,
    ColumnType,
)
from redis_table.domain.value_objects.command import Command
from redis_table.domain.value_objects.cursor_position import CursorPosition, CursorState
from redis_table.domain.value_objects.native_reply import (
    IntegerReply,
    ListReply,
    MapReply,
    NativeReply,
    NullReply,
    OtherReply,
    ReplyKind,
    ScalarReply,
    SetReply,
    to_native_reply,
)

__all__ = [
    # Commands
    "Command",
    # Native replies
    "ReplyKind",
    "NativeReply",
    "NullReply",
    "ScalarReply",
    "IntegerReply",
    "ListReply",
    "SetReply",
    "MapReply",
    "OtherReply",
    "to_native_reply",
    # Columns
    "ColumnType",
    "Column",
    "ColumnSchema",
    "VALUE_SCHEMA",
    "COUNT_SCHEMA",
    "FIELD_VALUE_SCHEMA",
    "RESULT_SCHEMA",
    # Cursor
    "CursorState",
    "CursorPosition",
]
