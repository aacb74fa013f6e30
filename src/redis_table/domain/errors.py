"""Error taxonomy for redis_table.

Every error raised by the library derives from RedisTableError so callers
can catch the whole family at one boundary:

    RedisTableError
    ├── ParseError                 empty or untokenizable command text
    ├── ArgumentError              arity mismatch or coercion failure
    ├── StoreError                 the store call itself failed
    ├── StateError                 cursor/statement used in the wrong state
    ├── NotFoundError              unknown column name or position
    ├── ConversionError            typed getter could not convert a value
    └── UnsupportedOperationError  operation not offered (e.g. cancel)
"""

from __future__ import annotations


class RedisTableError(Exception):
    """Base class for all redis_table errors."""

    pass


class ParseError(RedisTableError):
    """Command text could not be turned into a command."""

    pass


class ArgumentError(RedisTableError):
    """Arguments do not satisfy the operation's arity or coercion rules."""

    def __init__(self, message: str, verb: str | None = None) -> None:
        super().__init__(message)
        self.verb = verb


class StoreError(RedisTableError):
    """The key-value store rejected the call or could not be reached."""

    pass


class StateError(RedisTableError):
    """A cursor or statement was used outside a valid state."""

    pass


class NotFoundError(RedisTableError, KeyError):
    """A column name or position does not exist in the schema."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""


class ConversionError(RedisTableError, ValueError):
    """A stored value could not be converted to the requested type."""

    pass


class UnsupportedOperationError(RedisTableError):
    """The requested operation is not supported by the store."""

    pass
