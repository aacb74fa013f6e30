"""Dispatch table mapping verbs to typed store operations.

Each known verb has an OperationDescriptor declaring how many arguments it
accepts, how each argument is coerced, and which store operation it
invokes. The registry is built once at import time and exposed read-only.

Verbs outside the registry are sent to the store verbatim through
StoreClient.execute_raw without any arity check. This fall-back is
intentionally permissive: it trades validation for the ability to run any
store or module command (e.g. ``JSON.GET``, ``OBJECT ENCODING``) that the
static table does not know about.

References:
    - Redis command reference: https://redis.io/commands/
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Sequence

from redis_table.domain.errors import ArgumentError
from redis_table.domain.value_objects import Command, NativeReply
from redis_table.ports.outbound.store_client import StoreClient


class Coercion(Enum):
    """Per-argument coercions."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"

    def apply(self, value: str) -> Any:
        """Convert a textual argument.

        Raises:
            ValueError: If the value is not a valid number.
        """
        if self is Coercion.INTEGER:
            return int(value.strip())
        if self is Coercion.FLOAT:
            # Redis accepts +inf/-inf for scores; float() does too.
            return float(value.strip())
        return value


class ArityKind(Enum):
    """Kinds of argument-count rules."""

    EXACT = auto()
    ONE_OF = auto()
    AT_LEAST = auto()
    BETWEEN = auto()
    ODD_AT_LEAST = auto()


@dataclass(frozen=True, slots=True)
class ArityRule:
    """A declared constraint on the number of arguments.

    Example:
        >>> ArityRule.odd_at_least(3).accepts(5)
        True
        >>> ArityRule.odd_at_least(3).accepts(4)
        False
    """

    kind: ArityKind
    counts: tuple[int, ...]

    @classmethod
    def exactly(cls, n: int) -> ArityRule:
        return cls(ArityKind.EXACT, (n,))

    @classmethod
    def one_of(cls, *ns: int) -> ArityRule:
        return cls(ArityKind.ONE_OF, tuple(sorted(ns)))

    @classmethod
    def at_least(cls, n: int) -> ArityRule:
        return cls(ArityKind.AT_LEAST, (n,))

    @classmethod
    def between(cls, low: int, high: int) -> ArityRule:
        if low > high:
            raise ValueError(f"Invalid range {low}..{high}")
        return cls(ArityKind.BETWEEN, (low, high))

    @classmethod
    def odd_at_least(cls, n: int) -> ArityRule:
        if n % 2 == 0:
            raise ValueError(f"odd_at_least requires an odd minimum, got {n}")
        return cls(ArityKind.ODD_AT_LEAST, (n,))

    def accepts(self, count: int) -> bool:
        """Check whether ``count`` arguments satisfy this rule."""
        if self.kind is ArityKind.EXACT:
            return count == self.counts[0]
        if self.kind is ArityKind.ONE_OF:
            return count in self.counts
        if self.kind is ArityKind.AT_LEAST:
            return count >= self.counts[0]
        if self.kind is ArityKind.BETWEEN:
            return self.counts[0] <= count <= self.counts[1]
        return count >= self.counts[0] and count % 2 == 1

    def describe(self) -> str:
        """Human-readable form used in error messages."""
        if self.kind is ArityKind.EXACT:
            return f"exactly {_plural(self.counts[0])}"
        if self.kind is ArityKind.ONE_OF:
            return " or ".join(str(n) for n in self.counts) + " arguments"
        if self.kind is ArityKind.AT_LEAST:
            return f"at least {_plural(self.counts[0])}"
        if self.kind is ArityKind.BETWEEN:
            return f"between {self.counts[0]} and {self.counts[1]} arguments"
        return f"an odd number of arguments, at least {self.counts[0]}"


def _plural(n: int) -> str:
    return f"{n} argument" if n == 1 else f"{n} arguments"


Invocation = Callable[[StoreClient, tuple[Any, ...]], NativeReply]
"""Calls the store with bound (validated and coerced) arguments."""

Validator = Callable[[tuple[str, ...]], str | None]
"""Extra shape check on raw arguments; returns an error message or None."""


@dataclass(frozen=True, slots=True)
class OperationDescriptor:
    """Declared behaviour of one verb.

    Attributes:
        verb: Upper-case verb.
        arity: Accepted argument counts.
        invocation: Store call made with the bound arguments.
        coercions: Coercion per leading position.
        repeat: Cyclic coercion pattern for positions past ``coercions``;
            empty means STRING.
        validator: Optional extra check on the raw arguments.
        description: Short usage string, e.g. ``HSET key field value [field value ...]``.
    """

    verb: str
    arity: ArityRule
    invocation: Invocation = field(repr=False)
    coercions: tuple[Coercion, ...] = ()
    repeat: tuple[Coercion, ...] = ()
    validator: Validator | None = field(default=None, repr=False)
    description: str = ""

    def coercion_for(self, position: int) -> Coercion:
        """Coercion applied to the argument at 0-based ``position``."""
        if position < len(self.coercions):
            return self.coercions[position]
        if self.repeat:
            return self.repeat[(position - len(self.coercions)) % len(self.repeat)]
        return Coercion.STRING

    def bind(self, args: Sequence[str]) -> tuple[Any, ...]:
        """Validate and coerce arguments.

        Raises:
            ArgumentError: If the count or shape is wrong or a value does
                not coerce.
        """
        raw = tuple(args)
        if not self.arity.accepts(len(raw)):
            usage = f" (usage: {self.description})" if self.description else ""
            raise ArgumentError(
                f"{self.verb} expects {self.arity.describe()}, got {len(raw)}{usage}",
                verb=self.verb,
            )
        if self.validator is not None:
            problem = self.validator(raw)
            if problem:
                raise ArgumentError(f"{self.verb}: {problem}", verb=self.verb)

        bound = []
        for position, value in enumerate(raw):
            coercion = self.coercion_for(position)
            try:
                bound.append(coercion.apply(value))
            except ValueError as e:
                raise ArgumentError(
                    f"{self.verb} argument {position + 1} must be {coercion.value}, got {value!r}",
                    verb=self.verb,
                ) from e
        return tuple(bound)

    def invoke(self, store: StoreClient, args: Sequence[str]) -> NativeReply:
        """Bind the arguments and call the store."""
        return self.invocation(store, self.bind(args))


class DispatchTable:
    """Read-only registry of operation descriptors keyed by verb.

    Example:
        >>> table = default_dispatch_table()
        >>> table.lookup("hgetall").arity.describe()
        'exactly 1 argument'
    """

    def __init__(self, descriptors: Iterable[OperationDescriptor]) -> None:
        registry: dict[str, OperationDescriptor] = {}
        for descriptor in descriptors:
            verb = descriptor.verb.upper()
            if verb in registry:
                raise ValueError(f"Duplicate descriptor for verb {verb}")
            registry[verb] = descriptor
        self._registry: Mapping[str, OperationDescriptor] = MappingProxyType(registry)

    @property
    def descriptors(self) -> Mapping[str, OperationDescriptor]:
        return self._registry

    @property
    def verbs(self) -> tuple[str, ...]:
        return tuple(sorted(self._registry))

    def lookup(self, verb: str) -> OperationDescriptor | None:
        """Find the descriptor for a verb, ignoring case."""
        return self._registry.get(verb.upper())

    def __contains__(self, verb: object) -> bool:
        return isinstance(verb, str) and verb.upper() in self._registry

    def __len__(self) -> int:
        return len(self._registry)

    def dispatch(
        self,
        command: Command,
        store: StoreClient,
        allow_raw: bool = True,
    ) -> NativeReply:
        """Run a command against the store.

        Known verbs are validated and coerced before the store is touched,
        so an ArgumentError guarantees no store call was made. Unknown verbs
        are passed through verbatim.

        Args:
            command: The parsed command.
            store: Client bound to a borrowed connection.
            allow_raw: When False, unknown verbs raise ArgumentError instead
                of taking the raw path.

        Raises:
            ArgumentError: Invalid arguments for a known verb, or an unknown
                verb while ``allow_raw`` is False.
            StoreError: The store call failed.
        """
        descriptor = self.lookup(command.verb)
        if descriptor is None:
            if not allow_raw:
                raise ArgumentError(f"Unknown command {command.verb}", verb=command.verb)
            return store.execute_raw(command.verb, command.args)
        return descriptor.invoke(store, command.args)


# Invocations


def _call(operation: str) -> Invocation:
    def invoke(store: StoreClient, args: tuple[Any, ...]) -> NativeReply:
        return store.invoke(operation, *args)

    return invoke


def _pairs(items: Sequence[Any]) -> dict[Any, Any]:
    return dict(zip(items[0::2], items[1::2]))


def _set(store: StoreClient, args: tuple[Any, ...]) -> NativeReply:
    if len(args) == 4:
        key, value, _, seconds = args
        return store.invoke("setex", key, seconds, value)
    return store.invoke("set", args[0], args[1])


def _hset(store: StoreClient, args: tuple[Any, ...]) -> NativeReply:
    return store.invoke("hset", args[0], mapping=_pairs(args[1:]))


def _zadd(store: StoreClient, args: tuple[Any, ...]) -> NativeReply:
    # ZADD key score member [score member ...]
    scores = {member: score for score, member in zip(args[1::2], args[2::2])}
    return store.invoke("zadd", args[0], scores)


def _select(store: StoreClient, args: tuple[Any, ...]) -> NativeReply:
    return store.invoke("execute_command", "SELECT", args[0])


def _validate_set(args: tuple[str, ...]) -> str | None:
    if len(args) == 4 and args[2].upper() != "EX":
        return f"expected EX as third argument, got {args[2]!r}"
    return None


def _op(
    verb: str,
    arity: ArityRule,
    usage: str,
    operation: str | None = None,
    coercions: tuple[Coercion, ...] = (),
) -> OperationDescriptor:
    return OperationDescriptor(
        verb=verb,
        arity=arity,
        invocation=_call(operation or verb.lower()),
        coercions=coercions,
        description=usage,
    )


_S, _I, _F = Coercion.STRING, Coercion.INTEGER, Coercion.FLOAT

_DEFAULT_DESCRIPTORS: tuple[OperationDescriptor, ...] = (
    # Strings and keys
    _op("GET", ArityRule.exactly(1), "GET key"),
    OperationDescriptor(
        verb="SET",
        arity=ArityRule.one_of(2, 4),
        invocation=_set,
        coercions=(_S, _S, _S, _I),
        validator=_validate_set,
        description="SET key value [EX seconds]",
    ),
    _op("DEL", ArityRule.at_least(1), "DEL key [key ...]", operation="delete"),
    _op("EXISTS", ArityRule.at_least(1), "EXISTS key [key ...]"),
    _op("KEYS", ArityRule.exactly(1), "KEYS pattern"),
    _op("TYPE", ArityRule.exactly(1), "TYPE key"),
    _op("TTL", ArityRule.exactly(1), "TTL key"),
    _op("EXPIRE", ArityRule.exactly(2), "EXPIRE key seconds", coercions=(_S, _I)),
    _op("PERSIST", ArityRule.exactly(1), "PERSIST key"),
    # Server
    _op("PING", ArityRule.exactly(0), "PING"),
    _op("INFO", ArityRule.between(0, 1), "INFO [section]"),
    _op("DBSIZE", ArityRule.exactly(0), "DBSIZE"),
    _op("FLUSHDB", ArityRule.exactly(0), "FLUSHDB"),
    _op("FLUSHALL", ArityRule.exactly(0), "FLUSHALL"),
    OperationDescriptor(
        verb="SELECT",
        arity=ArityRule.exactly(1),
        invocation=_select,
        coercions=(_I,),
        description="SELECT index",
    ),
    # Hashes
    OperationDescriptor(
        verb="HSET",
        arity=ArityRule.odd_at_least(3),
        invocation=_hset,
        description="HSET key field value [field value ...]",
    ),
    _op("HGET", ArityRule.exactly(2), "HGET key field"),
    _op("HGETALL", ArityRule.exactly(1), "HGETALL key"),
    _op("HDEL", ArityRule.at_least(2), "HDEL key field [field ...]"),
    # Lists
    _op("LPUSH", ArityRule.at_least(2), "LPUSH key element [element ...]"),
    _op("RPUSH", ArityRule.at_least(2), "RPUSH key element [element ...]"),
    _op("LPOP", ArityRule.exactly(1), "LPOP key"),
    _op("RPOP", ArityRule.exactly(1), "RPOP key"),
    _op("LLEN", ArityRule.exactly(1), "LLEN key"),
    _op("LRANGE", ArityRule.exactly(3), "LRANGE key start stop", coercions=(_S, _I, _I)),
    # Sets
    _op("SADD", ArityRule.at_least(2), "SADD key member [member ...]"),
    _op("SMEMBERS", ArityRule.exactly(1), "SMEMBERS key"),
    _op("SREM", ArityRule.at_least(2), "SREM key member [member ...]"),
    _op("SCARD", ArityRule.exactly(1), "SCARD key"),
    # Sorted sets
    OperationDescriptor(
        verb="ZADD",
        arity=ArityRule.odd_at_least(3),
        invocation=_zadd,
        coercions=(_S,),
        repeat=(_F, _S),
        description="ZADD key score member [score member ...]",
    ),
    _op("ZRANGE", ArityRule.exactly(3), "ZRANGE key start stop", coercions=(_S, _I, _I)),
    _op("ZCARD", ArityRule.exactly(1), "ZCARD key"),
    _op("ZREM", ArityRule.at_least(2), "ZREM key member [member ...]"),
)

_DEFAULT_TABLE = DispatchTable(_DEFAULT_DESCRIPTORS)


def default_dispatch_table() -> DispatchTable:
    """The process-wide dispatch table of built-in verbs."""
    return _DEFAULT_TABLE
