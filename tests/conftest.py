"""Pytest configuration and fixtures for redis_table tests."""

from __future__ import annotations

import fnmatch
from contextlib import contextmanager
from typing import Any, Generator, Iterator, Sequence

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from prometheus_client import CollectorRegistry

from redis_table.domain.errors import StoreError, UnsupportedOperationError
from redis_table.domain.value_objects import NativeReply, to_native_reply
from redis_table.infrastructure import tracing
from redis_table.infrastructure.config import Config, ExecutionConfig, StoreConfig
from redis_table.infrastructure.metrics import MetricsRegistry


def _b(value: Any) -> bytes:
    if isinstance(value, bytes):
        return value
    return str(value).encode("utf-8")


class FakeStoreClient:
    """In-memory StoreClient speaking the redis-py operation vocabulary.

    Replies have the shapes redis-py returns once the adapter's identity
    callbacks are installed: bytes for strings, ``b"OK"``, plain ints.
    ``scripted`` overrides an operation (or raw verb) with a fixed reply or
    an exception to raise.
    """

    def __init__(self) -> None:
        self.data: dict[bytes, Any] = {}
        self.expiry: dict[bytes, int] = {}
        self.db = 0
        self.calls: list[tuple[str, tuple[Any, ...], dict[str, Any]]] = []
        self.raw_calls: list[tuple[str, tuple[str, ...]]] = []
        self.scripted: dict[str, Any] = {}

    # StoreClient

    def invoke(self, operation: str, *args: Any, **kwargs: Any) -> NativeReply:
        self.calls.append((operation, args, kwargs))
        if operation in self.scripted:
            return self._scripted(operation)
        handler = getattr(self, f"_op_{operation}", None)
        if handler is None:
            raise UnsupportedOperationError(f"Store does not offer operation {operation!r}")
        return to_native_reply(handler(*args, **kwargs))

    def execute_raw(self, verb: str, args: Sequence[str]) -> NativeReply:
        self.raw_calls.append((verb, tuple(args)))
        if verb.upper() in self.scripted:
            return self._scripted(verb.upper())
        if verb.upper() == "ECHO" and len(args) == 1:
            return to_native_reply(_b(args[0]))
        raise StoreError(f"ERR unknown command '{verb}'")

    def _scripted(self, name: str) -> NativeReply:
        reply = self.scripted[name]
        if isinstance(reply, Exception):
            raise reply
        return to_native_reply(reply)

    # Helpers

    def _typed(self, key: Any, kind: type) -> Any:
        value = self.data.get(_b(key))
        if value is not None and not isinstance(value, kind):
            raise StoreError("WRONGTYPE Operation against a key holding the wrong kind of value")
        return value

    # Strings and keys

    def _op_get(self, key: Any) -> bytes | None:
        return self._typed(key, bytes)

    def _op_set(self, key: Any, value: Any) -> bytes:
        self.data[_b(key)] = _b(value)
        self.expiry.pop(_b(key), None)
        return b"OK"

    def _op_setex(self, key: Any, seconds: int, value: Any) -> bytes:
        if seconds <= 0:
            raise StoreError("ERR invalid expire time in 'setex' command")
        self._op_set(key, value)
        self.expiry[_b(key)] = seconds
        return b"OK"

    def _op_delete(self, *keys: Any) -> int:
        removed = 0
        for key in keys:
            if self.data.pop(_b(key), None) is not None:
                removed += 1
            self.expiry.pop(_b(key), None)
        return removed

    def _op_exists(self, *keys: Any) -> int:
        return sum(1 for key in keys if _b(key) in self.data)

    def _op_keys(self, pattern: Any) -> list[bytes]:
        text = _b(pattern).decode()
        return [k for k in self.data if fnmatch.fnmatchcase(k.decode(), text)]

    def _op_type(self, key: Any) -> bytes:
        value = self.data.get(_b(key))
        names = {bytes: b"string", dict: b"hash", list: b"list", set: b"set"}
        if value is None:
            return b"none"
        if isinstance(value, dict) and getattr(value, "zset", False):
            return b"zset"
        return names[type(value)]

    def _op_ttl(self, key: Any) -> int:
        if _b(key) not in self.data:
            return -2
        return self.expiry.get(_b(key), -1)

    def _op_expire(self, key: Any, seconds: int) -> int:
        if _b(key) not in self.data:
            return 0
        self.expiry[_b(key)] = seconds
        return 1

    def _op_persist(self, key: Any) -> int:
        return 1 if self.expiry.pop(_b(key), None) is not None else 0

    # Server

    def _op_ping(self) -> bytes:
        return b"PONG"

    def _op_info(self, section: Any = None) -> dict[str, Any]:
        return {"redis_version": "7.2.4", "connected_clients": 1}

    def _op_dbsize(self) -> int:
        return len(self.data)

    def _op_flushdb(self) -> bytes:
        self.data.clear()
        self.expiry.clear()
        return b"OK"

    def _op_flushall(self) -> bytes:
        return self._op_flushdb()

    def _op_execute_command(self, *args: Any) -> Any:
        if args and str(args[0]).upper() == "SELECT":
            self.db = int(args[1])
            return b"OK"
        raise StoreError(f"ERR unknown command '{args[0] if args else ''}'")

    # Hashes

    def _op_hset(self, key: Any, mapping: dict[Any, Any]) -> int:
        value = self._typed(key, dict)
        if value is None:
            value = self.data[_b(key)] = {}
        added = 0
        for field, item in mapping.items():
            if _b(field) not in value:
                added += 1
            value[_b(field)] = _b(item)
        return added

    def _op_hget(self, key: Any, field: Any) -> bytes | None:
        return (self._typed(key, dict) or {}).get(_b(field))

    def _op_hgetall(self, key: Any) -> dict[bytes, bytes]:
        return dict(self._typed(key, dict) or {})

    def _op_hdel(self, key: Any, *fields: Any) -> int:
        value = self._typed(key, dict) or {}
        return sum(1 for field in fields if value.pop(_b(field), None) is not None)

    # Lists

    def _list(self, key: Any, create: bool = False) -> list[bytes]:
        value = self._typed(key, list)
        if value is None:
            value = []
            if create:
                self.data[_b(key)] = value
        return value

    def _op_lpush(self, key: Any, *values: Any) -> int:
        items = self._list(key, create=True)
        for value in values:
            items.insert(0, _b(value))
        return len(items)

    def _op_rpush(self, key: Any, *values: Any) -> int:
        items = self._list(key, create=True)
        items.extend(_b(v) for v in values)
        return len(items)

    def _op_lpop(self, key: Any) -> bytes | None:
        items = self._list(key)
        return items.pop(0) if items else None

    def _op_rpop(self, key: Any) -> bytes | None:
        items = self._list(key)
        return items.pop() if items else None

    def _op_llen(self, key: Any) -> int:
        return len(self._list(key))

    def _op_lrange(self, key: Any, start: int, stop: int) -> list[bytes]:
        items = self._list(key)
        n = len(items)
        if start < 0:
            start = max(n + start, 0)
        if stop < 0:
            stop = n + stop
        return items[start:stop + 1]

    # Sets

    def _set(self, key: Any, create: bool = False) -> set[bytes]:
        value = self._typed(key, set)
        if value is None:
            value = set()
            if create:
                self.data[_b(key)] = value
        return value

    def _op_sadd(self, key: Any, *members: Any) -> int:
        members_set = self._set(key, create=True)
        before = len(members_set)
        members_set.update(_b(m) for m in members)
        return len(members_set) - before

    def _op_smembers(self, key: Any) -> set[bytes]:
        return set(self._set(key))

    def _op_srem(self, key: Any, *members: Any) -> int:
        members_set = self._set(key)
        removed = [m for m in (_b(x) for x in members) if m in members_set]
        members_set.difference_update(removed)
        return len(removed)

    def _op_scard(self, key: Any) -> int:
        return len(self._set(key))

    # Sorted sets

    def _zset(self, key: Any, create: bool = False) -> dict[bytes, float]:
        value = self._typed(key, dict)
        if value is None:
            value = _ZSet()
            if create:
                self.data[_b(key)] = value
        return value

    def _op_zadd(self, key: Any, mapping: dict[Any, float]) -> int:
        zset = self._zset(key, create=True)
        added = sum(1 for member in mapping if _b(member) not in zset)
        zset.update({_b(member): score for member, score in mapping.items()})
        return added

    def _op_zrange(self, key: Any, start: int, stop: int) -> list[bytes]:
        ordered = [m for m, _ in sorted(self._zset(key).items(), key=lambda kv: (kv[1], kv[0]))]
        n = len(ordered)
        if start < 0:
            start = max(n + start, 0)
        if stop < 0:
            stop = n + stop
        return ordered[start:stop + 1]

    def _op_zcard(self, key: Any) -> int:
        return len(self._zset(key))

    def _op_zrem(self, key: Any, *members: Any) -> int:
        zset = self._zset(key)
        return sum(1 for m in members if zset.pop(_b(m), None) is not None)


class _ZSet(dict):
    zset = True


class FakeConnectionProvider:
    """StoreConnectionProvider handing out one shared FakeStoreClient."""

    def __init__(self, store: FakeStoreClient | None = None) -> None:
        self.store = store or FakeStoreClient()
        self.acquired = 0
        self.released = 0
        self.closed = False

    @contextmanager
    def connection(self) -> Iterator[FakeStoreClient]:
        if self.closed:
            raise StoreError("Connection provider is closed")
        self.acquired += 1
        try:
            yield self.store
        finally:
            self.released += 1

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_store() -> FakeStoreClient:
    """Provide an empty in-memory store client."""
    return FakeStoreClient()


@pytest.fixture
def fake_provider(fake_store: FakeStoreClient) -> FakeConnectionProvider:
    """Provide a connection provider over the fake store."""
    return FakeConnectionProvider(fake_store)


@pytest.fixture
def test_config() -> Config:
    """Provide a test configuration that never needs a live store."""
    return Config(
        store=StoreConfig(
            url="redis://localhost:6399/15",
            connect_timeout_seconds=0.1,
            socket_timeout_seconds=0.1,
            max_connections=2,
        ),
        execution=ExecutionConfig(max_rows=0, allow_raw_commands=True),
    )


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def span_exporter(monkeypatch: pytest.MonkeyPatch) -> InMemorySpanExporter:
    """Capture spans without touching the global tracer provider."""
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    monkeypatch.setattr(tracing, "_tracer", provider.get_tracer("test"))
    return exporter


@pytest.fixture
def engine_factory(
    test_config: Config,
    fake_provider: FakeConnectionProvider,
    metrics_registry: MetricsRegistry,
) -> Generator[Any, None, None]:
    """Build started TableEngines over the fake store; stops them afterwards."""
    from redis_table.application import TableEngine

    engines: list[TableEngine] = []

    def make(config: Config | None = None) -> TableEngine:
        engine = TableEngine(
            config=config or test_config,
            provider=fake_provider,
            metrics=metrics_registry,
        )
        engine.start()
        engines.append(engine)
        return engine

    yield make

    for engine in engines:
        if engine.is_started:
            engine.stop()


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
