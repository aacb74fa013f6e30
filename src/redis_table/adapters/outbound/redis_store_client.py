"""Redis implementation of the store client port, built on redis-py.

Each command borrows one connection from a shared ``redis.ConnectionPool``
through a ``single_connection_client`` and hands it back when the
``connection()`` block exits.

redis-py converts several replies to booleans (``SET`` -> True, ``PING`` ->
True, ``EXPIRE`` -> True). Those callbacks are replaced with identity ones on
every borrowed client so the shaper sees the store's native reply
(``OK``, ``PONG``, ``1``) instead.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Sequence

import redis
from redis.exceptions import RedisError

from redis_table.domain.errors import StoreError, UnsupportedOperationError
from redis_table.domain.value_objects import NativeReply, to_native_reply
from redis_table.infrastructure.config import StoreConfig
from redis_table.infrastructure.logging import get_logger

logger = get_logger(__name__)

# Commands whose redis-py callbacks turn the reply into a bool or str.
_NATIVE_REPLY_COMMANDS = (
    "SET",
    "SETEX",
    "PING",
    "FLUSHDB",
    "FLUSHALL",
    "SELECT",
    "EXPIRE",
    "PERSIST",
    "TYPE",
)


def _identity(response: Any, **options: Any) -> Any:
    return response


class RedisStoreClient:
    """StoreClient bound to one borrowed redis-py client.

    Operation names are redis-py method names (``hset``, ``zadd``,
    ``delete``); the special name ``execute_command`` sends a command
    verbatim.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._client = client
        self._selected_db = False
        for command in _NATIVE_REPLY_COMMANDS:
            client.set_response_callback(command, _identity)

    @property
    def selected_db(self) -> bool:
        """Whether a SELECT ran on this connection."""
        return self._selected_db

    def invoke(self, operation: str, *args: Any, **kwargs: Any) -> NativeReply:
        method = None if operation.startswith("_") else getattr(self._client, operation, None)
        if not callable(method):
            raise UnsupportedOperationError(f"Store does not offer operation {operation!r}")
        if operation == "execute_command" and args and str(args[0]).upper() == "SELECT":
            self._selected_db = True
        try:
            reply = method(*args, **kwargs)
        except RedisError as e:
            raise StoreError(f"{operation} failed: {e}") from e
        return to_native_reply(reply)

    def execute_raw(self, verb: str, args: Sequence[str]) -> NativeReply:
        if verb.upper() == "SELECT":
            self._selected_db = True
        try:
            reply = self._client.execute_command(verb, *args)
        except RedisError as e:
            raise StoreError(f"{verb} failed: {e}") from e
        return to_native_reply(reply)

    def release(self) -> None:
        """Hand the connection back to the pool.

        A connection that ran SELECT is disconnected first, so the pool
        reconnects it to the configured database instead of leaking the
        selection into the next borrower.
        """
        try:
            if self._selected_db and self._client.connection is not None:
                self._client.connection.disconnect()
        finally:
            self._client.close()


class RedisConnectionProvider:
    """StoreConnectionProvider over a redis-py connection pool.

    Example:
        provider = RedisConnectionProvider(StoreConfig(url="redis://localhost:6379/0"))
        with provider.connection() as store:
            store.invoke("set", "greeting", "hello")
        provider.close()
    """

    def __init__(
        self,
        config: StoreConfig,
        pool: redis.ConnectionPool | None = None,
    ) -> None:
        self._config = config
        self._pool = pool or redis.ConnectionPool.from_url(
            config.url,
            max_connections=config.max_connections,
            socket_connect_timeout=config.connect_timeout_seconds,
            socket_timeout=config.socket_timeout_seconds,
            client_name=config.client_name,
        )
        self._closed = False
        logger.debug(
            "store_pool_created",
            max_connections=config.max_connections,
        )

    @property
    def pool(self) -> redis.ConnectionPool:
        return self._pool

    @property
    def closed(self) -> bool:
        return self._closed

    @contextmanager
    def connection(self) -> Iterator[RedisStoreClient]:
        if self._closed:
            raise StoreError("Connection provider is closed")
        try:
            client = redis.Redis(connection_pool=self._pool, single_connection_client=True)
        except RedisError as e:
            raise StoreError(f"Could not acquire a store connection: {e}") from e

        store = RedisStoreClient(client)
        try:
            yield store
        finally:
            store.release()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._pool.disconnect()
        logger.debug("store_pool_closed")
