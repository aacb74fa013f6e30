"""Unit tests for the Redis store client adapter."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from redis_table.adapters.outbound import RedisConnectionProvider, RedisStoreClient
from redis_table.domain.errors import StoreError, UnsupportedOperationError
from redis_table.domain.value_objects import (
    IntegerReply,
    MapReply,
    NullReply,
    ScalarReply,
)
from redis_table.infrastructure.config import StoreConfig

_MODULE = "redis_table.adapters.outbound.redis_store_client"


@pytest.fixture
def redis_client() -> MagicMock:
    """A redis.Redis stand-in that records calls."""
    return MagicMock(spec=redis.Redis)


@pytest.mark.unit
class TestRedisStoreClient:
    """Tests for RedisStoreClient."""

    def test_installs_identity_callbacks(self, redis_client: MagicMock) -> None:
        RedisStoreClient(redis_client)

        commands = {c.args[0] for c in redis_client.set_response_callback.call_args_list}
        assert {"SET", "PING", "EXPIRE", "FLUSHDB", "SELECT"} <= commands

    def test_native_replies_survive_callbacks(self) -> None:
        """SET and PING keep their native replies instead of becoming True."""
        pool = redis.ConnectionPool.from_url("redis://localhost:6399/0")
        client = redis.Redis(connection_pool=pool)

        RedisStoreClient(client)

        assert client.response_callbacks["SET"](b"OK") == b"OK"
        assert client.response_callbacks["PING"](b"PONG") == b"PONG"
        assert client.response_callbacks["EXPIRE"](1) == 1

    def test_invoke_forwards_and_classifies(self, redis_client: MagicMock) -> None:
        redis_client.hset.return_value = 2
        store = RedisStoreClient(redis_client)

        reply = store.invoke("hset", "h", mapping={"f": "v"})

        assert reply == IntegerReply(2)
        redis_client.hset.assert_called_once_with("h", mapping={"f": "v"})

    def test_invoke_classifies_each_kind(self, redis_client: MagicMock) -> None:
        redis_client.get.return_value = None
        redis_client.hgetall.return_value = {b"f": b"v"}
        store = RedisStoreClient(redis_client)

        assert store.invoke("get", "missing") == NullReply()
        assert store.invoke("hgetall", "h") == MapReply(((b"f", b"v"),))

    def test_redis_error_becomes_store_error(self, redis_client: MagicMock) -> None:
        cause = ResponseError("WRONGTYPE Operation against a key holding the wrong kind of value")
        redis_client.get.side_effect = cause
        store = RedisStoreClient(redis_client)

        with pytest.raises(StoreError, match="WRONGTYPE") as exc_info:
            store.invoke("get", "h")

        assert exc_info.value.__cause__ is cause

    @pytest.mark.parametrize("operation", ["no_such_operation", "_private", "__class__"])
    def test_unknown_operation(self, redis_client: MagicMock, operation: str) -> None:
        store = RedisStoreClient(redis_client)

        with pytest.raises(UnsupportedOperationError):
            store.invoke(operation)

    def test_execute_raw(self, redis_client: MagicMock) -> None:
        redis_client.execute_command.return_value = b'{"a":1}'
        store = RedisStoreClient(redis_client)

        reply = store.execute_raw("JSON.GET", ["doc", "$"])

        assert reply == ScalarReply(b'{"a":1}')
        redis_client.execute_command.assert_called_once_with("JSON.GET", "doc", "$")

    def test_execute_raw_error(self, redis_client: MagicMock) -> None:
        redis_client.execute_command.side_effect = ResponseError("ERR unknown command")
        store = RedisStoreClient(redis_client)

        with pytest.raises(StoreError, match="unknown command"):
            store.execute_raw("BOGUS", [])

    def test_release_closes_client(self, redis_client: MagicMock) -> None:
        store = RedisStoreClient(redis_client)

        store.release()

        redis_client.close.assert_called_once()
        assert not store.selected_db

    def test_release_after_select_drops_connection(self, redis_client: MagicMock) -> None:
        redis_client.connection = MagicMock()
        store = RedisStoreClient(redis_client)
        store.invoke("execute_command", "SELECT", 2)

        store.release()

        assert store.selected_db
        redis_client.connection.disconnect.assert_called_once()
        redis_client.close.assert_called_once()


@pytest.mark.unit
class TestRedisConnectionProvider:
    """Tests for RedisConnectionProvider."""

    @pytest.fixture
    def store_config(self) -> StoreConfig:
        return StoreConfig(
            url="redis://localhost:6399/3",
            connect_timeout_seconds=0.5,
            socket_timeout_seconds=0.25,
            client_name="redis-table-tests",
            max_connections=4,
        )

    def test_pool_built_from_config(self, store_config: StoreConfig) -> None:
        provider = RedisConnectionProvider(store_config)

        pool = provider.pool
        assert pool.max_connections == 4
        assert pool.connection_kwargs["socket_timeout"] == 0.25
        assert pool.connection_kwargs["socket_connect_timeout"] == 0.5
        assert pool.connection_kwargs["client_name"] == "redis-table-tests"
        assert pool.connection_kwargs["db"] == 3

    def test_connection_scoped_to_block(self, store_config: StoreConfig) -> None:
        pool = MagicMock(spec=redis.ConnectionPool)
        provider = RedisConnectionProvider(store_config, pool=pool)

        with patch(f"{_MODULE}.redis.Redis") as redis_cls:
            with provider.connection() as store:
                assert isinstance(store, RedisStoreClient)
                redis_cls.return_value.close.assert_not_called()

        redis_cls.assert_called_once_with(connection_pool=pool, single_connection_client=True)
        redis_cls.return_value.close.assert_called_once()

    def test_connection_released_on_error(self, store_config: StoreConfig) -> None:
        provider = RedisConnectionProvider(store_config, pool=MagicMock(spec=redis.ConnectionPool))

        with patch(f"{_MODULE}.redis.Redis") as redis_cls:
            redis_cls.return_value.get.side_effect = RedisConnectionError("reset by peer")
            with pytest.raises(StoreError):
                with provider.connection() as store:
                    store.invoke("get", "k")

        redis_cls.return_value.close.assert_called_once()

    def test_acquire_failure(self, store_config: StoreConfig) -> None:
        provider = RedisConnectionProvider(store_config, pool=MagicMock(spec=redis.ConnectionPool))

        with patch(f"{_MODULE}.redis.Redis", side_effect=RedisConnectionError("refused")):
            with pytest.raises(StoreError, match="Could not acquire"):
                with provider.connection():
                    pass

    def test_close(self, store_config: StoreConfig) -> None:
        pool = MagicMock(spec=redis.ConnectionPool)
        provider = RedisConnectionProvider(store_config, pool=pool)

        provider.close()
        provider.close()

        assert provider.closed
        pool.disconnect.assert_called_once()
        with pytest.raises(StoreError):
            with provider.connection():
                pass
