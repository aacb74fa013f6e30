"""Store client port for the underlying key-value store.

This outbound port is the only capability redis_table consumes from its
environment: execute one named operation with arguments against the store
and return a native reply, or fail with StoreError.

Connection acquisition, pooling, credentials and the wire protocol all live
behind this port.
"""

from __future__ import annotations

from abc import abstractmethod
from contextlib import AbstractContextManager
from typing import Any, Protocol, Sequence

from redis_table.domain.value_objects import NativeReply


class StoreClient(Protocol):
    """Protocol for executing operations against the store.

    A StoreClient is bound to one borrowed connection and is only valid
    inside the StoreConnectionProvider.connection() block that produced it.

    Thread Safety:
        Not thread-safe. One client serves one command on one thread.
    """

    @abstractmethod
    def invoke(self, operation: str, *args: Any, **kwargs: Any) -> NativeReply:
        """Invoke a named, typed store operation.

        Args:
            operation: Operation name in the client's vocabulary (e.g. "hset").
            *args: Positional arguments, already coerced.
            **kwargs: Keyword arguments (e.g. ``mapping`` for HSET).

        Returns:
            The classified native reply.

        Raises:
            StoreError: If the store rejects the call or cannot be reached.
        """
        ...

    @abstractmethod
    def execute_raw(self, verb: str, args: Sequence[str]) -> NativeReply:
        """Send a command verbatim, without client-side validation.

        Used for verbs outside the dispatch table, including module
        commands such as ``JSON.GET``.

        Raises:
            StoreError: If the store rejects the call or cannot be reached.
        """
        ...


class StoreConnectionProvider(Protocol):
    """Protocol for scoped acquisition of store clients.

    Example:
        with provider.connection() as client:
            reply = client.invoke("get", "user:1")
        # connection released here, on success or failure
    """

    @abstractmethod
    def connection(self) -> AbstractContextManager[StoreClient]:
        """Borrow a connection for the duration of one command.

        The connection must be released on every exit path, including when
        the body raises.

        Raises:
            StoreError: If a connection cannot be acquired.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Release every pooled resource. The provider is unusable afterwards."""
        ...
