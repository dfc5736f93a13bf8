"""
Key-value store adapter for loading parsed records.

This module provides a narrow interface over the store: a record is written
with `set`, optionally with an expiry, and the connection is released with
`close`. The production implementation talks to Redis through redis-py; an
in-memory implementation is provided for tests.
"""

from types import TracebackType
from typing import Any, Callable, Protocol

import redis

from core.exceptions import StoreConnectionError, StoreWriteError
from core.models import StoreSettings


class KeyValueStore(Protocol):
    """
    Protocol for the store that receives `ip -> account` records.

    Writes overwrite any existing value for the same key.
    """

    def set(self, key: str, value: str, ttl: int | None = None) -> None:
        """
        Write a record.

        Args:
            key: The record key.
            value: The record value.
            ttl: Expiry in seconds. None (or a non-positive value) stores the
                record without expiry.
        """

    def close(self) -> None:
        """Release the connection."""


class RedisStore:
    """
    Redis implementation of KeyValueStore.

    The connection is established once by `connect()`, which also performs
    authentication when a password is configured. Use as a context manager to
    guarantee the connection is released on every exit path:

        with RedisStore(settings) as store:
            store.set("10.1.1.1", "alice")

    Attributes:
        settings: Host, port and optional password of the server.
    """

    def __init__(
        self,
        settings: StoreSettings,
        client_factory: Callable[..., Any] | None = None,
    ):
        """
        Args:
            settings: Connection parameters.
            client_factory: Optional callable used instead of `redis.Redis` to
                build the client. Receives host, port and password keywords.
        """
        self.settings = settings
        self._client_factory = client_factory if client_factory else redis.Redis
        self._client: Any = None

    def connect(self) -> None:
        """
        Open the connection and verify it with a PING.

        Raises:
            StoreConnectionError: If the server is unreachable or rejects the
                password.
        """
        try:
            self._client = self._client_factory(
                host=self.settings.host,
                port=self.settings.port,
                password=self.settings.password,
            )
            self._client.ping()
        except redis.RedisError as e:
            self._client = None
            raise StoreConnectionError(
                message=f"Failed to connect to Redis at {self.settings.address}",
                address=self.settings.address,
                original_exception=e,
            ) from e

    def set(self, key: str, value: str, ttl: int | None = None) -> None:
        """
        Write a record, with SETEX when a positive TTL is given, SET otherwise.

        Raises:
            RuntimeError: If called before `connect()`.
            StoreWriteError: If the server rejects the write or the connection drops.
        """
        if self._client is None:
            raise RuntimeError("RedisStore.connect() must be called before set()")

        try:
            if ttl is not None and ttl > 0:
                self._client.setex(key, ttl, value)
            else:
                self._client.set(key, value)
        except redis.RedisError as e:
            raise StoreWriteError(
                message=f"Failed to write key '{key}' to Redis at {self.settings.address}",
                address=self.settings.address,
                original_exception=e,
            ) from e

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "RedisStore":
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class MockStore:
    """
    In-memory implementation of KeyValueStore for testing.

    Attributes (for test inspection):
        data: Current key -> value mapping (last write wins).
        ttls: Key -> TTL of the last write, None when written without expiry.
        set_calls: List of (key, value, ttl) tuples in call order.
        closed: True once close() has been called.
    """

    def __init__(self, fail_on_keys: set[str] | None = None):
        self.fail_on_keys = fail_on_keys or set()
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}
        self.set_calls: list[tuple[str, str, int | None]] = []
        self.closed = False

    def set(self, key: str, value: str, ttl: int | None = None) -> None:
        self.set_calls.append((key, value, ttl))
        if key in self.fail_on_keys:
            raise StoreWriteError(message=f"Failed to write key '{key}'")
        self.data[key] = value
        self.ttls[key] = ttl if ttl is not None and ttl > 0 else None

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "MockStore":
        return self

    def __exit__(self, *args) -> None:
        self.close()
