"""
Lazily-built, per-adapter connection handle.

The SDK client is constructed on first use rather than when the adapter
is created, exactly once even if the adapter is shared between threads.
"""

from __future__ import annotations

import threading
from typing import Callable, Generic, TypeVar

from .exceptions import ConnectionInitError

T = TypeVar("T")


class LazyClient(Generic[T]):
    """Thread-safe, initialize-once holder for an SDK client."""

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._client: T | None = None
        self._lock = threading.Lock()

    def get(self) -> T:
        """Return the cached client, building it on the first call.

        Raises:
            ConnectionInitError: If the factory fails.  Nothing is cached
                in that case, so the next call tries again.
        """
        client = self._client
        if client is not None:
            return client
        with self._lock:
            if self._client is None:
                try:
                    self._client = self._factory()
                except Exception as e:
                    raise ConnectionInitError(
                        "Failed to initialize storage client.",
                        error_message=str(e),
                    ) from e
            return self._client

