"""Per-key serialization for find-or-create steps shared between workers."""

from __future__ import annotations

import threading
import zlib
from contextlib import ExitStack, contextmanager
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Hashable, Iterable, Iterator

DEFAULT_SHARDS: Final[int] = 64


class KeyedLocks:
    """A fixed pool of locks; equal keys always map to the same lock.

    Distinct keys may share a shard, which only costs some parallelism.
    """

    def __init__(self, shards: int = DEFAULT_SHARDS) -> None:
        if shards < 1:
            raise ValueError("KeyedLocks needs at least one shard")
        self._locks = tuple(threading.Lock() for _ in range(shards))

    def _shard(self, key: Hashable) -> int:
        return zlib.crc32(repr(key).encode("utf-8")) % len(self._locks)

    def lock_for(self, key: Hashable) -> threading.Lock:
        return self._locks[self._shard(key)]

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self.lock_for(key):
            yield

    @contextmanager
    def hold_all(self, keys: Iterable[Hashable]) -> Iterator[None]:
        """Hold the locks of every key at once.

        Shards are taken once each, in ascending order, so two holders with
        overlapping keys never wait on each other in a cycle.
        """
        with ExitStack() as stack:
            for shard in sorted({self._shard(key) for key in keys}):
                stack.enter_context(self._locks[shard])
            yield
