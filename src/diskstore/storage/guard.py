"""
Concurrency guard for diskstore.

A guard holds one or more lock stripes. Key-scoped operations take the
stripe chosen by hashing the record's file name; directory-wide operations
take every stripe, always in index order.
"""

import threading
from contextlib import ExitStack, contextmanager
from typing import Iterator, List

import xxhash


class StoreGuard:
    """Striped mutual-exclusion lock. One stripe serializes everything."""

    def __init__(self, stripes: int = 1):
        if stripes < 1:
            raise ValueError(f"lock stripes must be >= 1, got {stripes}")
        self._locks: List[threading.Lock] = [threading.Lock() for _ in range(stripes)]

    @property
    def stripes(self) -> int:
        return len(self._locks)

    def stripe_for(self, filename: str) -> int:
        """Stripe index for a record file name."""
        if len(self._locks) == 1:
            return 0
        return xxhash.xxh32(filename.encode("utf-8")).intdigest() % len(self._locks)

    @contextmanager
    def key(self, filename: str) -> Iterator[None]:
        """Hold the stripe that owns filename."""
        with self._locks[self.stripe_for(filename)]:
            yield

    @contextmanager
    def all(self) -> Iterator[None]:
        """Hold every stripe."""
        with ExitStack() as stack:
            for lock in self._locks:
                stack.enter_context(lock)
            yield
