"""
Core contracts for diskstore.

Values and factories are structural protocols; the store never imports
concrete value types.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Hashable, Optional, Protocol, TypeVar, runtime_checkable


@runtime_checkable
class ByteSerializable(Protocol):
    """A value with a fixed serialized size, identified by a key."""

    @property
    def byte_size(self) -> int:
        ...

    @property
    def key(self) -> Hashable:
        ...

    def to_bytes(self, buffer: bytearray) -> None:
        """Write the value into a buffer of exactly byte_size bytes."""
        ...


@runtime_checkable
class ValueFactory(Protocol):
    """Rebuilds values of a known byte size from raw buffers."""

    @property
    def byte_size(self) -> int:
        ...

    def create(self, buffer: bytes) -> Any:
        ...


@dataclass
class StoreConfig:
    """Configuration for a disk-backed store."""

    path: str
    use_compression: bool = False
    compression_level: int = 3  # zstd level (1-22)
    lock_stripes: int = 1  # 1 = single guard for every operation


class StoreStatus(Enum):
    """Outcome of a store operation."""

    OK = "ok"
    CONFLICT = "conflict"  # exclusive create hit an existing file
    NOT_FOUND = "not_found"
    IO_FAILURE = "io_failure"


V = TypeVar("V")


@dataclass
class StoreResult(Generic[V]):
    """Typed outcome of a store operation, optionally carrying a value."""

    status: StoreStatus
    value: Optional[V] = None

    @property
    def ok(self) -> bool:
        return self.status is StoreStatus.OK

    def __bool__(self) -> bool:
        return self.ok
