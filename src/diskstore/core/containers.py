"""
Raw byte containers that satisfy the value and factory contracts.
"""

from dataclasses import dataclass
from typing import Hashable


@dataclass(frozen=True)
class ByteArray:
    """A keyed, fixed-size blob of raw bytes."""

    key: Hashable
    data: bytes

    @property
    def byte_size(self) -> int:
        return len(self.data)

    def to_bytes(self, buffer: bytearray) -> None:
        buffer[: len(self.data)] = self.data


class ByteArrayFactory:
    """Builds ByteArray values of a fixed size."""

    def __init__(self, byte_size: int, key: Hashable = None):
        """
        Initialize factory.

        Args:
            byte_size: Exact payload size in bytes
            key: Key attached to created values (the store reads by key,
                 so callers usually pass the key they are reading)
        """
        if byte_size < 0:
            raise ValueError(f"byte_size must be non-negative, got {byte_size}")
        self._byte_size = byte_size
        self.key = key

    @property
    def byte_size(self) -> int:
        return self._byte_size

    def create(self, buffer: bytes) -> ByteArray:
        return ByteArray(key=self.key, data=bytes(buffer))
