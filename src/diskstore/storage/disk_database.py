"""
Disk database for diskstore.

Stores every value as its own file under a root directory, optionally zstd
compressed, with all operations serialized by a StoreGuard.
"""

import logging
import threading
from pathlib import Path
from typing import Hashable, Optional, Tuple, Union

import zstandard as zstd

from diskstore.core.contracts import (
    ByteSerializable,
    StoreConfig,
    StoreResult,
    StoreStatus,
    ValueFactory,
)
from diskstore.core.keys import key_to_filename
from diskstore.storage.compression import PayloadSizeError, read_stream, write_stream
from diskstore.storage.guard import StoreGuard

logger = logging.getLogger(__name__)

# File modes for the write primitive
CREATE_NEW = "xb"
CREATE_OR_OVERWRITE = "wb"


class DiskDatabase:
    """
    File-per-record key-value store.

    Layout:
    - <path>/<key_to_filename(key)>: serialized value, one zstd frame per
      file when compression is enabled

    Count is advisory: it tracks files this instance created or removed and
    is recomputed from the directory by load() and recount().
    """

    def __init__(
        self,
        path: Union[str, Path],
        use_compression: bool = False,
        compression_level: int = 3,
        lock_stripes: int = 1,
    ):
        """
        Initialize disk database. No I/O happens until load().

        Args:
            path: Root directory holding one file per record
            use_compression: Compress every record file with zstd
            compression_level: zstd level (1-22, default 3)
            lock_stripes: Number of guard stripes; 1 serializes every operation
        """
        self._path = Path(path)
        self._use_compression = use_compression
        self._compression_level = compression_level
        self._guard = StoreGuard(lock_stripes)
        self._count = 0
        self._count_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: StoreConfig) -> "DiskDatabase":
        return cls(
            config.path,
            use_compression=config.use_compression,
            compression_level=config.compression_level,
            lock_stripes=config.lock_stripes,
        )

    @property
    def count(self) -> int:
        return self._count

    @property
    def path(self) -> Path:
        return self._path

    @property
    def use_compression(self) -> bool:
        return self._use_compression

    @property
    def compression_level(self) -> int:
        return self._compression_level

    @property
    def lock_stripes(self) -> int:
        return self._guard.stripes

    def __len__(self) -> int:
        return self._count

    def __contains__(self, key: Hashable) -> bool:
        return self.contains_key(key)

    def __repr__(self) -> str:
        return (
            f"DiskDatabase(path={str(self._path)!r}, "
            f"use_compression={self._use_compression}, count={self._count})"
        )

    # Lifecycle

    def load(self):
        """Create the root directory, or recount records if it already exists."""
        with self._guard.all():
            if self._path.is_dir():
                self._set_count(self._count_files())
                logger.info("Loaded %d records from %s", self._count, self._path)
            else:
                self._path.mkdir(parents=True)
                logger.info("Created store directory %s", self._path)

    def unload(self):
        """Nothing is buffered; every write is synchronous and whole-file."""

    def recount(self) -> int:
        """
        Recompute count from the files under the root directory.

        Returns:
            New count (0 if the directory cannot be listed)
        """
        with self._guard.all():
            try:
                self._set_count(self._count_files())
            except OSError:
                logger.warning("Could not list %s", self._path, exc_info=True)
                self._set_count(0)
            return self._count

    # Typed operations

    def contains_key(self, key: Hashable) -> bool:
        filename = key_to_filename(key)
        with self._guard.key(filename):
            try:
                return (self._path / filename).exists()
            except OSError:
                logger.warning("Could not stat record %s", filename, exc_info=True)
                return False

    def add(self, value: ByteSerializable) -> StoreResult:
        """
        Insert a value; fails with CONFLICT if its key is already stored.

        Existing data is never touched and count only grows on success.
        """
        data = self._serialize(value)
        filename = key_to_filename(value.key)

        with self._guard.key(filename):
            status = self._write(filename, CREATE_NEW, data)
            if status is StoreStatus.OK:
                self._adjust_count(1)

        return StoreResult(status)

    def update(self, value: ByteSerializable) -> StoreResult:
        """Write a value, creating or overwriting its file."""
        data = self._serialize(value)
        filename = key_to_filename(value.key)

        with self._guard.key(filename):
            return StoreResult(self._overwrite(filename, data))

    def upsert(self, value: ByteSerializable) -> StoreResult:
        """Insert a value, falling back to overwrite if the create fails."""
        data = self._serialize(value)
        filename = key_to_filename(value.key)

        with self._guard.key(filename):
            status = self._write(filename, CREATE_NEW, data)
            if status is StoreStatus.OK:
                self._adjust_count(1)
                return StoreResult(status)
            return StoreResult(self._overwrite(filename, data))

    def remove(self, key: Hashable) -> StoreResult:
        filename = key_to_filename(key)

        with self._guard.key(filename):
            status = self._delete(filename)
            if status is StoreStatus.OK:
                self._adjust_count(-1)

        return StoreResult(status)

    def pop(self, key: Hashable, factory: ValueFactory) -> StoreResult:
        """
        Read, decode and then delete a value under one guard acquisition.

        The file is deleted only if the read succeeded.
        """
        filename = key_to_filename(key)

        with self._guard.key(filename):
            status, data = self._read(filename, factory.byte_size)
            if status is not StoreStatus.OK:
                return StoreResult(status)

            value = factory.create(data)

            status = self._delete(filename)
            if status is not StoreStatus.OK:
                return StoreResult(status)
            self._adjust_count(-1)

        return StoreResult(StoreStatus.OK, value)

    def get(self, key: Hashable, factory: ValueFactory) -> StoreResult:
        """
        Read and decode a value.

        Errors raised by factory.create propagate to the caller.
        """
        filename = key_to_filename(key)

        with self._guard.key(filename):
            status, data = self._read(filename, factory.byte_size)

        if status is not StoreStatus.OK:
            return StoreResult(status)
        return StoreResult(StoreStatus.OK, factory.create(data))

    def clear(self) -> int:
        """
        Delete every file directly under the root directory.

        Returns:
            Number of files deleted; count is set to the number left behind
        """
        with self._guard.all():
            try:
                files = [p for p in self._path.iterdir() if p.is_file()]
            except OSError:
                logger.warning("Could not list %s", self._path, exc_info=True)
                return 0

            deleted = 0
            for file_path in files:
                try:
                    file_path.unlink()
                    deleted += 1
                except OSError:
                    logger.warning("Could not delete %s", file_path, exc_info=True)

            self._set_count(len(files) - deleted)
            logger.debug("Cleared %d records from %s", deleted, self._path)
            return deleted

    # Boolean operations

    def try_add(self, value: ByteSerializable) -> bool:
        return self.add(value).ok

    def try_update(self, value: ByteSerializable) -> bool:
        return self.update(value).ok

    def add_or_update(self, value: ByteSerializable) -> bool:
        return self.upsert(value).ok

    def try_remove(self, key: Hashable) -> bool:
        return self.remove(key).ok

    def try_remove_value(self, key: Hashable, factory: ValueFactory) -> Tuple[bool, Optional[object]]:
        result = self.pop(key, factory)
        return result.ok, result.value

    def try_get_value(self, key: Hashable, factory: ValueFactory) -> Tuple[bool, Optional[object]]:
        result = self.get(key, factory)
        return result.ok, result.value

    # Primitives (callers hold the guard)

    @staticmethod
    def _serialize(value: ByteSerializable) -> bytes:
        size = value.byte_size
        buffer = bytearray(size)
        value.to_bytes(buffer)
        if len(buffer) != size:
            raise ValueError(
                f"{type(value).__name__}.to_bytes resized buffer from {size} to {len(buffer)} bytes"
            )
        return bytes(buffer)

    def _overwrite(self, filename: str, data: bytes) -> StoreStatus:
        """Create-or-overwrite; counts the record if the file is new."""
        try:
            existed = (self._path / filename).exists()
        except OSError:
            # _write reports the failure
            existed = True
        status = self._write(filename, CREATE_OR_OVERWRITE, data)
        if status is StoreStatus.OK and not existed:
            self._adjust_count(1)
        return status

    def _write(self, filename: str, mode: str, data: bytes) -> StoreStatus:
        file_path = self._path / filename
        try:
            with open(file_path, mode) as fh:
                write_stream(fh, data, self._use_compression, self._compression_level)
        except FileExistsError:
            logger.debug("Record %s already exists", filename)
            return StoreStatus.CONFLICT
        except (OSError, zstd.ZstdError):
            logger.warning("Failed to write record %s", file_path, exc_info=True)
            return StoreStatus.IO_FAILURE
        return StoreStatus.OK

    def _read(self, filename: str, size: int) -> Tuple[StoreStatus, Optional[bytes]]:
        file_path = self._path / filename
        try:
            with open(file_path, "rb") as fh:
                data = read_stream(fh, size, self._use_compression)
        except FileNotFoundError:
            logger.debug("Record %s not found", filename)
            return StoreStatus.NOT_FOUND, None
        except PayloadSizeError as e:
            logger.warning("Record %s has wrong size: %s", file_path, e)
            return StoreStatus.IO_FAILURE, None
        except (OSError, zstd.ZstdError):
            logger.warning("Failed to read record %s", file_path, exc_info=True)
            return StoreStatus.IO_FAILURE, None
        return StoreStatus.OK, data

    def _delete(self, filename: str) -> StoreStatus:
        file_path = self._path / filename
        try:
            file_path.unlink()
        except FileNotFoundError:
            logger.debug("Record %s not found", filename)
            return StoreStatus.NOT_FOUND
        except OSError:
            logger.warning("Failed to delete record %s", file_path, exc_info=True)
            return StoreStatus.IO_FAILURE
        return StoreStatus.OK

    def _count_files(self) -> int:
        return sum(1 for p in self._path.iterdir() if p.is_file())

    def _set_count(self, value: int):
        with self._count_lock:
            self._count = value

    def _adjust_count(self, delta: int):
        with self._count_lock:
            self._count += delta
