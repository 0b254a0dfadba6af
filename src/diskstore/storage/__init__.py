"""
Storage layer: disk database, stream codec and concurrency guard.
"""

from diskstore.storage.compression import compress_data, decompress_data
from diskstore.storage.disk_database import DiskDatabase
from diskstore.storage.guard import StoreGuard

__all__ = [
    "DiskDatabase",
    "StoreGuard",
    "compress_data",
    "decompress_data",
]
