"""
diskstore - File-per-record key-value store with optional zstd compression.
"""

from diskstore.core import ByteArray, ByteArrayFactory, StoreConfig, StoreResult, StoreStatus
from diskstore.storage import DiskDatabase

__version__ = "0.1.0"

__all__ = [
    "DiskDatabase",
    "StoreConfig",
    "StoreResult",
    "StoreStatus",
    "ByteArray",
    "ByteArrayFactory",
]
