"""
Core contracts, containers and key mapping for diskstore.
"""

from diskstore.core.containers import ByteArray, ByteArrayFactory
from diskstore.core.contracts import (
    ByteSerializable,
    StoreConfig,
    StoreResult,
    StoreStatus,
    ValueFactory,
)
from diskstore.core.keys import filename_to_key, key_to_filename, key_to_path

__all__ = [
    "ByteSerializable",
    "ValueFactory",
    "StoreConfig",
    "StoreStatus",
    "StoreResult",
    "ByteArray",
    "ByteArrayFactory",
    "key_to_filename",
    "filename_to_key",
    "key_to_path",
]
