"""
Compression utilities and stream codec for diskstore.

zstd only via zstandard library. Each compressed record file holds a single
zstd frame.
"""

from typing import BinaryIO

import zstandard as zstd

# Read granularity when draining a decompressing stream
READ_CHUNK_SIZE = 64 * 1024


class PayloadSizeError(ValueError):
    """Stored payload does not match the expected byte size."""


def compress_data(data: bytes, level: int = 3) -> bytes:
    """
    Compress data using zstd.

    Args:
        data: Data to compress
        level: Compression level (1-22, default 3)

    Returns:
        Compressed data
    """
    cctx = zstd.ZstdCompressor(level=level)
    return cctx.compress(data)


def decompress_data(compressed_data: bytes) -> bytes:
    """
    Decompress data using zstd.

    Args:
        compressed_data: Compressed data

    Returns:
        Decompressed data
    """
    dctx = zstd.ZstdDecompressor()
    return dctx.decompress(compressed_data)


def write_stream(fh: BinaryIO, data: bytes, use_compression: bool, level: int = 3):
    """
    Copy a serialized buffer into an open file.

    Args:
        fh: File opened for binary writing
        data: Serialized value
        use_compression: Wrap fh in a zstd compressing stream
        level: Compression level (1-22, default 3)
    """
    if use_compression:
        cctx = zstd.ZstdCompressor(level=level)
        with cctx.stream_writer(fh, size=len(data), closefd=False) as compressor:
            compressor.write(data)
    else:
        fh.write(data)


def read_stream(fh: BinaryIO, size: int, use_compression: bool) -> bytes:
    """
    Read exactly `size` payload bytes from an open file.

    Args:
        fh: File opened for binary reading
        size: Expected payload size
        use_compression: Unwrap fh through a zstd decompressing stream

    Returns:
        Payload bytes

    Raises:
        PayloadSizeError: If the payload is shorter or longer than size
        zstd.ZstdError: If the compressed stream is corrupt
    """
    if use_compression:
        dctx = zstd.ZstdDecompressor()
        with dctx.stream_reader(fh, closefd=False) as reader:
            data = _read_at_most(reader, size + 1)
    else:
        data = _read_at_most(fh, size + 1)

    if len(data) != size:
        raise PayloadSizeError(f"Expected {size} bytes, read {len(data)}")
    return data


def _read_at_most(stream, limit: int) -> bytes:
    """Read until EOF or limit bytes, whichever comes first."""
    parts = []
    remaining = limit
    while remaining > 0:
        part = stream.read(min(remaining, READ_CHUNK_SIZE))
        if not part:
            break
        parts.append(part)
        remaining -= len(part)
    return b"".join(parts)
