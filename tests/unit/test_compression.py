"""
Tests for the zstd stream codec.
"""

import io

import pytest
import zstandard as zstd

from diskstore.storage.compression import (
    PayloadSizeError,
    compress_data,
    decompress_data,
    read_stream,
    write_stream,
)


def test_compressed_stream_is_single_zstd_frame():
    """write_stream output decodes with the one-shot helper."""
    payload = b"abc" * 100
    buffer = io.BytesIO()

    write_stream(buffer, payload, use_compression=True)

    assert not buffer.closed
    assert buffer.getvalue() != payload
    assert decompress_data(buffer.getvalue()) == payload


def test_read_stream_compressed():
    payload = bytes(range(256))
    fh = io.BytesIO(compress_data(payload, level=5))

    assert read_stream(fh, len(payload), use_compression=True) == payload


def test_read_stream_uncompressed():
    payload = b"hello world"
    buffer = io.BytesIO()
    write_stream(buffer, payload, use_compression=False)

    assert buffer.getvalue() == payload
    buffer.seek(0)
    assert read_stream(buffer, len(payload), use_compression=False) == payload


def test_empty_payload_compressed():
    buffer = io.BytesIO()
    write_stream(buffer, b"", use_compression=True)
    buffer.seek(0)

    assert read_stream(buffer, 0, use_compression=True) == b""


@pytest.mark.parametrize("use_compression", [False, True])
def test_short_payload_rejected(use_compression):
    data = compress_data(b"ab") if use_compression else b"ab"
    with pytest.raises(PayloadSizeError):
        read_stream(io.BytesIO(data), 3, use_compression)


@pytest.mark.parametrize("use_compression", [False, True])
def test_long_payload_rejected(use_compression):
    data = compress_data(b"abcd") if use_compression else b"abcd"
    with pytest.raises(PayloadSizeError):
        read_stream(io.BytesIO(data), 3, use_compression)


def test_corrupt_stream_raises_zstd_error():
    with pytest.raises(zstd.ZstdError):
        read_stream(io.BytesIO(b"definitely not zstd"), 3, use_compression=True)
