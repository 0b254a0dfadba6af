"""
Integration test: full record lifecycle against a fresh store directory.
"""

import pytest

from diskstore import ByteArray, ByteArrayFactory, DiskDatabase


@pytest.mark.parametrize("use_compression", [False, True])
def test_record_lifecycle(tmp_path, use_compression):
    """Load, add, reject duplicate, read, remove, miss."""
    db = DiskDatabase(tmp_path / "store", use_compression=use_compression)
    db.load()
    assert db.path.is_dir()
    assert db.count == 0

    value = ByteArray(key=1, data=b"abc")
    factory = ByteArrayFactory(3, key=1)

    assert db.try_add(value) is True
    assert db.count == 1
    assert db.try_add(value) is False
    assert db.count == 1

    ok, loaded = db.try_get_value(1, factory)
    assert ok
    assert loaded.data == b"abc"

    assert db.try_remove(1) is True
    assert db.count == 0
    assert db.try_get_value(1, factory) == (False, None)

    db.unload()


def test_reload_restores_count(tmp_path):
    """A second instance over the same directory sees earlier records."""
    first = DiskDatabase(tmp_path / "store", use_compression=True)
    first.load()
    for i in range(10):
        assert first.try_add(ByteArray(i, bytes([i]) * 8))
    first.unload()

    second = DiskDatabase(tmp_path / "store", use_compression=True)
    second.load()
    assert second.count == 10
    ok, value = second.try_get_value(3, ByteArrayFactory(8, key=3))
    assert ok
    assert value.data == bytes([3]) * 8


def test_compression_setting_must_match(tmp_path):
    """Plain records are not readable through a compressed store."""
    plain = DiskDatabase(tmp_path / "store")
    plain.load()
    plain.try_add(ByteArray("k", b"abcdef"))

    packed = DiskDatabase(tmp_path / "store", use_compression=True)
    packed.load()
    assert packed.try_get_value("k", ByteArrayFactory(6)) == (False, None)
