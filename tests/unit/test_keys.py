"""
Tests for key -> file name mapping.
"""

import pytest

from diskstore.core.keys import filename_to_key, key_to_filename, key_to_path


def test_plain_keys_are_unchanged():
    """Integers and simple strings map to themselves."""
    assert key_to_filename(1) == "1"
    assert key_to_filename("player_42") == "player_42"


def test_separators_and_dots_are_escaped():
    """No key can escape the store root."""
    assert key_to_filename("a/b") == "a%2Fb"
    assert key_to_filename("..\\x") == "..%5Cx"
    assert key_to_filename(".") == "%2E"
    assert key_to_filename("..") == "%2E%2E"


def test_mapping_is_injective():
    """Keys that look like encoded names get distinct file names."""
    keys = [".", "%2E", "..", "%2E%2E", "a/b", "a%2Fb", "a b", "a+b"]
    filenames = [key_to_filename(k) for k in keys]
    assert len(set(filenames)) == len(keys)


def test_filename_to_key_reverses_mapping():
    for key in ["plain", "a/b", ".", "..", "%2E", "ключ"]:
        assert filename_to_key(key_to_filename(key)) == key


def test_empty_key_rejected():
    with pytest.raises(ValueError):
        key_to_filename("")


def test_key_to_path(tmp_path):
    assert key_to_path(tmp_path, "x/y") == tmp_path / "x%2Fy"


def test_lone_surrogate_key_rejected():
    with pytest.raises(ValueError):
        key_to_filename("\ud800")


def test_keys_identified_by_string_form():
    """1 and "1" name the same record."""
    assert key_to_filename(1) == key_to_filename("1")
