"""
Tests for the store concurrency guard.
"""

import pytest

from diskstore.storage.guard import StoreGuard


def test_single_stripe_by_default():
    guard = StoreGuard()
    assert guard.stripes == 1
    assert guard.stripe_for("anything") == 0


def test_stripe_selection_is_deterministic():
    guard = StoreGuard(stripes=8)
    for name in ["1", "2", "player_42", "a%2Fb"]:
        stripe = guard.stripe_for(name)
        assert 0 <= stripe < 8
        assert guard.stripe_for(name) == stripe


def test_invalid_stripe_count():
    with pytest.raises(ValueError):
        StoreGuard(stripes=0)


def test_all_holds_every_stripe():
    guard = StoreGuard(stripes=4)
    with guard.all():
        assert all(lock.locked() for lock in guard._locks)
    assert not any(lock.locked() for lock in guard._locks)


def test_key_holds_only_its_stripe():
    guard = StoreGuard(stripes=4)
    stripe = guard.stripe_for("record")
    with guard.key("record"):
        held = [i for i, lock in enumerate(guard._locks) if lock.locked()]
    assert held == [stripe]
