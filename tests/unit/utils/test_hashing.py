from __future__ import annotations

"""
Unit tests for the djb2 string hash.
"""

from plantocode.utils.hashing import hash_string


def test_known_values() -> None:
    assert hash_string("") == "1505"
    assert hash_string("a") == "2b606"


def test_hash_is_stable_and_discriminating() -> None:
    path = "/home/user/projects/app"

    assert hash_string(path) == hash_string(path)
    assert hash_string(path) != hash_string(path + "2")


def test_hash_stays_within_32_bits() -> None:
    value = hash_string("x" * 10_000)

    assert int(value, 16) < 2 ** 32
    assert value == value.lower()
