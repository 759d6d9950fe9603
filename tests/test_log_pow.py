"""Tests for the integer log/pow helpers."""

import math

import pytest

from log_pow import lower_log2, pow2


@pytest.mark.parametrize("n, expected", [
    (1, 0), (2, 1), (3, 1), (4, 2), (5, 2), (7, 2), (8, 3), (1023, 9), (1024, 10),
])
def test_lower_log2(n, expected):
    assert lower_log2(n) == expected


def test_lower_log2_matches_floor_log2():
    for n in range(1, 5000):
        assert lower_log2(n) == int(math.floor(math.log2(n)))


@pytest.mark.parametrize("n", [0, -1])
def test_lower_log2_rejects_non_positive(n):
    with pytest.raises(ValueError):
        lower_log2(n)


def test_pow2():
    assert [pow2(k) for k in range(6)] == [1, 2, 4, 8, 16, 32]
    assert pow2(40) == 2 ** 40


def test_pow2_inverts_lower_log2():
    for k in range(20):
        assert lower_log2(pow2(k)) == k


def test_pow2_rejects_negative():
    with pytest.raises(ValueError):
        pow2(-1)
