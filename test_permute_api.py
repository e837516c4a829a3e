#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Tests for the validating wrappers around the cipher:
range checks per direction, bounds checks, and the sequence helpers.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(__file__))

from feistel import InfiniteCycleError, InvalidRange, OutOfBounds, PermuteError
from permute_api import (
    INT64_MAX,
    INT64_MIN,
    check_sequence_range,
    permute_nextval,
    range_decrypt_element,
    range_encrypt_element,
    reverse_permute,
)

KEY = 29202393


class FakeSequence:
    """Minimal counter: min_value, max_value and nextval() like a database sequence"""

    def __init__(self, min_value, max_value, start=None, increment=1):
        self.min_value = min_value
        self.max_value = max_value
        self.increment = increment
        self._next = min_value if start is None else start
        self.calls = 0

    def nextval(self):
        value = self._next
        self._next += self.increment
        self.calls += 1
        return value


def test_check_sequence_range_thresholds():
    assert check_sequence_range(0, 3)
    assert check_sequence_range(-2, 1)
    assert not check_sequence_range(0, 2)
    assert not check_sequence_range(5, 5)
    assert not check_sequence_range(10, 0)


def test_check_sequence_range_overflow_short_circuit():
    assert check_sequence_range(INT64_MIN, INT64_MAX)
    assert check_sequence_range(-1, INT64_MAX)
    assert check_sequence_range(INT64_MIN, 1)
    # Difference fits: computed normally
    assert check_sequence_range(0, INT64_MAX)
    assert check_sequence_range(INT64_MAX - 3, INT64_MAX)
    assert not check_sequence_range(INT64_MAX - 2, INT64_MAX)
    assert not check_sequence_range(INT64_MIN, INT64_MIN + 2)


def test_errors_share_a_base_class():
    assert issubclass(InvalidRange, PermuteError)
    assert issubclass(OutOfBounds, ValueError)
    assert issubclass(InfiniteCycleError, RuntimeError)


def test_range_element_round_trip():
    for value in range(-20, 21):
        encrypted = range_encrypt_element(value, -20, 20, KEY)
        assert -20 <= encrypted <= 20
        assert range_decrypt_element(encrypted, -20, 20, KEY) == value


def test_range_element_minimum_range():
    results = [range_encrypt_element(v, 0, 3, KEY) for v in range(4)]
    assert sorted(results) == [0, 1, 2, 3]
    for value, encrypted in enumerate(results):
        assert range_decrypt_element(encrypted, 0, 3, KEY) == value


def test_range_element_too_short():
    with pytest.raises(InvalidRange):
        range_encrypt_element(1, 0, 2, KEY)
    with pytest.raises(InvalidRange):
        range_decrypt_element(1, 0, 2, KEY)


def test_range_element_out_of_bounds():
    with pytest.raises(OutOfBounds) as excinfo:
        range_encrypt_element(101, 0, 100, KEY)
    assert str(excinfo.value) == "invalid value: 101 is outside of range [0,100]"

    with pytest.raises(OutOfBounds):
        range_decrypt_element(-1, 0, 100, KEY)


def test_range_element_bounds_must_fit_int64():
    with pytest.raises(InvalidRange):
        range_encrypt_element(0, 0, INT64_MAX + 1, KEY)
    with pytest.raises(InvalidRange):
        range_decrypt_element(0, INT64_MIN - 1, 0, KEY)


def test_range_element_full_int64_range():
    for value in (INT64_MIN, 0, INT64_MAX):
        encrypted = range_encrypt_element(value, INT64_MIN, INT64_MAX, KEY)
        assert INT64_MIN <= encrypted <= INT64_MAX
        assert range_decrypt_element(encrypted, INT64_MIN, INT64_MAX, KEY) == value


def test_permute_nextval_covers_sequence():
    seq = FakeSequence(1, 100)
    results = [permute_nextval(seq, KEY) for _ in range(100)]
    assert seq.calls == 100
    assert sorted(results) == list(range(1, 101))

    for clear, permuted in zip(range(1, 101), results):
        assert reverse_permute(seq, permuted, KEY) == clear
    # reverse_permute only reads the bounds
    assert seq.calls == 100


def test_permute_nextval_matches_range_element():
    seq = FakeSequence(-10000, 15000, start=42)
    assert permute_nextval(seq, KEY) == range_encrypt_element(42, -10000, 15000, KEY)


def test_permute_nextval_too_short_does_not_advance():
    seq = FakeSequence(0, 2)
    with pytest.raises(InvalidRange) as excinfo:
        permute_nextval(seq, KEY)
    assert "sequence too short to encrypt" in str(excinfo.value)
    assert seq.calls == 0


def test_permute_nextval_outside_interval():
    seq = FakeSequence(0, 10, start=11)
    with pytest.raises(OutOfBounds) as excinfo:
        permute_nextval(seq, KEY)
    assert str(excinfo.value) == "nextval of the sequence is outside the interval."


def test_reverse_permute_needs_one_more_element():
    # Encrypting [0,3] through a sequence is allowed, decrypting it is not
    seq = FakeSequence(0, 3)
    permute_nextval(seq, KEY)
    with pytest.raises(InvalidRange) as excinfo:
        reverse_permute(seq, 0, KEY)
    assert "sequence too short to decrypt" in str(excinfo.value)

    seq = FakeSequence(0, 4)
    permuted = permute_nextval(seq, KEY)
    assert reverse_permute(seq, permuted, KEY) == 0


def test_reverse_permute_full_int64_range():
    seq = FakeSequence(INT64_MIN, INT64_MAX, start=123)
    permuted = permute_nextval(seq, KEY)
    assert reverse_permute(seq, permuted, KEY) == 123


def test_reverse_permute_out_of_bounds():
    seq = FakeSequence(0, 100)
    with pytest.raises(OutOfBounds) as excinfo:
        reverse_permute(seq, 200, KEY)
    assert str(excinfo.value) == "value out of sequence bounds."


if __name__ == '__main__':
    sys.exit(pytest.main([__file__, '-v']))
