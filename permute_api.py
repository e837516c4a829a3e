#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Range permutation API
Validates bounds and values, then hands them to the cycle-walking cipher in feistel.py
"""
import os

from dotenv import load_dotenv

from feistel import (
    Direction,
    InvalidRange,
    OutOfBounds,
    WALK_MAX,
    cycle_walking_cipher,
)

# Load environment variables from .env file if it exists
load_dotenv()

# Debug mode - set via environment variable
DEBUG_MODE = os.environ.get('DEBUG', 'false').lower() == 'true'

# Default secret key - used by the debug tools when none is given
DEFAULT_SECRET_KEY = int(os.environ.get('DEFAULT_SECRET_KEY', '29202393'))

# Maximum number of cycle walks before giving up
PERMUTE_WALK_MAX = int(os.environ.get('PERMUTE_WALK_MAX', str(WALK_MAX)))

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

# ============================================================================
# RANGE CHECKS
# ============================================================================

def _difference_overflows(minv: int, maxv: int) -> bool:
    """True when maxv - minv would not fit in a signed 64-bit integer"""
    return (minv > 0 and maxv < INT64_MIN + minv) or (minv < 0 and maxv > INT64_MAX + minv)

def check_sequence_range(minv: int, maxv: int) -> bool:
    """
    Returns True if at least 4 elements fit in [minv, maxv].
    The difference is only computed when it cannot overflow an int64;
    when it would, the interval is large enough anyway.
    """
    if _difference_overflows(minv, maxv):
        return True
    return maxv - minv >= 4 - 1

def _check_decrypt_range(minv: int, maxv: int) -> bool:
    """Decrypting through a sequence asks for one more element than encrypting"""
    if _difference_overflows(minv, maxv):
        return True
    return maxv - minv >= 4

def _check_bounds_type(minval: int, maxval: int):
    for bound in (minval, maxval):
        if not INT64_MIN <= bound <= INT64_MAX:
            raise InvalidRange(f"bound {bound} does not fit in a signed 64-bit integer")

def _check_value(value: int, minval: int, maxval: int):
    if value < minval or value > maxval:
        if DEBUG_MODE:
            print(f"❌ {value} is outside of range [{minval},{maxval}]")
        raise OutOfBounds(f"invalid value: {value} is outside of range [{minval},{maxval}]")

# ============================================================================
# ELEMENT PERMUTATION
# ============================================================================

def range_encrypt_element(clearval: int, minval: int, maxval: int, crypt_key: int) -> int:
    """
    Encrypt/permute a value from [minval, maxval] into itself.

    Raises:
        InvalidRange: if the interval holds fewer than 4 values
        OutOfBounds: if clearval is outside [minval, maxval]
    """
    _check_bounds_type(minval, maxval)
    if not check_sequence_range(minval, maxval):
        if DEBUG_MODE:
            print(f"❌ Range [{minval},{maxval}] too short to encrypt")
        raise InvalidRange("range too short to encrypt: the difference between minimum "
                           "and maximum values should be at least 3.")
    _check_value(clearval, minval, maxval)

    return cycle_walking_cipher(minval, maxval, clearval, crypt_key,
                                Direction.ENCRYPT, walk_max=PERMUTE_WALK_MAX)

def range_decrypt_element(val: int, minval: int, maxval: int, crypt_key: int) -> int:
    """
    Decrypt a value produced by range_encrypt_element() with the same
    bounds and key.
    """
    _check_bounds_type(minval, maxval)
    if not check_sequence_range(minval, maxval):
        if DEBUG_MODE:
            print(f"❌ Range [{minval},{maxval}] too short to decrypt")
        raise InvalidRange("range too short to decrypt: the difference between minimum "
                           "and maximum values should be at least 3.")
    _check_value(val, minval, maxval)

    return cycle_walking_cipher(minval, maxval, val, crypt_key,
                                Direction.DECRYPT, walk_max=PERMUTE_WALK_MAX)

# ============================================================================
# SEQUENCE PERMUTATION
# ============================================================================
# A sequence is any object exposing min_value, max_value and nextval().

def permute_nextval(sequence, crypt_key: int) -> int:
    """
    Advance the sequence and return the new value encrypted within the
    bounds of the sequence.
    """
    minval = sequence.min_value
    maxval = sequence.max_value
    _check_bounds_type(minval, maxval)

    # Make sure that the sequence is large enough
    if not check_sequence_range(minval, maxval):
        if DEBUG_MODE:
            print(f"❌ Sequence [{minval},{maxval}] too short to encrypt")
        raise InvalidRange("sequence too short to encrypt. The difference between minimum "
                           "and maximum values should be at least 3.")

    nextval = sequence.nextval()

    if nextval < minval or nextval > maxval:
        if DEBUG_MODE:
            print(f"❌ nextval {nextval} outside of [{minval},{maxval}]")
        raise OutOfBounds("nextval of the sequence is outside the interval.")

    result = cycle_walking_cipher(minval, maxval, nextval, crypt_key,
                                  Direction.ENCRYPT, walk_max=PERMUTE_WALK_MAX)
    if DEBUG_MODE:
        print(f"✅ nextval {nextval} permuted to {result}")
    return result

def reverse_permute(sequence, value: int, crypt_key: int) -> int:
    """
    Return the original sequence value from its permuted element.
    The sequence only provides the bounds; it is not advanced.
    """
    minval = sequence.min_value
    maxval = sequence.max_value
    _check_bounds_type(minval, maxval)

    if not _check_decrypt_range(minval, maxval):
        if DEBUG_MODE:
            print(f"❌ Sequence [{minval},{maxval}] too short to decrypt")
        raise InvalidRange("sequence too short to decrypt. The difference between minimum "
                           "and maximum values should be at least 4.")

    if value < minval or value > maxval:
        if DEBUG_MODE:
            print(f"❌ {value} out of sequence bounds [{minval},{maxval}]")
        raise OutOfBounds("value out of sequence bounds.")

    return cycle_walking_cipher(minval, maxval, value, crypt_key,
                                Direction.DECRYPT, walk_max=PERMUTE_WALK_MAX)
