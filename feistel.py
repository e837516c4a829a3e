# Feistel cipher implementation for range permutation
# Cycle-walking Feistel network over an arbitrary [min, max] 64-bit interval

from enum import IntEnum

MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF

# Number of rounds of the Feistel network. Must be odd and at least 3.
NR = 9

# Cap on the number of walks searching for a result inside the interval.
# Reaching it means the chain of results has a cycle, i.e. a bug.
WALK_MAX = 1000000


class Direction(IntEnum):
    ENCRYPT = 0
    DECRYPT = 1


class PermuteError(Exception):
    """Base class for range permutation errors"""


class InvalidRange(PermuteError, ValueError):
    """The [min, max] interval is too small (or malformed) to be permuted"""


class OutOfBounds(PermuteError, ValueError):
    """The value to permute lies outside [min, max]"""


class InfiniteCycleError(PermuteError, RuntimeError):
    """
    Cycle walking did not land inside the interval after walk_max walks.
    This is a defect of the network or of the hash, not a data problem.
    """

    def __init__(self, value, walk_max):
        self.value = value
        self.walk_max = walk_max
        super().__init__(
            f"infinite cycle walking prevented for value {value} ({walk_max} loops)"
        )


def _rot(x, k):
    return ((x << k) | (x >> (32 - k))) & MASK32


def hash_uint32(k: int) -> int:
    """
    Hash a 32-bit unsigned integer to a 32-bit unsigned integer.

    This is the final() mix of Bob Jenkins' lookup3, seeded for a single
    4-byte key, so the same input always hashes to the same output on any
    platform.
    """
    a = b = c = (0x9E3779B9 + 4 + 3923095) & MASK32
    a = (a + (k & MASK32)) & MASK32

    c ^= b
    c = (c - _rot(b, 14)) & MASK32
    a ^= c
    a = (a - _rot(c, 11)) & MASK32
    b ^= a
    b = (b - _rot(a, 25)) & MASK32
    c ^= b
    c = (c - _rot(b, 16)) & MASK32
    a ^= c
    a = (a - _rot(c, 4)) & MASK32
    b ^= a
    b = (b - _rot(a, 14)) & MASK32
    c ^= b
    c = (c - _rot(b, 24)) & MASK32
    return c


def scramble_key(key: int, hash_fn=hash_uint32) -> int:
    """
    Spread the bits of a user supplied key.

    Weak keys (for instance with only a few right-most bits set) would
    otherwise leave most subkeys at zero. Each 32-bit half is hashed
    separately and the results are recombined into 64 bits.
    """
    key &= MASK64
    return hash_fn(key & MASK32) | (hash_fn((key >> 32) & MASK32) << 32)


def half_block_size(span: int) -> int:
    """
    Smallest half block size h (1 <= h <= 32) such as two half blocks
    of h bits can address span values, i.e. 2**(2*h) >= span.
    """
    hsz = 1
    while hsz < 32 and (1 << (2 * hsz)) < span:
        hsz += 1
    return hsz


def round_subkey(scrambled_key: int, hsz: int, i: int, direction, rounds: int = NR) -> int:
    """
    Subkey for round i.

    Ki is a sliding and cycling window over the scrambled key, moving hsz
    bits per round, so that each round takes different bits out of the key.
    Decryption walks the subkeys in reverse order.
    """
    j = i if direction == Direction.ENCRYPT else rounds - 1 - i
    ki = (scrambled_key >> ((hsz * j) & 0x3F)) & MASK32
    return (ki + j) & MASK32


def feistel_rounds(left: int, right: int, scrambled_key: int, hsz: int, direction,
                   hash_fn=hash_uint32, rounds: int = NR):
    """
    Run the Feistel network on the (left, right) half blocks.
    The round function is hash(R) XOR hash(Ki).

    Returns the (left, right) pair after the last round.
    """
    mask = (1 << hsz) - 1
    for i in range(rounds):
        ki = round_subkey(scrambled_key, hsz, i, direction, rounds)
        left, right = right, (left ^ hash_fn(right) ^ hash_fn(ki)) & mask
    return left, right


def cycle_walking_cipher(minval: int, maxval: int, value: int, key: int, direction,
                         hash_fn=hash_uint32, walk_max: int = WALK_MAX) -> int:
    """
    Encrypt or decrypt value inside [minval, maxval].

    The Feistel network permutes blocks of 2*hsz bits, which is generally
    more than the size of the interval. Results falling past the end of the
    interval are fed back into the network (cycle walking) until one lands
    inside it.

    Callers must make sure that minval <= value <= maxval.

    Args:
        minval: Lower bound of the interval (inclusive)
        maxval: Upper bound of the interval (inclusive)
        value: Value to permute
        key: 64-bit key, signed or unsigned
        direction: Direction.ENCRYPT or Direction.DECRYPT
        hash_fn: 32-bit hash used by the key scrambling and the round function
        walk_max: Maximum number of walks before giving up

    Returns:
        The permuted value, in [minval, maxval]

    Raises:
        InfiniteCycleError: if no result fell inside the interval after walk_max walks
    """
    # Number of possible values for the output
    interval = maxval - minval + 1

    hsz = half_block_size(interval)
    mask = (1 << hsz) - 1

    crypt_key = scramble_key(key, hash_fn)

    # Work with the offset into the interval rather than the actual value
    offset = value - minval
    left = offset >> hsz
    right = offset & mask

    walk_count = 0
    while True:
        left, right = feistel_rounds(left, right, crypt_key, hsz, direction, hash_fn)
        result = (right << hsz) | left
        # swap one more time to prepare for the next cycle
        left, right = right, left
        if result <= interval - 1:
            break
        if walk_count >= walk_max:
            raise InfiniteCycleError(value, walk_max)
        walk_count += 1

    # Offset in the interval back to an absolute value, possibly negative
    return minval + result


def encrypt(value: int, minval: int, maxval: int, key: int) -> int:
    """Permute value within [minval, maxval]"""
    return cycle_walking_cipher(minval, maxval, value, key, Direction.ENCRYPT)


def decrypt(value: int, minval: int, maxval: int, key: int) -> int:
    """Inverse of encrypt() for the same bounds and key"""
    return cycle_walking_cipher(minval, maxval, value, key, Direction.DECRYPT)
