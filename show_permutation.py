#!/usr/bin/env python3
"""
Debug script: print the permutation of a small range and check that it is a bijection.
"""
import argparse
import sys

from permute_api import DEFAULT_SECRET_KEY, range_encrypt_element, range_decrypt_element


def show_permutation(minval, maxval, sk, decrypt=False):
    """Print value -> permuted for every value in [minval, maxval]. Returns True if the mapping checks out."""
    forward = range_decrypt_element if decrypt else range_encrypt_element
    backward = range_encrypt_element if decrypt else range_decrypt_element

    print("=" * 60)
    print(f"{'DECRYPTION' if decrypt else 'ENCRYPTION'} MAPPING [{minval},{maxval}]")
    print("=" * 60)

    mapping = {}
    for value in range(minval, maxval + 1):
        mapping[value] = forward(value, minval, maxval, sk)
        print(f"  {value} -> {mapping[value]}")

    print("\n" + "=" * 60)
    print("VERIFICATION")
    print("=" * 60)
    targets = list(mapping.values())
    duplicates = sorted(t for t in set(targets) if targets.count(t) > 1)
    print(f"Duplicates: {duplicates if duplicates else 'None ✅'}")

    outside = [t for t in targets if t < minval or t > maxval]
    print(f"Outside of range: {outside if outside else 'None ✅'}")

    mismatches = [v for v, t in mapping.items() if backward(t, minval, maxval, sk) != v]
    print(f"Round-trip failures: {mismatches if mismatches else 'None ✅'}")

    return not (duplicates or outside or mismatches)


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Show the pseudo-random permutation of a small range')
    parser.add_argument('--min', type=int, default=0, dest='minval',
                        help='Lower bound of the range (default: 0)')
    parser.add_argument('--max', type=int, default=15, dest='maxval',
                        help='Upper bound of the range (default: 15)')
    parser.add_argument('--secret-key', type=int, default=DEFAULT_SECRET_KEY,
                        help='Secret key (default: DEFAULT_SECRET_KEY)')
    parser.add_argument('--decrypt', action='store_true',
                        help='Show the decryption mapping instead')
    parser.add_argument('--limit', type=int, default=1000,
                        help='Refuse ranges with more values than this (default: 1000)')

    args = parser.parse_args()

    if args.maxval - args.minval + 1 > args.limit:
        print(f"ERROR: range holds more than {args.limit} values, use --limit to raise it")
        sys.exit(1)

    print(f"Using secret_key: {args.secret_key}\n")
    ok = show_permutation(args.minval, args.maxval, args.secret_key, args.decrypt)
    sys.exit(0 if ok else 1)
