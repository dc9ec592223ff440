"""
Module 02 - Hashing Utilities
Leaf hashing and hex helpers for Merkle commitments.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- keccak256 / SHA-256 hashing for raw bytes
- A pluggable LeafHasher bound to one named algorithm
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Always hash raw bytes exactly as read; no newline or encoding normalization
- keccak256 is the default because the registry contract verifies proofs
  with Solidity's keccak256. A different primitive on either side silently
  invalidates every proof.
"""
from __future__ import annotations

import hashlib
from typing import Callable

from eth_utils import keccak


HashFunction = Callable[[bytes], bytes]

# All supported primitives produce 32-byte digests
DIGEST_SIZE = 32

DEFAULT_HASH_ALGORITHM = "keccak256"


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def keccak256(data: bytes) -> bytes:
    """
    Compute Ethereum-flavoured keccak256 of raw bytes.

    This is the pre-standard Keccak padding used by Solidity's keccak256,
    not FIPS-202 SHA3-256 (hashlib.sha3_256 gives different output).

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(data)


HASH_ALGORITHMS: dict[str, HashFunction] = {
    "keccak256": keccak256,
    "sha256": sha256,
}


def get_hash_function(algorithm: str) -> HashFunction:
    """
    Look up a hash primitive by name.

    Raises:
        ValueError: If algorithm is not supported
    """
    try:
        return HASH_ALGORITHMS[algorithm]
    except KeyError:
        raise ValueError(
            f"Unknown hash algorithm: {algorithm!r} "
            f"(supported: {sorted(HASH_ALGORITHMS)})"
        ) from None


class LeafHasher:
    """
    Maps raw content bytes to a fixed-width leaf digest.

    The hasher sees only the content bytes. Paths, sizes and timestamps
    never enter the digest, so the same bytes always hash the same.

    Example:
        >>> hasher = LeafHasher("sha256")
        >>> hasher(b"hello") == sha256(b"hello")
        True
    """

    def __init__(self, algorithm: str = DEFAULT_HASH_ALGORITHM) -> None:
        self._algorithm = algorithm
        self._hash_fn = get_hash_function(algorithm)

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def hash_fn(self) -> HashFunction:
        return self._hash_fn

    def hash(self, data: bytes) -> bytes:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(
                f"Leaf content must be bytes, got {type(data).__name__}"
            )
        return self._hash_fn(bytes(data))

    def __call__(self, data: bytes) -> bytes:
        return self.hash(data)

    def __repr__(self) -> str:
        return f"LeafHasher(algorithm={self._algorithm!r})"


def hash_bytes(data: bytes, algorithm: str = DEFAULT_HASH_ALGORITHM) -> bytes:
    """Hash raw bytes with the named algorithm."""
    return get_hash_function(algorithm)(data)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters

    Example:
        >>> from_hex("0xdeadbeef").hex()
        'deadbeef'
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def hash_pair_sorted(a: bytes, b: bytes, hash_fn: HashFunction = keccak256) -> bytes:
    """
    Hash two digests in canonical order.

    The pair is sorted by unsigned byte value ascending before
    concatenation: parent = H(min(a, b) + max(a, b)). Python's bytes
    comparison is lexicographic over unsigned octets, which is the same
    ordering as Buffer.compare and Solidity's `a <= b` on bytes32.
    """
    if a <= b:
        return hash_fn(a + b)
    return hash_fn(b + a)


__all__ = [
    "DIGEST_SIZE",
    "DEFAULT_HASH_ALGORITHM",
    "HASH_ALGORITHMS",
    "HashFunction",
    "LeafHasher",
    "sha256",
    "keccak256",
    "get_hash_function",
    "hash_bytes",
    "to_hex",
    "from_hex",
    "hash_pair_sorted",
]
