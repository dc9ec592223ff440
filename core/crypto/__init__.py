"""
Core cryptographic utilities.

Module 02 provides leaf hashing and hex helpers.
"""
from .hashing import (
    DIGEST_SIZE,
    DEFAULT_HASH_ALGORITHM,
    HASH_ALGORITHMS,
    HashFunction,
    LeafHasher,
    sha256,
    keccak256,
    get_hash_function,
    hash_bytes,
    to_hex,
    from_hex,
    hash_pair_sorted,
)

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
