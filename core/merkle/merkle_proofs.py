"""
Module 02 - Merkle Proofs Convenience Wrappers
Class-based interfaces bound to one hash algorithm.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- MerkleProver: roots and proofs from pre-hashed leaves or raw contents
- MerkleVerifier: inclusion checks from raw components

Both wrap the functions in merkle_tree.py and take the hash algorithm by
name, so a checkpoint's recorded `hash_algorithm` can be replayed.
"""
from __future__ import annotations

from typing import Sequence

from core.crypto.hashing import DEFAULT_HASH_ALGORITHM, LeafHasher, from_hex
from core.merkle.merkle_tree import (
    MerkleProof,
    build_merkle_proof,
    build_merkle_root,
    verify_merkle_proof,
)


class MerkleProver:
    """
    Generates roots and proofs with a fixed hash algorithm.

    Example:
        >>> prover = MerkleProver("sha256")
        >>> proof = prover.prove_contents([b"a", b"b", b"c"], index=1)
        >>> MerkleVerifier("sha256").verify(proof)
        True
    """

    def __init__(self, algorithm: str = DEFAULT_HASH_ALGORITHM) -> None:
        self.hasher = LeafHasher(algorithm)

    def prove(self, leaves: Sequence[bytes], index: int) -> MerkleProof:
        """
        Generate a proof for the pre-hashed leaf at `index`.

        Raises:
            ProofIndexOutOfRangeException: If index is out of range
        """
        return build_merkle_proof(leaves, index, self.hasher.hash_fn)

    def prove_contents(self, contents: Sequence[bytes], index: int) -> MerkleProof:
        """Hash raw contents to leaves, then prove the one at `index`."""
        leaves = [self.hasher(c) for c in contents]
        return self.prove(leaves, index)

    def compute_root(self, leaves: Sequence[bytes]) -> bytes:
        return build_merkle_root(leaves, self.hasher.hash_fn)

    def compute_root_from_contents(self, contents: Sequence[bytes]) -> bytes:
        return self.compute_root([self.hasher(c) for c in contents])


class MerkleVerifier:
    """
    Verifies inclusion proofs without access to the tree.

    Mirrors the registry contract's verifier: same primitive, same sorted
    pair rule, siblings consumed in order.
    """

    def __init__(self, algorithm: str = DEFAULT_HASH_ALGORITHM) -> None:
        self.hasher = LeafHasher(algorithm)

    def verify(self, proof: MerkleProof) -> bool:
        return verify_merkle_proof(
            proof.leaf, proof.siblings, proof.root, self.hasher.hash_fn,
        )

    def verify_leaf_in_root(
        self,
        leaf: bytes,
        siblings: Sequence[bytes],
        root: bytes,
    ) -> bool:
        return verify_merkle_proof(leaf, siblings, root, self.hasher.hash_fn)

    def verify_content_in_root(
        self,
        content: bytes,
        siblings: Sequence[bytes],
        root: bytes,
    ) -> bool:
        """Hash `content` as a leaf, then verify it against `root`."""
        return self.verify_leaf_in_root(self.hasher(content), siblings, root)

    def verify_hex(self, leaf: str, siblings: Sequence[str], root: str) -> bool:
        """
        Verify 0x-hex encoded inputs, the form proofs take on disk.

        Raises:
            ValueError: If any value is not valid 0x-prefixed hex
        """
        return self.verify_leaf_in_root(
            from_hex(leaf), [from_hex(s) for s in siblings], from_hex(root),
        )


__all__ = [
    "MerkleProver",
    "MerkleVerifier",
]
