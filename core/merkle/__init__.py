"""
Module 02 - Merkle Tree and Commitments
Sorted-pair Merkle tree with odd-node promotion.

Owner: Protocol/Crypto Engineer
Module ID: M02

Canonical Commitment Rules:
1. Leaf hashing: keccak256(content) by default (see core.crypto.hashing)
2. Parent hashing: H(min(a, b) + max(a, b))
3. Odd layers: trailing node promoted unchanged
4. Empty tree: 32 zero bytes
5. Single leaf: root = leaf

Usage:
    from core.merkle import MerkleTree, verify_merkle_proof
    from core.crypto import LeafHasher

    hasher = LeafHasher()
    tree = MerkleTree.from_leaves([hasher(c) for c in contents])
    siblings = tree.get_proof(2)
    assert verify_merkle_proof(hasher(contents[2]), siblings, tree.root)
"""
from .merkle_tree import (
    EMPTY_TREE_ROOT,
    MerkleProof,
    MerkleTree,
    merkle_parent,
    build_merkle_layers,
    build_merkle_root,
    proof_from_layers,
    build_merkle_proof,
    verify_merkle_proof,
    compute_tree_depth,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Core types
    "MerkleProof",
    "MerkleTree",
    "EMPTY_TREE_ROOT",
    # Core functions
    "merkle_parent",
    "build_merkle_layers",
    "build_merkle_root",
    "proof_from_layers",
    "build_merkle_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
