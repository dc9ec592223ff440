"""
Module 02 - Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, and verification.

Owner: Protocol/Crypto Engineer
Module ID: M02

Canonical Commitment Rules (Hard Contracts):
1. Leaves are pre-hashed digests; this module never hashes raw content.
2. Parent hashing is sorted: parent = H(min(a, b) + max(a, b)), where
   min/max compare digests as unsigned byte strings.
3. Promotion: when a layer has an odd count, the trailing node is carried
   into the next layer unchanged. It is never hashed with itself.
4. Empty leaves: root is EMPTY_TREE_ROOT (32 zero bytes), no hashing.
5. Single leaf: root = leaf, no hashing.

These rules are shared with the registry contract that verifies proofs
on-chain. Changing any of them (padding by duplication, unsorted pairs,
a different primitive) breaks every root already published.

Sorted pairs mean proofs carry no left/right flags. A consequence worth
knowing: the leaf position, not the digest value, is what distinguishes
leaves. Two orderings of the same digests can share a root while handing
out different proofs for the same index. That is a property of the
scheme, not a defect.

Example (toy additive hash, leaves [A, B, C]):
    layer 0: [A, B, C]
    layer 1: [H(A,B), C]        C promoted unchanged
    layer 2: [H(H(A,B), C)]     root
    proof(A) = [B, C]   proof(B) = [A, C]   proof(C) = [H(A,B)]
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from core.crypto.hashing import HashFunction, hash_pair_sorted, keccak256, to_hex
from core.schemas.errors import ProofIndexOutOfRangeException


# Empty tree sentinel: all-zero 32-byte digest
EMPTY_TREE_ROOT: bytes = bytes(32)


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle inclusion proof for a single leaf.

    Attributes:
        leaf: The leaf digest being proven
        index: The 0-based index of the leaf in the original leaf list
        siblings: Sibling digests from bottom to top. Layers where the
            leaf's node was promoted contribute nothing, so the list can
            be shorter than the tree depth.
        root: The Merkle root this proof is against
    """
    leaf: bytes
    index: int
    siblings: list[bytes]
    root: bytes

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")

    def verify(self, hash_fn: HashFunction = keccak256) -> bool:
        return verify_merkle_proof(self.leaf, self.siblings, self.root, hash_fn)

    def siblings_hex(self) -> list[str]:
        return [to_hex(s) for s in self.siblings]


def merkle_parent(a: bytes, b: bytes, hash_fn: HashFunction = keccak256) -> bytes:
    """
    Compute the parent digest of two sibling nodes.

    Argument order does not matter: merkle_parent(a, b) == merkle_parent(b, a).
    """
    return hash_pair_sorted(a, b, hash_fn)


def _next_layer(layer: Sequence[bytes], hash_fn: HashFunction) -> list[bytes]:
    next_layer: list[bytes] = []
    for i in range(0, len(layer), 2):
        if i + 1 < len(layer):
            next_layer.append(merkle_parent(layer[i], layer[i + 1], hash_fn))
        else:
            # Odd trailing node is promoted as-is
            next_layer.append(layer[i])
    return next_layer


def build_merkle_layers(
    leaves: Sequence[bytes],
    hash_fn: HashFunction = keccak256,
) -> list[list[bytes]]:
    """
    Fold leaf digests into layers up to a single root.

    Returns:
        List of layers, layers[0] is a copy of the leaves and layers[-1]
        holds exactly one digest (the root). Empty input yields [].
    """
    if len(leaves) == 0:
        return []

    layers: list[list[bytes]] = [list(leaves)]
    while len(layers[-1]) > 1:
        layers.append(_next_layer(layers[-1], hash_fn))
    return layers


def build_merkle_root(
    leaves: Sequence[bytes],
    hash_fn: HashFunction = keccak256,
) -> bytes:
    """
    Build a Merkle root from a sequence of leaf digests.

    Order matters and is preserved; this function never sorts leaves.

    Example:
        >>> build_merkle_root([]) == EMPTY_TREE_ROOT
        True
    """
    if len(leaves) == 0:
        return EMPTY_TREE_ROOT
    if len(leaves) == 1:
        return leaves[0]

    current_layer: list[bytes] = list(leaves)
    while len(current_layer) > 1:
        current_layer = _next_layer(current_layer, hash_fn)
    return current_layer[0]


def proof_from_layers(layers: Sequence[Sequence[bytes]], index: int) -> list[bytes]:
    """
    Collect the sibling digests for leaf `index` from prebuilt layers.

    At each layer below the root the sibling sits at index ^ 1. If that
    position does not exist the node was promoted and the layer adds
    nothing to the proof.

    Raises:
        ProofIndexOutOfRangeException: If index is not a valid leaf index
    """
    leaf_count = len(layers[0]) if layers else 0
    if index < 0 or index >= leaf_count:
        raise ProofIndexOutOfRangeException(index, leaf_count)

    siblings: list[bytes] = []
    current_index = index
    for layer in layers[:-1]:
        sibling_index = current_index ^ 1
        if sibling_index < len(layer):
            siblings.append(layer[sibling_index])
        current_index //= 2
    return siblings


def build_merkle_proof(
    leaves: Sequence[bytes],
    index: int,
    hash_fn: HashFunction = keccak256,
) -> MerkleProof:
    """
    Generate a Merkle proof for the leaf at the given index.

    Raises:
        ProofIndexOutOfRangeException: If index is out of range (this is
            also an IndexError). Empty leaf lists have no valid index.
    """
    layers = build_merkle_layers(leaves, hash_fn)
    siblings = proof_from_layers(layers, index)
    return MerkleProof(
        leaf=leaves[index],
        index=index,
        siblings=siblings,
        root=layers[-1][0],
    )


def verify_merkle_proof(
    leaf: bytes,
    siblings: Sequence[bytes],
    root: bytes,
    hash_fn: HashFunction = keccak256,
) -> bool:
    """
    Check that `leaf` is included under `root`.

    Recomputes the root from the leaf by folding siblings in order with
    the same sorted-pair rule used to build the tree. No tree is needed,
    which is exactly what the on-chain verifier does.

    Returns:
        True iff the recomputed digest equals `root` byte-for-byte.
        A mismatch is a normal False, not an exception.

    Raises:
        TypeError: If any digest is not bytes. Malformed input is a fault
            of the caller, distinct from an invalid proof.
    """
    for name, value in (("leaf", leaf), ("root", root)):
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError(f"{name} must be bytes, got {type(value).__name__}")

    computed = bytes(leaf)
    for position, sibling in enumerate(siblings):
        if not isinstance(sibling, (bytes, bytearray)):
            raise TypeError(
                f"sibling {position} must be bytes, got {type(sibling).__name__}"
            )
        computed = merkle_parent(computed, bytes(sibling), hash_fn)

    return computed == bytes(root)


def compute_tree_depth(num_leaves: int) -> int:
    """
    Number of layers (leaf layer and root layer inclusive).

    Promotion means an odd layer of n nodes yields (n + 1) // 2 parents,
    the same count as padding would give; only the hashing differs.
    """
    if num_leaves == 0:
        return 0

    depth = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1
    return depth


@dataclass
class MerkleTree:
    """
    A built tree: all layers kept so proofs are cheap to derive.

    Owned by the build that created it and not mutated afterwards.

    Example:
        >>> tree = MerkleTree.from_leaves([leaf_a, leaf_b, leaf_c])
        >>> tree.verify(leaf_a, tree.get_proof(0))
        True
    """
    layers: list[list[bytes]]
    hash_fn: HashFunction = field(default=keccak256, repr=False)

    @classmethod
    def from_leaves(
        cls,
        leaves: Sequence[bytes],
        hash_fn: HashFunction = keccak256,
    ) -> "MerkleTree":
        return cls(layers=build_merkle_layers(leaves, hash_fn), hash_fn=hash_fn)

    @property
    def leaves(self) -> list[bytes]:
        return list(self.layers[0]) if self.layers else []

    @property
    def leaf_count(self) -> int:
        return len(self.layers[0]) if self.layers else 0

    @property
    def depth(self) -> int:
        return len(self.layers)

    @property
    def root(self) -> bytes:
        if not self.layers:
            return EMPTY_TREE_ROOT
        return self.layers[-1][0]

    @property
    def root_hex(self) -> str:
        return to_hex(self.root)

    def get_proof(self, index: int) -> list[bytes]:
        """Sibling list for leaf `index`, bottom layer first."""
        return proof_from_layers(self.layers, index)

    def get_merkle_proof(self, index: int) -> MerkleProof:
        siblings = self.get_proof(index)
        return MerkleProof(
            leaf=self.layers[0][index],
            index=index,
            siblings=siblings,
            root=self.root,
        )

    def all_proofs(self) -> list[list[bytes]]:
        return [self.get_proof(i) for i in range(self.leaf_count)]

    def verify(self, leaf: bytes, siblings: Sequence[bytes]) -> bool:
        return verify_merkle_proof(leaf, siblings, self.root, self.hash_fn)


__all__ = [
    "EMPTY_TREE_ROOT",
    "MerkleProof",
    "MerkleTree",
    "merkle_parent",
    "build_merkle_layers",
    "build_merkle_root",
    "proof_from_layers",
    "build_merkle_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
]
