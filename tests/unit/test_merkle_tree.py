"""
Module 02 - Merkle Tree Unit Tests
Tests for core/merkle/merkle_tree.py and core/merkle/merkle_proofs.py

Covers:
1. Hand-checkable trees built with a one-byte additive hash
2. Odd-node promotion, the empty sentinel and single-leaf trees
3. Proof soundness for every index of trees with 1..17 leaves
4. Tamper detection (leaf, sibling, root)
5. Out-of-range indices
6. Fixed SHA-256 and keccak256 vectors shared with other implementations
"""
import random

import pytest

from core.crypto.hashing import keccak256, sha256
from core.merkle.merkle_tree import (
    EMPTY_TREE_ROOT,
    MerkleProof,
    MerkleTree,
    build_merkle_layers,
    build_merkle_proof,
    build_merkle_root,
    compute_tree_depth,
    merkle_parent,
    proof_from_layers,
    verify_merkle_proof,
)
from core.merkle.merkle_proofs import MerkleProver, MerkleVerifier
from core.schemas.errors import ProofIndexOutOfRangeException

from fixtures import toy_hash


A = b"\x01"
B = b"\x02"
C = b"\x04"


def _h(hex_string: str) -> bytes:
    return bytes.fromhex(hex_string)


def _leaves(n: int) -> list[bytes]:
    return [sha256(f"leaf-{i}".encode()) for i in range(n)]


# SHA-256 vectors: leaves are sha256 of single ASCII letters
LEAF_A = _h("ca978112ca1bbdcafac231b39a23dc4da786eff8147c4e72b9807785afee48bb")
LEAF_B = _h("3e23e8160039594a33894f6564e1b1348bbd7a0088d42c4acb73eeaed59c009d")
LEAF_C = _h("2e7d2c03a9507ae265ecf5b5356885a53393a2029d241394997265a1a25aefc6")
LEAF_D = _h("18ac3e7343f016890c510e93f935261169d9e3f565436429830faf0934f4f8e4")
LEAF_E = _h("3f79bb7b435b05321651daefd374cdc681dc06faa65e374e38337b88ca046dea")
ROOT_AB = _h("18d79cb747ea174c59f3a3b41768672526d56fecc58360a99d283d0f9b0a3cc0")
ROOT_ABC = _h("aea2dd4249dcecf97ca6a1556db7f21ebd6a40bbec0243ca61b717146a08c347")
ROOT_ABCDE = _h("930747c3ad2cac9fdc0cc025207d282e4f5f055169d11aaa320ddb0d133e2ef8")
NODE_CD = _h("800e03ddb2432933692401d1631850c0af91953fd9c8f3874488c0541dfcf413")
NODE_ABCD = _h("4c6aae040ffada3d02598207b8485fcbe161c03f4cb3f660e4d341e7496ff3b2")

# keccak256 vectors over the same letters, as an EVM verifier computes them
K_LEAF_A = _h("3ac225168df54212a25c1c01fd35bebfea408fdac2e31ddd6f80a4bbf9a5f1cb")
K_LEAF_B = _h("b5553de315e0edf504d9150af82dafa5c4667fa618ed0a6f19c69b41166c5510")
K_LEAF_C = _h("0b42b6393c1f53060fe3ddbfcd7aadcca894465a5a438f69c87d790b2299b9b2")
K_LEAF_D = _h("f1918e8562236eb17adc8502332f4c9c82bc14e19bfc0aa10ab674ff75b3d2f3")
K_LEAF_E = _h("a8982c89d80987fb9a510e25981ee9170206be21af3c8e0eb312ef1d3382e761")
K_ROOT_AB = _h("805b21d846b189efaeb0377d6bb0d201b3872a363e607c25088f025b0c6ae1f8")
K_ROOT_ABC = _h("5842148bc6ebeb52af882a317c765fccd3ae80589b21a9b8cbf21abb630e46a7")
K_ROOT_ABCDE = _h("1dd0d2a6ae466d665cb26e1a31f07c57ae5df7d2bc559cd5826d417be9141a5d")
K_NODE_CD = _h("d253a52d4cb00de2895e85f2529e2976e6aaaa5c18106b68ab66813e14415669")
K_NODE_ABCD = _h("68203f90e9d07dc5859259d7536e87a6ba9d345f2552b5b9de2999ddce9ce1bf")


class TestToyTree:
    """Three leaves under an additive hash: every node can be checked by hand."""

    def test_layers(self):
        layers = build_merkle_layers([A, B, C], toy_hash)

        assert layers == [[A, B, C], [b"\x03", C], [b"\x07"]]

    def test_root(self):
        assert build_merkle_root([A, B, C], toy_hash) == b"\x07"

    def test_proofs(self):
        tree = MerkleTree.from_leaves([A, B, C], toy_hash)

        assert tree.get_proof(0) == [B, C]
        assert tree.get_proof(1) == [A, C]
        assert tree.get_proof(2) == [b"\x03"]

    def test_proofs_verify(self):
        tree = MerkleTree.from_leaves([A, B, C], toy_hash)

        for i, leaf in enumerate([A, B, C]):
            assert verify_merkle_proof(leaf, tree.get_proof(i), b"\x07", toy_hash)


class TestEmptyTree:
    """Tests for empty tree behavior."""

    def test_empty_leaves_returns_zero_sentinel(self):
        assert build_merkle_root([]) == EMPTY_TREE_ROOT
        assert EMPTY_TREE_ROOT == bytes(32)

    def test_empty_sentinel_is_not_a_hash(self):
        """The sentinel is zeros, not the hash of empty input."""
        assert EMPTY_TREE_ROOT != keccak256(b"")
        assert EMPTY_TREE_ROOT != sha256(b"")

    def test_empty_tree_object(self):
        tree = MerkleTree.from_leaves([])

        assert tree.root == EMPTY_TREE_ROOT
        assert tree.leaf_count == 0
        assert tree.depth == 0
        assert tree.all_proofs() == []

    def test_build_proof_empty_raises(self):
        """No index is valid for an empty tree."""
        with pytest.raises(ProofIndexOutOfRangeException):
            build_merkle_proof([], 0)


class TestSingleLeaf:
    """Tests for single leaf tree behavior."""

    def test_single_leaf_root_equals_leaf(self):
        leaf = keccak256(b"single leaf")

        assert build_merkle_root([leaf]) == leaf

    def test_single_leaf_proof_no_siblings(self):
        leaf = keccak256(b"single leaf")
        proof = build_merkle_proof([leaf], 0)

        assert proof.siblings == []
        assert proof.root == leaf
        assert proof.verify()


class TestPromotion:
    """Odd trailing nodes are carried up unchanged."""

    def test_odd_node_not_hashed_with_itself(self):
        leaves = [LEAF_A, LEAF_B, LEAF_C]
        layers = build_merkle_layers(leaves, sha256)

        assert layers[1][1] == LEAF_C
        assert build_merkle_root(leaves, sha256) != build_merkle_root(
            [LEAF_A, LEAF_B, LEAF_C, LEAF_C], sha256
        )

    def test_promoted_leaf_has_short_proof(self):
        """With five leaves the last one is promoted twice."""
        tree = MerkleTree.from_leaves(_leaves(5), sha256)

        assert tree.depth == 4
        assert len(tree.get_proof(4)) == 1
        assert len(tree.get_proof(0)) == 3

    @pytest.mark.parametrize("n,depth", [(0, 0), (1, 1), (2, 2), (3, 3), (4, 3), (5, 4), (8, 4), (9, 5)])
    def test_compute_tree_depth(self, n, depth):
        assert compute_tree_depth(n) == depth
        assert MerkleTree.from_leaves(_leaves(n), sha256).depth == depth


class TestSortedPairs:
    """Parent hashing sorts the pair first."""

    def test_parent_is_order_independent(self):
        a, b = keccak256(b"a"), keccak256(b"b")

        assert merkle_parent(a, b) == merkle_parent(b, a)

    def test_parent_hashes_smaller_first(self):
        low, high = bytes(31) + b"\x01", bytes(31) + b"\x02"

        assert merkle_parent(high, low, sha256) == sha256(low + high)

    def test_swapped_leaves_share_root_but_not_proofs(self):
        """Position, not value, tells two leaves apart."""
        forward = MerkleTree.from_leaves([LEAF_A, LEAF_B], sha256)
        backward = MerkleTree.from_leaves([LEAF_B, LEAF_A], sha256)

        assert forward.root == backward.root
        assert forward.get_proof(0) == [LEAF_B]
        assert backward.get_proof(0) == [LEAF_A]
        assert forward.verify(LEAF_A, forward.get_proof(0))
        assert backward.verify(LEAF_B, backward.get_proof(0))


class TestSoundness:
    """Every index of every small tree verifies against its root."""

    @pytest.mark.parametrize("n", range(1, 18))
    def test_every_proof_verifies(self, n):
        leaves = _leaves(n)
        tree = MerkleTree.from_leaves(leaves, sha256)

        for i, leaf in enumerate(leaves):
            proof = tree.get_proof(i)
            assert verify_merkle_proof(leaf, proof, tree.root, sha256), f"n={n} i={i}"
            assert len(proof) <= tree.depth - 1

    @pytest.mark.parametrize("n", [2, 3, 7, 16, 17])
    def test_proof_from_layers_matches_build_merkle_proof(self, n):
        leaves = _leaves(n)
        layers = build_merkle_layers(leaves, sha256)

        for i in range(n):
            proof = build_merkle_proof(leaves, i, sha256)
            assert proof.siblings == proof_from_layers(layers, i)
            assert proof.root == layers[-1][0]
            assert proof.leaf == leaves[i]

    def test_root_determinism(self):
        leaves = _leaves(9)

        assert build_merkle_root(leaves) == build_merkle_root(list(leaves))
        assert MerkleTree.from_leaves(leaves).root == build_merkle_root(leaves)

    def test_leaf_order_matters(self):
        leaves = _leaves(4)
        reordered = [leaves[0], leaves[2], leaves[1], leaves[3]]

        assert build_merkle_root(leaves) != build_merkle_root(reordered)


class TestTamperDetection:
    """Any flipped bit makes verification return False."""

    @staticmethod
    def _flip(data: bytes, bit: int = 0) -> bytes:
        buf = bytearray(data)
        buf[bit // 8] ^= 1 << (bit % 8)
        return bytes(buf)

    @pytest.fixture
    def proof(self) -> MerkleProof:
        return build_merkle_proof(_leaves(6), 2, sha256)

    def test_untampered_passes(self, proof):
        assert proof.verify(sha256)

    @pytest.mark.parametrize("bit", [0, 7, 128, 255])
    def test_tampered_leaf_fails(self, proof, bit):
        assert not verify_merkle_proof(self._flip(proof.leaf, bit), proof.siblings, proof.root, sha256)

    @pytest.mark.parametrize("bit", [0, 77, 255])
    def test_tampered_sibling_fails(self, proof, bit):
        for position in range(len(proof.siblings)):
            siblings = list(proof.siblings)
            siblings[position] = self._flip(siblings[position], bit)
            assert not verify_merkle_proof(proof.leaf, siblings, proof.root, sha256)

    def test_tampered_root_fails(self, proof):
        assert not verify_merkle_proof(proof.leaf, proof.siblings, self._flip(proof.root), sha256)

    def test_missing_sibling_fails(self, proof):
        assert not verify_merkle_proof(proof.leaf, proof.siblings[:-1], proof.root, sha256)

    def test_wrong_hash_function_fails(self, proof):
        assert not verify_merkle_proof(proof.leaf, proof.siblings, proof.root, keccak256)

    def test_content_bit_flip_changes_root(self):
        rng = random.Random(1234)
        contents = [rng.randbytes(rng.randint(1, 64)) for _ in range(7)]
        root = MerkleProver().compute_root_from_contents(contents)

        for _ in range(50):
            i = rng.randrange(len(contents))
            mutated = list(contents)
            mutated[i] = self._flip(mutated[i], rng.randrange(len(mutated[i]) * 8))
            assert MerkleProver().compute_root_from_contents(mutated) != root


class TestInvalidInput:
    """Faults raise; invalid proofs do not."""

    @pytest.mark.parametrize("index", [3, 100])
    def test_index_out_of_range(self, index):
        with pytest.raises(ProofIndexOutOfRangeException) as exc_info:
            build_merkle_proof(_leaves(3), index)

        assert exc_info.value.index == index
        assert exc_info.value.leaf_count == 3
        assert exc_info.value.code == "PROOF_INDEX_OUT_OF_RANGE"

    def test_negative_index(self):
        tree = MerkleTree.from_leaves(_leaves(3))

        with pytest.raises(ProofIndexOutOfRangeException):
            tree.get_proof(-1)

    def test_out_of_range_is_index_error(self):
        with pytest.raises(IndexError):
            MerkleTree.from_leaves(_leaves(2)).get_proof(2)

    def test_merkle_proof_rejects_negative_index(self):
        with pytest.raises(ValueError, match="non-negative"):
            MerkleProof(leaf=LEAF_A, index=-1, siblings=[], root=LEAF_A)

    def test_non_bytes_leaf_raises_type_error(self):
        with pytest.raises(TypeError, match="leaf"):
            verify_merkle_proof(LEAF_A.hex(), [], LEAF_A)

    def test_non_bytes_sibling_raises_type_error(self):
        with pytest.raises(TypeError, match="sibling 0"):
            verify_merkle_proof(LEAF_A, [LEAF_B.hex()], ROOT_AB)


class TestFixedVectors:
    """SHA-256 trees computed independently of this package."""

    def test_two_leaves(self):
        assert build_merkle_root([LEAF_A, LEAF_B], sha256) == ROOT_AB

    def test_three_leaves(self):
        tree = MerkleTree.from_leaves([LEAF_A, LEAF_B, LEAF_C], sha256)

        assert tree.root == ROOT_ABC
        assert tree.get_proof(0) == [LEAF_B, LEAF_C]
        assert tree.get_proof(2) == [ROOT_AB]

    def test_five_leaves(self):
        tree = MerkleTree.from_leaves([LEAF_A, LEAF_B, LEAF_C, LEAF_D, LEAF_E], sha256)

        assert tree.root == ROOT_ABCDE
        assert tree.get_proof(0) == [LEAF_B, NODE_CD, LEAF_E]
        assert tree.get_proof(2) == [LEAF_D, ROOT_AB, LEAF_E]
        assert tree.get_proof(4) == [NODE_ABCD]

    def test_leaf_vectors_are_sha256_of_letters(self):
        assert [sha256(c.encode()) for c in "abcde"] == [LEAF_A, LEAF_B, LEAF_C, LEAF_D, LEAF_E]


class TestKeccakVectors:
    """keccak256 trees, the primitive the registry contract verifies with."""

    def test_leaf_vectors_are_keccak_of_letters(self):
        assert [keccak256(c.encode()) for c in "abcde"] == [K_LEAF_A, K_LEAF_B, K_LEAF_C, K_LEAF_D, K_LEAF_E]

    def test_three_leaves(self):
        tree = MerkleTree.from_leaves([K_LEAF_A, K_LEAF_B, K_LEAF_C], keccak256)

        assert tree.root == K_ROOT_ABC
        assert tree.get_proof(0) == [K_LEAF_B, K_LEAF_C]
        assert tree.get_proof(1) == [K_LEAF_A, K_LEAF_C]
        assert tree.get_proof(2) == [K_ROOT_AB]

    def test_five_leaves(self):
        tree = MerkleTree.from_leaves([K_LEAF_A, K_LEAF_B, K_LEAF_C, K_LEAF_D, K_LEAF_E], keccak256)

        assert tree.root == K_ROOT_ABCDE
        assert tree.get_proof(0) == [K_LEAF_B, K_NODE_CD, K_LEAF_E]
        assert tree.get_proof(2) == [K_LEAF_D, K_ROOT_AB, K_LEAF_E]
        assert tree.get_proof(4) == [K_NODE_ABCD]

    def test_proofs_verify(self):
        assert verify_merkle_proof(K_LEAF_C, [K_LEAF_D, K_ROOT_AB, K_LEAF_E], K_ROOT_ABCDE, keccak256)
        assert verify_merkle_proof(K_LEAF_E, [K_NODE_ABCD], K_ROOT_ABCDE, keccak256)
        assert not verify_merkle_proof(K_LEAF_E, [K_NODE_ABCD], K_ROOT_ABCDE, sha256)

    def test_prover_default_matches(self):
        assert MerkleProver().compute_root_from_contents([b"a", b"b", b"c", b"d", b"e"]) == K_ROOT_ABCDE


class TestMerkleProverVerifier:
    """Tests for the algorithm-bound wrapper classes."""

    def test_prove_contents_and_verify(self):
        prover = MerkleProver("sha256")
        proof = prover.prove_contents([b"a", b"b", b"c"], index=2)

        assert proof.leaf == LEAF_C
        assert proof.root == ROOT_ABC
        assert MerkleVerifier("sha256").verify(proof)

    def test_compute_root_from_contents(self):
        assert MerkleProver("sha256").compute_root_from_contents(
            [b"a", b"b", b"c", b"d", b"e"]
        ) == ROOT_ABCDE

    def test_verify_content_in_root(self):
        verifier = MerkleVerifier("sha256")

        assert verifier.verify_content_in_root(b"a", [LEAF_B, LEAF_C], ROOT_ABC)
        assert not verifier.verify_content_in_root(b"x", [LEAF_B, LEAF_C], ROOT_ABC)

    def test_verify_hex(self):
        verifier = MerkleVerifier("sha256")

        assert verifier.verify_hex(
            "0x" + LEAF_C.hex(), ["0x" + ROOT_AB.hex()], "0x" + ROOT_ABC.hex()
        )
        with pytest.raises(ValueError):
            verifier.verify_hex(LEAF_C.hex(), [], ROOT_ABC.hex())

    def test_default_algorithm_is_keccak(self):
        prover = MerkleProver()
        proof = prover.prove_contents([b"a", b"b"], index=0)

        assert proof.leaf == keccak256(b"a")
        assert MerkleVerifier().verify(proof)
        assert not MerkleVerifier("sha256").verify(proof)

    def test_unknown_algorithm(self):
        with pytest.raises(ValueError, match="Unknown hash algorithm"):
            MerkleProver("md5")
