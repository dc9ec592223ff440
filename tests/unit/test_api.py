"""
Module 08 - API Tests
Tests for the FastAPI app using TestClient and a temporary store.
"""
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.deps import get_checkpoint_store
from core.crypto.hashing import keccak256, sha256, to_hex
from orchestrator.store import LocalCheckpointStore

from fixtures import make_record


@pytest.fixture
def store(store_dir: Path) -> LocalCheckpointStore:
    store = LocalCheckpointStore(store_dir)
    store.append(make_record({"a.txt": b"hello", "b.txt": b"world"}, anchor_sequence=0))
    store.append(make_record({"a.txt": b"hello", "b.txt": b"World", "c.txt": b"new"}, anchor_sequence=1))
    return store


@pytest.fixture
def client(store: LocalCheckpointStore) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_checkpoint_store] = lambda: LocalCheckpointStore(store.directory)
    return TestClient(app, raise_server_exceptions=False)


class TestHealth:
    """Tests for health endpoints."""

    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["ok"] is True

    def test_root(self, client: TestClient):
        assert client.get("/").json()["service"] == "memory-anchor-api"


class TestCheckpoints:
    """Tests for /checkpoints routes."""

    def test_list(self, client: TestClient):
        data = client.get("/checkpoints").json()

        assert data["count"] == 2
        assert [c["checkpoint_id"] for c in data["checkpoints"]] == [0, 1]
        assert data["checkpoints"][1]["leaf_count"] == 3
        assert data["checkpoints"][0]["anchor"]["sequence"] == 0

    def test_get(self, client: TestClient, store: LocalCheckpointStore):
        response = client.get("/checkpoints/1")

        assert response.status_code == 200
        assert response.json()["root"] == store.get(1).root
        assert [leaf["path"] for leaf in response.json()["leaves"]] == ["a.txt", "b.txt", "c.txt"]

    def test_get_unknown(self, client: TestClient):
        response = client.get("/checkpoints/9")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CHECKPOINT_NOT_FOUND"

    def test_proof(self, client: TestClient, store: LocalCheckpointStore):
        response = client.get("/checkpoints/1/proof", params={"path": "c.txt"})
        data = response.json()

        assert response.status_code == 200
        assert data["index"] == 2
        assert data["leaf"] == to_hex(keccak256(b"new"))
        assert data["proof"] == list(store.get(1).proofs[2])
        assert data["valid"] is True

    def test_proof_unknown_path(self, client: TestClient):
        response = client.get("/checkpoints/0/proof", params={"path": "c.txt"})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "LEAF_NOT_FOUND"

    def test_proof_requires_path(self, client: TestClient):
        assert client.get("/checkpoints/0/proof").status_code == 422


class TestVerify:
    """Tests for POST /verify."""

    def test_valid_proof(self, client: TestClient, store: LocalCheckpointStore):
        record = store.get(0)
        response = client.post("/verify", json={
            "leaf": record.leaves[0].content_hash,
            "siblings": list(record.proofs[0]),
            "root": record.root,
        })

        assert response.status_code == 200
        assert response.json()["valid"] is True
        assert response.json()["hash_algorithm"] == "keccak256"

    def test_invalid_proof_is_200(self, client: TestClient, store: LocalCheckpointStore):
        record = store.get(0)
        response = client.post("/verify", json={
            "leaf": to_hex(keccak256(b"forged")),
            "siblings": list(record.proofs[0]),
            "root": record.root,
        })

        assert response.status_code == 200
        assert response.json()["valid"] is False

    def test_sha256(self, client: TestClient):
        leaf = sha256(b"a")
        response = client.post("/verify", json={
            "leaf": to_hex(leaf),
            "siblings": [],
            "root": to_hex(leaf),
            "hash_algorithm": "sha256",
        })

        assert response.json()["valid"] is True

    @pytest.mark.parametrize("body", [
        {"leaf": "0x1234", "siblings": [], "root": "0x" + "00" * 32},
        {"leaf": "0x" + "00" * 32, "siblings": ["nothex"], "root": "0x" + "00" * 32},
        {"leaf": "0x" + "00" * 32, "siblings": [], "root": "0x" + "00" * 32, "hash_algorithm": "md5"},
    ])
    def test_malformed_request(self, client: TestClient, body):
        assert client.post("/verify", json=body).status_code == 422


class TestDiff:
    """Tests for GET /diff."""

    def test_diff(self, client: TestClient):
        data = client.get("/diff", params={"a": 0, "b": 1}).json()

        assert data == {
            "a": 0,
            "b": 1,
            "added": ["c.txt"],
            "removed": [],
            "modified": ["b.txt"],
            "unchanged_count": 1,
        }

    def test_diff_unknown(self, client: TestClient):
        assert client.get("/diff", params={"a": 0, "b": 5}).status_code == 404
