"""
Module 05 - Anchoring
File: http.py

Purpose: Authoritative store reached over a JSON/HTTP registry gateway.

Gateway routes (relative to the configured endpoint):

    POST /agents/{agent}/checkpoints              {"root", "metadata"}
         -> {"sequence", "block_number", "tx_hash", "registry"}
    GET  /agents/{agent}/checkpoints/count         -> {"count"}
    GET  /agents/{agent}/checkpoints/{sequence}
         -> {"sequence", "root", "metadata", "timestamp", "block_number"}
    POST /agents/{agent}/checkpoints/{sequence}/verify  {"leaf", "proof"}
         -> {"valid"}

Transport failures and 5xx responses are StoreUnavailableException
(retryable); other non-2xx responses are StoreRejectedException.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from core.anchor.base import AuthoritativeStore
from core.crypto.hashing import to_hex
from core.http.client import HttpClient, HttpError, HttpResponse
from core.schemas.checkpoint import AnchoredCheckpoint, AnchorReference
from core.schemas.errors import (
    AnchorNotFoundException,
    StoreRejectedException,
    StoreUnavailableException,
)


logger = logging.getLogger(__name__)


class HttpAuthoritativeStore(AuthoritativeStore):
    """Registry gateway client."""

    def __init__(
        self,
        endpoint: str,
        agent_id: str,
        *,
        network: str = "testnet",
        timeout: float = 30.0,
        client: Optional[HttpClient] = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.agent_id = agent_id
        self.network = network
        self.client = client or HttpClient(
            base_url=self.endpoint,
            timeout=timeout,
            default_headers={"Accept": "application/json"},
        )

    def _path(self, *parts: Any) -> str:
        suffix = "/".join(str(p) for p in parts)
        return f"/agents/{self.agent_id}/checkpoints" + (f"/{suffix}" if suffix else "")

    def _call(self, method: str, path: str, *, json: Any = None) -> HttpResponse:
        try:
            response = self.client.request(method, path, json=json)
        except HttpError as e:
            raise StoreUnavailableException(
                f"Registry unreachable: {e}",
                details={"endpoint": self.endpoint, "path": path},
            ) from e

        if response.status_code >= 500:
            raise StoreUnavailableException(
                f"Registry error: HTTP {response.status_code}",
                details={"endpoint": self.endpoint, "path": path, "status_code": response.status_code},
            )
        return response

    def _reject(self, response: HttpResponse) -> StoreRejectedException:
        return StoreRejectedException(
            f"Registry rejected request: HTTP {response.status_code}",
            status_code=response.status_code,
            details={"body": response.text[:500]},
        )

    def submit(self, root: bytes, metadata: str) -> AnchorReference:
        response = self._call("POST", self._path(), json={
            "root": to_hex(root),
            "metadata": metadata,
        })
        if not response.ok:
            raise self._reject(response)

        data = response.json()
        logger.info(
            "Anchored root %s at sequence %s (tx %s)",
            to_hex(root)[:18], data.get("sequence"), data.get("tx_hash"),
        )
        return AnchorReference(
            sequence=data["sequence"],
            block_number=data.get("block_number"),
            tx_hash=data.get("tx_hash"),
            network=self.network,
            registry=data.get("registry") or self.endpoint,
            anchored_at=datetime.now(timezone.utc),
        )

    def get(self, sequence: int) -> AnchoredCheckpoint:
        response = self._call("GET", self._path(sequence))
        if response.status_code == 404:
            raise AnchorNotFoundException(sequence)
        if not response.ok:
            raise self._reject(response)
        return AnchoredCheckpoint.model_validate(response.json())

    def verify_proof(self, sequence: int, leaf: bytes, siblings: Sequence[bytes]) -> bool:
        response = self._call("POST", self._path(sequence, "verify"), json={
            "leaf": to_hex(leaf),
            "proof": [to_hex(s) for s in siblings],
        })
        if response.status_code == 404:
            raise AnchorNotFoundException(sequence)
        if not response.ok:
            raise self._reject(response)
        return bool(response.json().get("valid", False))

    def count(self) -> int:
        response = self._call("GET", self._path("count"))
        if not response.ok:
            raise self._reject(response)
        return int(response.json()["count"])


__all__ = ["HttpAuthoritativeStore"]
