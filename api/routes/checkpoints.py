"""
Module 08 - Checkpoint Routes

Read-only access to the local checkpoint store:
- GET /checkpoints
- GET /checkpoints/{checkpoint_id}
- GET /checkpoints/{checkpoint_id}/proof?path=...
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from api.deps import get_checkpoint_store
from api.errors import LeafNotFoundError
from api.models.responses import CheckpointListResponse, CheckpointSummary, ProofResponse
from core.checkpoint.verify import verify_leaf_inclusion
from core.schemas.checkpoint import CheckpointRecord
from orchestrator.store.store import LocalCheckpointStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/checkpoints", tags=["checkpoints"])


@router.get("", response_model=CheckpointListResponse)
async def list_checkpoints(
    store: LocalCheckpointStore = Depends(get_checkpoint_store),
) -> CheckpointListResponse:
    """List stored checkpoints, oldest first."""
    summaries = [CheckpointSummary.from_record(r) for r in store.list()]
    return CheckpointListResponse(count=len(summaries), checkpoints=summaries)


@router.get("/{checkpoint_id}", response_model=CheckpointRecord)
async def get_checkpoint(
    checkpoint_id: int,
    store: LocalCheckpointStore = Depends(get_checkpoint_store),
) -> CheckpointRecord:
    """Full record: leaves, proofs, root and anchor reference."""
    return store.get(checkpoint_id)


@router.get("/{checkpoint_id}/proof", response_model=ProofResponse)
async def get_proof(
    checkpoint_id: int,
    path: str = Query(..., min_length=1, description="Leaf path or unique file name"),
    store: LocalCheckpointStore = Depends(get_checkpoint_store),
) -> ProofResponse:
    """Inclusion proof for one leaf, re-checked against the stored root."""
    record = store.get(checkpoint_id)
    report = verify_leaf_inclusion(record, path)
    if not report.found:
        raise LeafNotFoundError(path, checkpoint_id)

    return ProofResponse(
        checkpoint_id=checkpoint_id,
        path=report.path,
        index=record.index_of(report.path),
        leaf=report.leaf.content_hash,
        proof=report.proof,
        root=record.root,
        valid=report.proof_valid,
    )
