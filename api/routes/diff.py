"""
Module 08 - Diff Route

Compare two stored checkpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from api.deps import get_checkpoint_store
from api.models.responses import DiffResponse
from core.checkpoint.diff import diff_checkpoints
from orchestrator.store.store import LocalCheckpointStore


router = APIRouter(tags=["diff"])


@router.get("/diff", response_model=DiffResponse)
async def diff(
    a: int = Query(..., ge=0, description="Older checkpoint id"),
    b: int = Query(..., ge=0, description="Newer checkpoint id"),
    store: LocalCheckpointStore = Depends(get_checkpoint_store),
) -> DiffResponse:
    result = diff_checkpoints(store.get(a), store.get(b))
    return DiffResponse.from_result(a, b, result)
