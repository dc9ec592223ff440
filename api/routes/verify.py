"""
Module 08 - Verify Route

Stateless proof verification: POST a leaf, its siblings and a root.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from api.models.requests import VerifyRequest
from api.models.responses import VerifyResponse
from core.crypto.hashing import from_hex, get_hash_function
from core.merkle.merkle_tree import verify_merkle_proof


logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])


@router.post("/verify", response_model=VerifyResponse)
async def verify_proof(request: VerifyRequest) -> VerifyResponse:
    """
    Recompute the root from leaf and siblings.

    An invalid proof is a normal 200 response with valid=false.
    """
    valid = verify_merkle_proof(
        from_hex(request.leaf),
        [from_hex(s) for s in request.siblings],
        from_hex(request.root),
        get_hash_function(request.hash_algorithm),
    )
    logger.info("Proof for leaf %s: valid=%s", request.leaf[:18], valid)
    return VerifyResponse(
        valid=valid,
        leaf=request.leaf,
        root=request.root,
        hash_algorithm=request.hash_algorithm,
    )
