"""
Module 08 - Minimal API (FastAPI)

HTTP API for memory anchoring:
- GET /checkpoints - List checkpoints
- GET /checkpoints/{id}/proof - Inclusion proof
- POST /verify - Verify a proof
- GET /diff - Compare two checkpoints
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
