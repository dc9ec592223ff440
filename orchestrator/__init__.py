"""
Module 07 - Pipeline Integration (In-Process Runtime Wiring)

Wires leaf sources, the checkpoint builder, the anchor committer and the
local store into one commit cycle.

Public API:
- CheckpointPipeline: Main pipeline runner class
- PipelineConfig: Configuration for one run
- RunResult: Outcome of a run
- LocalCheckpointStore: Append-only local record store
- create_pipeline: Wire a pipeline from RuntimeConfig
"""

from orchestrator.pipeline import (
    CheckpointPipeline,
    PipelineConfig,
    RunResult,
    create_authoritative_store,
    create_pipeline,
)
from orchestrator.store import LocalCheckpointStore


__all__ = [
    "CheckpointPipeline",
    "PipelineConfig",
    "RunResult",
    "create_authoritative_store",
    "create_pipeline",
    "LocalCheckpointStore",
]
