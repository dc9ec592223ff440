"""
Module 07 - Checkpoint Pipeline

In-process runner for one commit cycle:

    read leaves -> build record -> commit root (with retry) -> store record

A dry run stops after the build: the record is returned but neither
committed nor stored. A commit failure leaves the local store untouched;
the raised StoreUnavailableException carries the built record, and
commit() publishes that same record again later. Without an
authoritative store (no registry endpoint) records are stored unanchored.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from core.anchor.base import AuthoritativeStore
from core.anchor.committer import AnchorCommitter
from core.anchor.http import HttpAuthoritativeStore
from core.checkpoint.builder import build_checkpoint
from core.checkpoint.sources import FileLeafSource, LeafSource
from core.config.runtime import RuntimeConfig
from core.crypto.hashing import DEFAULT_HASH_ALGORITHM, LeafHasher
from core.schemas.checkpoint import CheckpointRecord

from orchestrator.store.store import LocalCheckpointStore


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class PipelineConfig:
    """Configuration for one pipeline run."""
    dry_run: bool = False
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM


# =============================================================================
# Run Result
# =============================================================================

@dataclass
class RunResult:
    """Outcome of a pipeline run."""
    record: Optional[CheckpointRecord] = None
    dry_run: bool = False
    stored: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.record is not None and not self.errors

    @property
    def anchored(self) -> bool:
        return self.record is not None and self.record.is_anchored

    def to_dict(self) -> dict[str, Any]:
        record = self.record
        return {
            "ok": self.ok,
            "dry_run": self.dry_run,
            "stored": self.stored,
            "anchored": self.anchored,
            "checkpoint_id": record.checkpoint_id if record else None,
            "root": record.root if record else None,
            "leaf_count": record.metadata.leaf_count if record else 0,
            "total_bytes": record.metadata.total_bytes if record else 0,
            "sequence": record.anchor.sequence if record and record.anchor else None,
            "errors": self.errors,
        }


# =============================================================================
# Pipeline Class
# =============================================================================

class CheckpointPipeline:
    """
    Builds, commits and stores checkpoints.

    Build and commit errors propagate to the caller unchanged:
    LeafReadException aborts before anything is committed, and
    StoreUnavailableException is raised once the retry budget is spent.
    With no committer, records are stored without an anchor reference.
    """

    def __init__(
        self,
        source: LeafSource,
        store: LocalCheckpointStore,
        committer: Optional[AnchorCommitter],
        *,
        config: Optional[PipelineConfig] = None,
    ) -> None:
        self.source = source
        self.store = store
        self.committer = committer
        self.config = config or PipelineConfig()
        self.hasher = LeafHasher(self.config.hash_algorithm)

    def build(self, *, now: Optional[datetime] = None) -> CheckpointRecord:
        """Snapshot the source and build an unanchored record."""
        return build_checkpoint(self.source, hasher=self.hasher, now=now)

    def run(self, *, now: Optional[datetime] = None) -> RunResult:
        """Execute one commit cycle."""
        record = self.build(now=now)

        if self.config.dry_run:
            logger.info("Dry run: root %s not committed", record.root[:18])
            return RunResult(record=record, dry_run=True)

        return self.commit(record)

    def commit(self, record: CheckpointRecord) -> RunResult:
        """
        Publish a built record and append it to the local store.

        Used by run() and to retry a record taken from
        StoreUnavailableException.record, which resubmits the original
        root and metadata instead of rebuilding.

        Raises:
            ValueError: Record is already anchored or stored
        """
        if record.is_anchored or record.checkpoint_id is not None:
            raise ValueError("Record has already been committed")

        if self.committer is None:
            logger.warning("No authoritative store configured, storing root %s unanchored", record.root[:18])
            stored = self.store.append(record)
            return RunResult(record=stored, stored=True)

        anchored = self.committer.commit(record)
        stored = self.store.append(anchored)
        return RunResult(record=stored, stored=True)


# =============================================================================
# Factory Functions
# =============================================================================

def create_authoritative_store(config: RuntimeConfig) -> Optional[AuthoritativeStore]:
    """HTTP gateway for the configured endpoint, or None without one."""
    registry = config.registry
    if not registry.endpoint:
        return None
    return HttpAuthoritativeStore(
        registry.endpoint,
        registry.agent_id,
        network=registry.network,
        timeout=registry.timeout,
    )


def create_pipeline(
    config: RuntimeConfig,
    *,
    dry_run: bool = False,
    authoritative_store: Optional[AuthoritativeStore] = None,
) -> CheckpointPipeline:
    """
    Convenience function to wire a pipeline from runtime configuration.

    Args:
        config: Runtime configuration
        dry_run: Build only, no commit and no storage
        authoritative_store: Override the store chosen from config

    Returns:
        Configured CheckpointPipeline instance
    """
    sources = config.sources
    source = FileLeafSource(
        sources.root,
        files=sources.files,
        directories=sources.directories,
        pattern=sources.pattern,
    )
    remote = authoritative_store
    if remote is None:
        remote = create_authoritative_store(config)
    committer = None
    if remote is not None:
        committer = AnchorCommitter(
            remote,
            max_retries=config.registry.max_retries,
            retry_delay=config.registry.retry_delay,
        )
    return CheckpointPipeline(
        source,
        LocalCheckpointStore(config.store.directory),
        committer,
        config=PipelineConfig(dry_run=dry_run, hash_algorithm=config.hashing.algorithm),
    )


__all__ = [
    "PipelineConfig",
    "RunResult",
    "CheckpointPipeline",
    "create_authoritative_store",
    "create_pipeline",
]
