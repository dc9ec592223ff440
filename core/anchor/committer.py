"""
Module 05 - Anchoring
File: committer.py

Purpose: Publish a checkpoint's root with a bounded retry budget.

Only StoreUnavailableException is retried. Every retry resubmits the
record that was already built; nothing is rebuilt between attempts, so
the root and metadata stay byte-identical. When the budget runs out the
failure is raised with the number of attempts made and the record, so a
later retry can publish the same payload.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from core.anchor.base import AuthoritativeStore
from core.schemas.checkpoint import CheckpointRecord
from core.schemas.errors import StoreUnavailableException


logger = logging.getLogger(__name__)


class AnchorCommitter:
    """Submits roots to an authoritative store."""

    def __init__(
        self,
        store: AuthoritativeStore,
        *,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Args:
            store: Authoritative store to publish into
            max_retries: Retries after the first failed attempt
            retry_delay: Seconds to wait between attempts
            sleep: Sleep function (tests pass a recorder)
        """
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.store = store
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._sleep = sleep

    def commit(self, record: CheckpointRecord) -> CheckpointRecord:
        """
        Publish the record's root and return the record with its anchor set.

        Raises:
            StoreUnavailableException: Store still unreachable after
                max_retries + 1 attempts
            StoreRejectedException: Store refused the submission (not retried)
        """
        root = record.root_bytes
        metadata = record.anchor_payload()
        last_error: StoreUnavailableException | None = None

        for attempt in range(self.max_retries + 1):
            try:
                reference = self.store.submit(root, metadata)
            except StoreUnavailableException as e:
                last_error = e
                logger.warning(
                    "Anchor attempt %d/%d failed: %s",
                    attempt + 1, self.max_retries + 1, e.message,
                )
                if attempt < self.max_retries:
                    self._sleep(self.retry_delay)
                continue

            logger.info(
                "Checkpoint root %s anchored at sequence %d",
                record.root[:18], reference.sequence,
            )
            return record.with_anchor(reference)

        attempts = self.max_retries + 1
        raise StoreUnavailableException(
            f"Authoritative store unavailable after {attempts} attempts",
            attempts=attempts,
            details={"root": record.root, "last_error": last_error.message if last_error else None},
            record=record,
        ) from last_error


__all__ = ["AnchorCommitter"]
