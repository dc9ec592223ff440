"""
Module 04 - Checkpoint Building
File: sources.py

Purpose: Leaf sources. A source hands the builder an ordered,
deterministic sequence of (path, bytes) pairs. The builder never touches
the filesystem itself, so the merkle engine has no idea where content
lives.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Sequence

from core.schemas.errors import LeafReadException


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeafContent:
    """Raw content of one item, captured before hashing."""
    path: str
    data: bytes
    observed_at: datetime | None = None


class LeafSource(ABC):
    """
    Supplies the content items for one checkpoint build.

    Implementations must return items in the same order on every call
    within a build and must not return the same path twice.
    """

    @abstractmethod
    def read_leaves(self) -> Sequence[LeafContent]:
        """
        Capture every item's content.

        Raises:
            LeafReadException: If any enumerated item cannot be read
        """


class StaticLeafSource(LeafSource):
    """In-memory source over fixed (path, bytes) pairs."""

    def __init__(
        self,
        items: Iterable[tuple[str, bytes]] | dict[str, bytes],
        observed_at: datetime | None = None,
    ) -> None:
        pairs = items.items() if isinstance(items, dict) else items
        self._items = [(str(path), bytes(data)) for path, data in pairs]
        self._observed_at = observed_at

    def read_leaves(self) -> list[LeafContent]:
        return [
            LeafContent(path=path, data=data, observed_at=self._observed_at)
            for path, data in self._items
        ]


class FileLeafSource(LeafSource):
    """
    Files under a workspace root.

    Items come in two groups, in this order:
    1. `files`: explicit relative paths, in the order given. Files that do
       not exist are skipped.
    2. `directories`: each directory's entries matching `pattern`, sorted
       by name. Directories that do not exist are skipped.

    Logical paths are POSIX paths relative to `root`, e.g. "MEMORY.md" and
    "memory/2026-02-03.md".

    Once a file has been enumerated, failing to read it aborts the build.
    """

    def __init__(
        self,
        root: str | Path,
        files: Sequence[str] = (),
        directories: Sequence[str] = (),
        pattern: str = "*.md",
    ) -> None:
        self.root = Path(root)
        self.files = list(files)
        self.directories = list(directories)
        self.pattern = pattern

    def enumerate(self) -> list[tuple[str, Path]]:
        """List (logical path, filesystem path) pairs without reading them."""
        entries: list[tuple[str, Path]] = []
        seen: set[str] = set()

        def add(file_path: Path) -> None:
            logical = file_path.relative_to(self.root).as_posix()
            if logical not in seen:
                seen.add(logical)
                entries.append((logical, file_path))

        for rel in self.files:
            file_path = self.root / rel
            if file_path.is_file():
                add(file_path)
            else:
                logger.debug("Skipping missing file: %s", file_path)

        for rel_dir in self.directories:
            dir_path = self.root / rel_dir
            if not dir_path.is_dir():
                logger.debug("Skipping missing directory: %s", dir_path)
                continue
            for file_path in sorted(dir_path.glob(self.pattern), key=lambda p: p.name):
                if file_path.is_file():
                    add(file_path)

        return entries

    def read_leaves(self) -> list[LeafContent]:
        leaves: list[LeafContent] = []
        for logical, file_path in self.enumerate():
            try:
                data = file_path.read_bytes()
                mtime = file_path.stat().st_mtime
            except OSError as e:
                raise LeafReadException(
                    f"Cannot read {logical}: {e}",
                    path=logical,
                    details={"error": str(e)},
                ) from e
            leaves.append(LeafContent(
                path=logical,
                data=data,
                observed_at=datetime.fromtimestamp(mtime, tz=timezone.utc),
            ))
        logger.info("Read %d files from %s", len(leaves), self.root)
        return leaves


__all__ = [
    "LeafContent",
    "LeafSource",
    "StaticLeafSource",
    "FileLeafSource",
]
