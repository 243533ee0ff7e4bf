"""Age-based archival sweep over the configured top-level folders.

Each configured folder is walked depth-first. A folder older than the
deletion threshold is archived as a unit and its contents are not examined;
a newer folder is opened and each child is judged on its own. Files older
than the threshold are archived individually.

Stat and listing errors propagate and abort the sweep. Archive failures are
logged by the mover and only affect the node being moved.
"""

from __future__ import annotations

import logging
import stat
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from .config import Config
from .mover import archive_and_replace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilesystemNode:
    path: Path
    modified: datetime
    is_dir: bool


@dataclass
class SweepResult:
    archived: int = 0
    failed: int = 0
    interrupted: bool = False

    @property
    def attempted(self) -> int:
        return self.archived + self.failed


def deletion_threshold(frequency_days: int, now: Optional[datetime] = None) -> datetime:
    return (now or datetime.now()) - timedelta(days=frequency_days)


def is_older_than_threshold(
    modified: datetime, frequency_days: int, now: Optional[datetime] = None
) -> bool:
    # Strictly before: a node exactly at the threshold stays put.
    return modified < deletion_threshold(frequency_days, now)


def stat_node(path: Path) -> FilesystemNode:
    st = path.stat()
    return FilesystemNode(
        path=path,
        modified=datetime.fromtimestamp(st.st_mtime),
        is_dir=stat.S_ISDIR(st.st_mode),
    )


def list_children(path: Path) -> list[Path]:
    return sorted(path.iterdir())


def _stop_requested(stop_event: Optional[threading.Event]) -> bool:
    return stop_event is not None and stop_event.is_set()


def sweep_folder(
    folder: Path,
    config: Config,
    result: SweepResult,
    stop_event: Optional[threading.Event] = None,
) -> None:
    """Walk one configured folder, archiving every qualifying node.

    Uses an explicit stack instead of recursion; children are pushed in
    reverse so they are visited in listing order.
    """
    pending = [folder]
    while pending:
        if _stop_requested(stop_event):
            result.interrupted = True
            return

        node = stat_node(pending.pop())
        if is_older_than_threshold(node.modified, config.frequency_days):
            if archive_and_replace(node.path, config.temp_path, is_dir=node.is_dir):
                result.archived += 1
            else:
                result.failed += 1
            continue

        if node.is_dir:
            pending.extend(reversed(list_children(node.path)))


def sweep(config: Config, stop_event: Optional[threading.Event] = None) -> SweepResult:
    """Run one full pass over every configured folder, in order."""
    result = SweepResult()
    logger.info(
        "Sweep starting: root=%s archive=%s older_than=%d days",
        config.root_path, config.temp_path, config.frequency_days,
    )

    for folder in config.folder_paths():
        if _stop_requested(stop_event):
            result.interrupted = True
            break
        sweep_folder(folder, config, result, stop_event)
        if result.interrupted:
            break

    if result.interrupted:
        logger.info("Sweep interrupted after %d archived, %d failed",
                    result.archived, result.failed)
    else:
        logger.info("Sweep complete: %d archived, %d failed",
                    result.archived, result.failed)
    return result
