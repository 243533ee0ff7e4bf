"""Move aged files and folders into the archive root, replacing prior copies.

Placement is flat: only the final path component is kept, so two entries
with the same name from different subtrees share one archive slot and the
later move wins.
"""

import errno
import logging
import os
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def archive_destination(source: Path, archive_root: Path) -> Path:
    return archive_root / source.name


def remove_existing(destination: Path) -> bool:
    """Delete whatever sits at destination. Returns False if nothing was there."""
    if destination.is_dir() and not destination.is_symlink():
        shutil.rmtree(destination)
        logger.info("Folder deleted from archive: %s", destination)
        return True
    if destination.is_symlink() or destination.exists():
        destination.unlink(missing_ok=True)
        logger.info("File deleted from archive: %s", destination)
        return True
    return False


def move_replacing(source: Path, destination: Path):
    """Rename source onto destination, copying instead across filesystems."""
    try:
        os.replace(source, destination)
    except OSError as exc:
        if exc.errno != errno.EXDEV:
            raise
        shutil.move(str(source), str(destination))


def archive_and_replace(source: Path, archive_root: Path, is_dir: bool = False) -> bool:
    """Move source into archive_root, replacing any same-named entry.

    Each step guards its own failure: a failed delete is logged and the move
    is still attempted. Returns True once the move has landed.
    """
    kind = "Folder" if is_dir else "File"
    destination = archive_destination(source, archive_root)

    try:
        remove_existing(destination)
    except OSError:
        logger.exception("Error deleting %s from archive: %s", kind.lower(), destination)

    try:
        move_replacing(source, destination)
    except OSError:
        logger.exception("Error moving %s to archive: %s", kind.lower(), source)
        return False

    logger.info("%s moved to archive: %s", kind, source)
    return True
