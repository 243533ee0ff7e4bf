"""Age-based folder archiver."""

from .config import Config, ConfigError, load_config
from .mover import archive_and_replace, archive_destination, remove_existing
from .scheduler import ArchiveScheduler
from .traversal import (
    FilesystemNode,
    SweepResult,
    deletion_threshold,
    is_older_than_threshold,
    sweep,
)
