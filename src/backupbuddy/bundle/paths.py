import os

from datetime import datetime
from pathlib import Path, PurePath
from typing import Optional

from backupbuddy.globals import Globals


def root_relative(source_path) -> PurePath:
    """
    Strip the root component from a path so it can be joined under another directory.

    The path is normalized lexically first, so "/a/../b" becomes "b" and no ".."
    component can climb out of the directory it is later joined onto.
    A path without a root is returned unchanged.
    """
    path = PurePath(os.path.normpath(source_path))
    if not path.anchor:
        return path
    return path.relative_to(path.anchor)


def map_path(source_path, staging_root) -> Path:
    """
    Returns the mirrored location of `source_path` inside `staging_root`.

    Example:
        map_path("/home/user/.ssh/id_rsa", "backup-2024-01-01_00-00-00")
        -> backup-2024-01-01_00-00-00/home/user/.ssh/id_rsa

    Parameters:
        source_path: Absolute path of a file or directory to be backed up.
        staging_root: Directory under which the source tree is reconstructed.

    Returns:
        Path: The destination path. No filesystem access takes place.
    """
    return Path(staging_root) / root_relative(source_path)


def generate_staging_root(backup_base, now: Optional[datetime] = None) -> Path:
    """Append a second-resolution timestamp to the backup base, e.g. `system-backup-2024-01-01_00-00-00`."""
    if now is None:
        now = datetime.now()
    timestamp = now.strftime(Globals.TIMESTAMP_FORMAT)
    return Path(f"{Path(backup_base)}-{timestamp}")
