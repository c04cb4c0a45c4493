import os
import stat

from enum import Enum
from pathlib import Path


class EntryKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"


def classify(path, follow_symlinks: bool = True) -> EntryKind:
    """
    Classifies a filesystem entry as a regular file, a directory or something else.

    With `follow_symlinks` a symlink takes the kind of its target; otherwise every symlink is OTHER.
    Dangling symlinks, sockets, FIFOs, devices and paths that do not exist are OTHER.
    """
    try:
        mode = os.stat(path, follow_symlinks=follow_symlinks).st_mode
    except OSError:
        return EntryKind.OTHER

    if stat.S_ISREG(mode):
        return EntryKind.FILE
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    return EntryKind.OTHER


def canonical(path) -> Path:
    return Path(path).resolve()
