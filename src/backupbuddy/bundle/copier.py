import os
import shutil

from pathlib import Path

from backupbuddy.log import logger
from backupbuddy.errors import NotAFileError, NotAFolderError
from backupbuddy.bundle.entry import EntryKind, classify, canonical
from backupbuddy.bundle.paths import map_path
from backupbuddy.bundle.report import BundleReport


class TreeCopier:
    """
    Reconstructs files and directory trees underneath a staging root.

    Every directory is placed at its mirrored path computed from the staging root itself,
    never from the destination of the parent call, so deep trees cannot drift.
    Problems with single entries are recorded in the report and never abort the walk.
    """

    def __init__(self, staging_root, report: BundleReport, follow_symlinks: bool = True):
        self.staging_root = Path(staging_root)
        self.report = report
        self.follow_symlinks = follow_symlinks
        self.staging_root_id = canonical(self.staging_root)

    def copy_element(self, source, destination_dir):
        """
        Copies a top-level source (file or directory) into `destination_dir`.

        Parameters:
            source: Absolute path of the file or directory to copy.
            destination_dir: Mirrored directory of `source` if it is a directory,
                             otherwise the mirrored parent directory of the file.

        Raises:
            OSError: If the top-level directory cannot be listed.
        """
        source = Path(source)
        destination_dir = Path(destination_dir)

        kind = classify(source, self.follow_symlinks)

        if kind == EntryKind.FILE:
            self.copy_file(source, destination_dir)
            return

        if kind == EntryKind.OTHER:
            self._skip(source, "not a regular file or directory")
            return

        # Element is a folder: only one level here, sub-folders are handled by bundle_folder
        children = self._list_children(source)
        self._dispatch_children(children, destination_dir, (canonical(source),))

    def bundle_folder(self, folder, ancestors: tuple = ()):
        """
        Mirrors a nested folder and recurses into its sub-folders.

        `ancestors` holds the canonical paths of all folders on the current recursion path.
        A sub-folder resolving to one of them (or to `folder` itself) is not entered again.
        """
        folder = Path(folder)

        if classify(folder, self.follow_symlinks) != EntryKind.DIRECTORY:
            raise NotAFolderError(folder)

        folder_id = canonical(folder)
        destination = map_path(folder, self.staging_root)

        try:
            destination.mkdir(parents=True, exist_ok=True)
            children = self._list_children(folder)
        except OSError as e:
            self._warn(f"Failed to bundle folder {folder}: {e}")
            return

        self._dispatch_children(children, destination, ancestors + (folder_id,))

    def copy_file(self, source, destination_dir):
        """
        Copies a single file into `destination_dir`, keeping its name.

        Returns:
            Path | None: The copied file, or None if it was skipped or failed.

        Raises:
            NotAFileError: If `source` is a directory.
        """
        source = Path(source)
        kind = classify(source, self.follow_symlinks)

        if kind == EntryKind.DIRECTORY:
            raise NotAFileError(source)

        if kind != EntryKind.FILE:
            self._skip(source, "not a regular file")
            return None

        if not source.name:
            self._skip(source, "path has no final component")
            return None

        target = Path(destination_dir) / source.name

        if target.is_dir():
            self._warn(f"Failed to copy file {source}: destination {target} is a directory")
            return None

        replaces_existing = target.exists()

        try:
            shutil.copy2(source, target)
        except OSError as e:
            self._warn(f"Failed to copy file {source} → {target}: {e}")
            return None

        # Last writer wins when two sources mirror onto the same file
        if replaces_existing:
            logger.warning(f"Overwrote {target} with {source}")
            self.report.overwritten.append(target)

        logger.debug(f"Copied {source} → {target}")
        self.report.copied.append(target)
        return target

    def _dispatch_children(self, children: list, destination: Path, ancestors: tuple):
        for child in children:
            kind = classify(child, self.follow_symlinks)
            if kind == EntryKind.DIRECTORY:
                child_id = canonical(child)
                if child_id == self.staging_root_id:
                    self._skip(child, "staging root")
                    continue
                if child_id in ancestors:
                    self._skip(child, "directory refers to itself or one of its parents")
                    continue
                self.bundle_folder(child, ancestors)
            elif kind == EntryKind.FILE:
                self.copy_file(child, destination)
            else:
                self._skip(child, "not a regular file or directory")

    @staticmethod
    def _list_children(folder: Path) -> list:
        # Filesystem order, unsorted
        with os.scandir(folder) as entries:
            return [Path(entry.path) for entry in entries]

    def _skip(self, path: Path, reason: str):
        logger.info(f"Skipping {path}: {reason}")
        self.report.skipped.append((path, reason))

    def _warn(self, message: str):
        logger.warning(message)
        self.report.warnings.append(message)
