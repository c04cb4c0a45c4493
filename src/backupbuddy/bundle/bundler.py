from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from backupbuddy.log import logger
from backupbuddy.errors import BundleError, NotAbsoluteError, SourceNotFoundError, SourceInStagingRootError
from backupbuddy.bundle.copier import TreeCopier
from backupbuddy.bundle.entry import EntryKind, classify, canonical
from backupbuddy.bundle.paths import generate_staging_root, map_path
from backupbuddy.bundle.report import BundleReport


def bundle_path(source_path, backup_base, staging_root=None, report: Optional[BundleReport] = None,
                follow_symlinks: bool = True) -> Path:
	"""
	Mirrors a single source path into a staging root.

	Parameters:
		source_path: Absolute path of the file or directory to back up.
		backup_base: Base name of the staging root, e.g. "./system-backup".
		staging_root: Staging root to reuse. If None, a fresh timestamped root is derived from `backup_base`.
		report (BundleReport): Collects copied, skipped and failed entries. A new one is created if None.
		follow_symlinks (bool): Traverse symlinked directories and copy symlinked files.

	Returns:
		Path: The staging root the source was mirrored into. It must be handed to the archiver unchanged.

	Raises:
		NotAbsoluteError: If `source_path` is relative. The filesystem is not touched in that case.
		SourceNotFoundError: If `source_path` does not exist.
		SourceInStagingRootError: If `source_path` is the staging root or lies inside it.
		OSError: If the mirrored directory cannot be created or the source folder cannot be listed.
	"""
	source_path = Path(source_path)

	if not source_path.is_absolute():
		raise NotAbsoluteError(source_path)

	if staging_root is None:
		staging_root = generate_staging_root(backup_base)
	staging_root = Path(staging_root)

	if report is None:
		report = BundleReport(staging_root=staging_root)

	if not source_path.exists() and not source_path.is_symlink():
		raise SourceNotFoundError(source_path)

	# The staging root must never become part of its own backup
	staging_root_id = canonical(staging_root)
	source_id = canonical(source_path)
	if source_id == staging_root_id or staging_root_id in source_id.parents:
		raise SourceInStagingRootError(source_path, staging_root)

	mirrored_path = map_path(source_path, staging_root)

	# A folder is mirrored as a folder, a file lands in its mirrored parent directory
	if classify(source_path, follow_symlinks) == EntryKind.DIRECTORY:
		destination_dir = mirrored_path
	else:
		destination_dir = mirrored_path.parent

	destination_dir.mkdir(parents=True, exist_ok=True)
	logger.debug(f"Bundling {source_path} into {destination_dir}")

	copier = TreeCopier(staging_root, report, follow_symlinks)
	copier.copy_element(source_path, destination_dir)

	return staging_root


def bundle_paths(source_paths: Iterable, backup_base, now: Optional[datetime] = None,
                 follow_symlinks: bool = True) -> BundleReport:
	"""
	Bundles all source paths of one run into a single timestamped staging root.

	The staging root is computed once and shared by every source. A source that cannot be
	bundled is logged and recorded, the remaining sources are still processed.

	Returns:
		BundleReport: Outcome of the run. `report.staging_root` is the directory to archive.

	Raises:
		BundleError: If not a single source could be bundled.
	"""
	staging_root = generate_staging_root(backup_base, now)
	staging_root.mkdir(parents=True, exist_ok=True)
	logger.info(f"Staging backup in {staging_root}")

	report = BundleReport(staging_root=staging_root)

	for source in source_paths:
		source = Path(source)
		try:
			bundle_path(source, backup_base, staging_root, report, follow_symlinks)
		except (BundleError, OSError) as e:
			logger.error(f"Failed to bundle {source}: {e}")
			report.failed_sources.append((source, str(e)))
			continue

		# A socket, device or dangling symlink is skipped by the copier and contributes nothing
		if classify(source, follow_symlinks) == EntryKind.OTHER:
			continue

		report.bundled_sources.append(source)

	logger.info(report.summary())

	if not report.ok:
		raise BundleError(f"None of the source paths could be bundled into {staging_root}.")

	return report
