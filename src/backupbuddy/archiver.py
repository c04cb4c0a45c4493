import shutil
import subprocess

from pathlib import Path

from backupbuddy.log import logger
from backupbuddy.globals import Globals
from backupbuddy.errors import ArchiveError


def archive_dir(directory, compress: bool = False) -> Path:
	"""
	Packs a directory into a single tar file next to it and removes the directory afterwards.

	Parameters:
		directory (Path): Staging root to archive.
		compress (bool): Create a gzip-compressed archive (`.tar.gz`) instead of a plain `.tar`.

	Returns:
		Path: Path to the created archive.

	Raises:
		ArchiveError: If the directory is missing or tar fails. The directory is left untouched and
		              no (partial) archive is kept in that case.
	"""
	directory = Path(directory)

	if not directory.is_dir():
		raise ArchiveError(f"Directory to archive does not exist: {directory}")

	ending = Globals.COMPRESSED_ARCHIVE_ENDING if compress else Globals.ARCHIVE_ENDING
	archive_path = directory.parent / (directory.name + ending)

	# Build tar command
	tar_cmd = [
		"tar", "-czf" if compress else "-cf", str(archive_path),
		"-C", str(directory.parent),
		directory.name
	]
	logger.debug(tar_cmd)

	try:
		subprocess.run(tar_cmd, check=True)
	except (subprocess.CalledProcessError, OSError) as e:
		archive_path.unlink(missing_ok=True)
		raise ArchiveError(f"Failed to create archive from {directory}: {e}") from e

	logger.info(f"Archived {directory} into {archive_path}")

	try:
		shutil.rmtree(directory)
	except OSError as e:
		raise ArchiveError(f"Failed to remove backup directory {directory}: {e}") from e

	logger.debug(f"Backup directory {directory} removed.")
	return archive_path
