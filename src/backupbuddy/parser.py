import argparse
import yaml

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from backupbuddy.log import logger
from backupbuddy.globals import Globals


@dataclass
class BackupConfig:
	"""
	Settings of one backup run, assembled from the YAML configuration and the command line.

	Attributes:
		paths (List[Path]): Absolute files and directories to back up, in order.
		backup_base (Path): Base name of the timestamped staging root.
		recipient (str): GPG key id of the recipient.
		recipient_file (Path): Public key file of the recipient (alternative to `recipient`).
		encrypt (bool): Encrypt the archive. If False the run stops after archiving.
		compress (bool): Gzip the archive.
		follow_symlinks (bool): Traverse symlinked directories and copy symlinked files.
	"""
	paths: List[Path] = field(default_factory=list)
	backup_base: Path = Path(Globals.DEFAULT_BACKUP_BASE)
	recipient: Optional[str] = None
	recipient_file: Optional[Path] = None
	encrypt: bool = True
	compress: bool = False
	follow_symlinks: bool = True


def find_config(path_to_config: Optional[str]) -> Optional[Path]:
	"""
	Returns the configuration file to use.

	An explicitly given path is returned as is. Otherwise `Globals.DEFAULT_CONFIG_FILE` is looked up
	in `Globals.DEFAULT_CONFIG_DIRS` and the first existing file wins. None if nothing was found.
	"""
	if path_to_config is not None:
		return Path(path_to_config)

	for config_dir in Globals.DEFAULT_CONFIG_DIRS:
		candidate = Path(config_dir).expanduser() / Globals.DEFAULT_CONFIG_FILE
		if candidate.is_file():
			logger.debug(f"Using configuration {candidate}")
			return candidate

	return None


def parse_config(path_to_config):
	"""
	Parses a YAML configuration file that lists the paths to back up.

	Returns:
		dict: The configuration data, e.g. 'paths', 'backup_base', 'gpg', 'archive'.
		None if the file does not exist or is not a valid YAML mapping.
	"""
	try:
		with open(path_to_config) as f:
			config = yaml.safe_load(f)
	except FileNotFoundError:
		logger.error(f"Configuration file \"{path_to_config}\" not found.")
		return None
	except yaml.YAMLError as e:
		logger.error(f"Configuration file \"{path_to_config}\" is not valid YAML: {e}")
		return None

	if config is None:
		config = {}

	if not isinstance(config, dict):
		logger.error(f"Configuration file \"{path_to_config}\" must contain a mapping.")
		return None

	paths = config.get("paths")
	if paths is not None and not isinstance(paths, (str, list)):
		logger.error("Invalid configuration: \"paths\" must be a path or a list of paths.")
		return None

	# A single path may be given without list syntax
	if isinstance(paths, str):
		config["paths"] = [paths]

	logger.debug(f"Configuration contains {len(config.get('paths') or [])} paths.")

	return config


def load_config(config: dict, args: dict) -> BackupConfig:
	"""
	Merges the parsed YAML configuration with the command-line arguments.
	Values given on the command line take precedence.
	"""
	gpg = config.get("gpg") or {}
	archive = config.get("archive") or {}

	paths = args.get("paths") or config.get("paths") or []
	if isinstance(paths, str):
		paths = [paths]
	backup_base = args.get("backup_base") or config.get("backup_base") or Globals.DEFAULT_BACKUP_BASE

	recipient = args.get("recipient")
	recipient_file = args.get("recipient_file")

	# A recipient from the command line replaces both recipient settings of the file
	if recipient is None and recipient_file is None:
		recipient = gpg.get("recipient")
		recipient_file = gpg.get("recipient_file")

	return BackupConfig(
		paths=[Path(p).expanduser() for p in paths if p is not None],
		backup_base=Path(backup_base).expanduser(),
		recipient=str(recipient) if recipient is not None else None,
		recipient_file=Path(recipient_file).expanduser() if recipient_file else None,
		encrypt=not args.get("no_encrypt", False),
		compress=bool(args.get("compress") or archive.get("compress", False)),
		follow_symlinks=bool(config.get("follow_symlinks", True)) and not args.get("no_follow_symlinks", False),
	)


def get_backup_arguments(argv=None):
	"""
	Parses command-line arguments for BackupBuddy.

	Returns:
		dict: A dictionary of parsed arguments.
	"""
	parser = argparse.ArgumentParser(description="Backs up files and folders into an encrypted archive.")
	parser.add_argument("paths", nargs="*", help="Absolute files or folders to back up (overrides the configuration)")
	parser.add_argument("--config", type=str, help="Path to the configuration YAML file")
	parser.add_argument("--base", type=str, help="Base name of the backup folder (e.g., ./system-backup)")
	parser.add_argument("--recipient", type=str, help="GPG key id of the recipient")
	parser.add_argument("--recipient-file", type=str, help="Public key file of the recipient")
	parser.add_argument("--no-encrypt", action="store_true", help="Only bundle and archive, do not encrypt.")
	parser.add_argument("--compress", action="store_true", help="Gzip the archive.")
	parser.add_argument("--no-follow-symlinks", action="store_true", help="Skip symlinks instead of following them.")
	parser.add_argument("-v", "--verbose", action="store_true", help="Print debug output.")
	args = parser.parse_args(argv)

	if args.recipient and args.recipient_file:
		print("Please provide either --recipient or --recipient-file, not both.")
		return None

	return {
		"paths": args.paths,
		"config_file": args.config,
		"backup_base": args.base,
		"recipient": args.recipient,
		"recipient_file": args.recipient_file,
		"no_encrypt": args.no_encrypt,
		"compress": args.compress,
		"no_follow_symlinks": args.no_follow_symlinks,
		"verbose": args.verbose}
