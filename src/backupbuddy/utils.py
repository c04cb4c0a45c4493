import shutil

from backupbuddy.log import logger, set_verbose
from backupbuddy.globals import Globals
from backupbuddy.parser import find_config, parse_config, get_backup_arguments, load_config


def check_system_dependencies(require_gpg: bool = True):
	"""
	Checks whether all required system binaries are available in the system's PATH.

	This function iterates over the list of required system binaries defined in
	`Globals.REQUIRED_SYSTEM_BINS` and uses `shutil.which` to verify their presence.
	gpg is only required if the archive is going to be encrypted.

	Returns:
		bool: True if all required binaries are found, False otherwise.
	"""
	for current_bin in Globals.REQUIRED_SYSTEM_BINS:
		if current_bin == "gpg" and not require_gpg:
			continue
		path = shutil.which(current_bin)
		if path is None:
			logger.error(f"BackupBuddy requires {current_bin}. Please install it on your system.")
			return False
	return True


def init(argv=None):
	"""
	Initializes BackupBuddy by parsing command-line arguments and the configuration file,
	and by checking the system dependencies.

	Returns:
		BackupConfig: The merged configuration, or None if initialization failed.
	"""
	# Parse command-line arguments
	args = get_backup_arguments(argv)
	if args is None:
		return None

	set_verbose(args["verbose"])

	# Parse configuration (optional if everything is given on the command line)
	config_file = find_config(args["config_file"])
	raw_config = {}
	if config_file is not None:
		raw_config = parse_config(config_file)
		if raw_config is None:
			return None
	elif not args["paths"]:
		logger.error(f"No configuration file found in {', '.join(Globals.DEFAULT_CONFIG_DIRS)} and no paths given.")
		return None

	config = load_config(raw_config, args)

	# Some consistency checks
	if not config.paths:
		logger.error("Nothing to back up: no paths configured.")
		return None

	if config.encrypt and config.recipient is None and config.recipient_file is None:
		logger.error("Please provide a GPG recipient (gpg.recipient, gpg.recipient_file, --recipient or --recipient-file).")
		return None

	if not check_system_dependencies(require_gpg=config.encrypt):
		return None

	return config
