#!/usr/bin/env python3

"""
main.py

Backs up a list of files and folders: mirrors them into a timestamped folder, packs the folder
into a tar archive and encrypts the archive with gpg.

Author:   Dominik Püllen
Version:  0.1
"""

import sys

from backupbuddy.log import logger
from backupbuddy.utils import init
from backupbuddy.backup import run_backup
from backupbuddy.errors import BundleError, CopyError, ArchiveError, EncryptionError


def main(argv=None):

	# 1. Init BackupBuddy
	config = init(argv)

	if config is None:
		return 1

	# 2. Bundle, archive and encrypt
	try:
		run_backup(config)
	except (BundleError, ArchiveError, EncryptionError) as e:
		logger.error(str(e))
		return 1
	except CopyError as e:
		logger.error(f"Internal error while copying: {e}")
		return 1

	return 0


if __name__ == "__main__":
	sys.exit(main())
