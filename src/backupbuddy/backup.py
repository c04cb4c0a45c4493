from pathlib import Path

from backupbuddy.log import logger
from backupbuddy.archiver import archive_dir
from backupbuddy.bundle.bundler import bundle_paths
from backupbuddy.parser import BackupConfig
from backupbuddy.security.encryption import encrypt_file


def run_backup(config: BackupConfig, now=None) -> Path:
	"""
	Runs one backup: bundle all paths, archive the staging root, encrypt the archive.

	Every stage consumes the artifact of the previous one. If a stage fails, the run is
	aborted and the last artifact (staging root or plaintext archive) is kept for inspection.

	Parameters:
		config (BackupConfig): Paths, backup base and encryption settings.
		now (datetime): Timestamp of the staging root. Defaults to the current time.

	Returns:
		Path: The encrypted archive, or the plain archive if encryption is disabled.

	Raises:
		BundleError: If none of the paths could be bundled.
		ArchiveError, EncryptionError: If archiving or encryption failed.
	"""
	# 1. Mirror all sources into one staging root
	report = bundle_paths(config.paths, config.backup_base, now=now, follow_symlinks=config.follow_symlinks)

	for source, reason in report.failed_sources:
		logger.warning(f"Not included in backup: {source} ({reason})")

	# 2. Archive the staging root (removes it on success)
	archive = archive_dir(report.staging_root, compress=config.compress)

	if not config.encrypt:
		logger.info(f"Backup written to {archive} (unencrypted).")
		return archive

	# 3. Encrypt the archive (removes the plaintext on success)
	ciphertext = encrypt_file(archive, config.recipient, config.recipient_file)

	logger.info(f"Backup written to {ciphertext}.")
	return ciphertext
