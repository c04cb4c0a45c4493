class Globals:
    ARCHIVE_ENDING = ".tar"
    COMPRESSED_ARCHIVE_ENDING = ".tar.gz"
    CIPHERTEXT_ENDING = ".crypt"
    TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"
    DEFAULT_BACKUP_BASE = "system-backup"
    DEFAULT_CONFIG_FILE = "config.yaml"
    DEFAULT_CONFIG_DIRS = [".", "~/.config/backupbuddy", "/etc/backupbuddy"]
    REQUIRED_SYSTEM_BINS = ["tar", "gpg"]
