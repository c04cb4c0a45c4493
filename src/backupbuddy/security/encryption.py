import subprocess

from pathlib import Path
from typing import Optional

from backupbuddy.globals import Globals
from backupbuddy.log import logger
from backupbuddy.errors import EncryptionError


def assemble_gpg_cmd(file_to_encrypt: Path, out_file: Path, recipient: Optional[str] = None,
                     recipient_file: Optional[Path] = None) -> list[str]:
    """
    Builds the gpg command that encrypts `file_to_encrypt` for exactly one recipient.

    The recipient is either a key id/fingerprint from the keyring (`recipient`) or an
    exported public key file (`recipient_file`).
    """
    if (recipient is None) == (recipient_file is None):
        raise ValueError("Exactly one of recipient and recipient_file must be given.")

    if recipient_file is not None:
        recipient_args = ["--recipient-file", str(Path(recipient_file).expanduser())]
    else:
        recipient_args = ["--recipient", recipient]

    return [
        "gpg", "--batch", "--yes", "--encrypt",
        *recipient_args,
        "--output", str(out_file),
        str(file_to_encrypt)
    ]


def encrypt_file(file_to_encrypt, recipient: Optional[str] = None, recipient_file=None) -> Path:
    """
    Encrypts a file with GPG and removes the plaintext on success.

    The ciphertext is written next to the input as `<file>.crypt`.

    Parameters:
        file_to_encrypt (Path): File to encrypt, usually the backup archive.
        recipient (str): Key id, fingerprint or e-mail of the recipient in the GPG keyring.
        recipient_file (Path): Public key file of the recipient. Used instead of `recipient`.

    Returns:
        Path: Path to the ciphertext.

    Raises:
        EncryptionError: If gpg fails or produces no output. The plaintext is kept.
    """
    file_to_encrypt = Path(file_to_encrypt)
    out_file = file_to_encrypt.parent / (file_to_encrypt.name + Globals.CIPHERTEXT_ENDING)

    if not file_to_encrypt.is_file():
        raise EncryptionError(f"File to encrypt does not exist: {file_to_encrypt}")

    try:
        gpg_cmd = assemble_gpg_cmd(file_to_encrypt, out_file, recipient, recipient_file)
    except ValueError as e:
        raise EncryptionError(f"Invalid configuration: {e}") from e

    # Remove ciphertext from previous run
    if out_file.exists():
        out_file.unlink()
        logger.debug(f"Old ciphertext removed: {out_file}")

    logger.debug(gpg_cmd)

    try:
        subprocess.run(gpg_cmd, check=True)
    except (subprocess.CalledProcessError, OSError) as e:
        out_file.unlink(missing_ok=True)
        raise EncryptionError(f"GPG encryption of {file_to_encrypt} failed: {e}") from e

    if not out_file.exists():
        raise EncryptionError(f"Encryption succeeded but ciphertext not found: {out_file}")

    file_to_encrypt.unlink()
    logger.info(f"Encrypted {file_to_encrypt} into {out_file}")

    return out_file
