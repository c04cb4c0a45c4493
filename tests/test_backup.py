import subprocess
import pytest

from pathlib import Path
from unittest.mock import patch

from backupbuddy.backup import run_backup
from backupbuddy.errors import ArchiveError, BundleError, EncryptionError
from backupbuddy.globals import Globals
from backupbuddy.main import main
from backupbuddy.parser import BackupConfig


def fake_run(cmd, check):
    # Stand-in for tar and gpg: write the requested output file
    if cmd[0] == "tar":
        Path(cmd[2]).write_bytes(b"archive")
    else:
        Path(cmd[cmd.index("--output") + 1]).write_bytes(b"ciphertext")


@pytest.fixture
def config(source_tree, backup_base):
    return BackupConfig(paths=[source_tree], backup_base=backup_base, recipient="ABCDEF")


@patch("backupbuddy.archiver.subprocess.run", side_effect=fake_run)
@patch("backupbuddy.security.encryption.subprocess.run", side_effect=fake_run)
def test_run_backup(mock_gpg, mock_tar, config, fixed_now):
    result = run_backup(config, now=fixed_now)

    staging_root = Path(f"{config.backup_base}-2024-01-01_00-00-00")
    assert result == Path(f"{staging_root}.tar.crypt")
    assert result.read_bytes() == b"ciphertext"
    assert not staging_root.exists()
    assert not Path(f"{staging_root}.tar").exists()


@patch("backupbuddy.archiver.subprocess.run", side_effect=fake_run)
@patch("backupbuddy.security.encryption.subprocess.run")
def test_run_backup_without_encryption(mock_gpg, mock_tar, config, fixed_now):
    config.encrypt = False
    config.compress = True

    result = run_backup(config, now=fixed_now)

    assert result == Path(f"{config.backup_base}-2024-01-01_00-00-00.tar.gz")
    mock_gpg.assert_not_called()


@patch("backupbuddy.archiver.subprocess.run")
def test_failed_archive_keeps_staging_root(mock_tar, config, fixed_now):
    mock_tar.side_effect = subprocess.CalledProcessError(2, ["tar"])

    with pytest.raises(ArchiveError):
        run_backup(config, now=fixed_now)

    assert Path(f"{config.backup_base}-2024-01-01_00-00-00").is_dir()


def fake_run_failing_gpg(cmd, check):
    # archiver and encryption share one subprocess.run, so dispatch on the command
    if cmd[0] == "gpg":
        raise subprocess.CalledProcessError(2, cmd)
    return fake_run(cmd, check)


@patch("subprocess.run", side_effect=fake_run_failing_gpg)
def test_failed_encryption_keeps_archive(mock_run, config, fixed_now):

    with pytest.raises(EncryptionError):
        run_backup(config, now=fixed_now)

    assert Path(f"{config.backup_base}-2024-01-01_00-00-00.tar").is_file()


def test_nothing_to_bundle(backup_base, fixed_now):
    config = BackupConfig(paths=[Path("relative")], backup_base=backup_base, recipient="ABCDEF")

    with pytest.raises(BundleError):
        run_backup(config, now=fixed_now)


@patch("backupbuddy.utils.check_system_dependencies", return_value=True)
@patch("backupbuddy.archiver.subprocess.run", side_effect=fake_run)
@patch("backupbuddy.security.encryption.subprocess.run", side_effect=fake_run)
def test_main_exit_codes(mock_gpg, mock_tar, mock_deps, source_tree, tmp_path, monkeypatch):
    monkeypatch.setattr(Globals, "DEFAULT_CONFIG_DIRS", [str(tmp_path)])
    base = str(tmp_path / "backup")
    assert main([str(source_tree), "--base", base, "--recipient", "ABCDEF"]) == 0
    assert main(["relative", "--base", base, "--recipient", "ABCDEF"]) == 1


@patch("backupbuddy.utils.check_system_dependencies", return_value=True)
def test_main_requires_recipient(mock_deps, source_tree, tmp_path, monkeypatch):
    monkeypatch.setattr(Globals, "DEFAULT_CONFIG_DIRS", [str(tmp_path)])
    assert main([str(source_tree), "--base", str(tmp_path / "backup")]) == 1
