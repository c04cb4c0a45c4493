import shutil
import subprocess
import tarfile
import pytest

from unittest.mock import patch

from backupbuddy.archiver import archive_dir
from backupbuddy.errors import ArchiveError

requires_tar = pytest.mark.skipif(shutil.which("tar") is None, reason="tar is not installed")


@pytest.fixture
def staging_root(tmp_path):
    root = tmp_path / "system-backup-2024-01-01_00-00-00"
    (root / "home" / "matty").mkdir(parents=True)
    (root / "home" / "matty" / "notes.txt").write_text("notes")
    return root


@requires_tar
def test_archive_dir_creates_tar_and_removes_directory(staging_root):
    archive = archive_dir(staging_root)

    assert archive == staging_root.parent / "system-backup-2024-01-01_00-00-00.tar"
    assert archive.is_file()
    assert not staging_root.exists()
    with tarfile.open(archive) as tar:
        assert "system-backup-2024-01-01_00-00-00/home/matty/notes.txt" in tar.getnames()


@requires_tar
def test_archive_dir_compressed(staging_root):
    archive = archive_dir(staging_root, compress=True)

    assert archive.name.endswith(".tar.gz")
    with tarfile.open(archive, "r:gz") as tar:
        assert "system-backup-2024-01-01_00-00-00/home/matty/notes.txt" in tar.getnames()


def test_archive_missing_directory(tmp_path):
    with pytest.raises(ArchiveError):
        archive_dir(tmp_path / "missing")


@patch("backupbuddy.archiver.subprocess.run")
def test_failed_tar_keeps_directory(mock_run, staging_root):
    archive_path = staging_root.parent / (staging_root.name + ".tar")

    def failing_tar(cmd, check):
        archive_path.write_bytes(b"partial")
        raise subprocess.CalledProcessError(2, cmd)

    mock_run.side_effect = failing_tar

    with pytest.raises(ArchiveError):
        archive_dir(staging_root)

    assert staging_root.is_dir()
    assert not archive_path.exists()


@patch("backupbuddy.archiver.subprocess.run")
def test_tar_command(mock_run, staging_root):
    archive_dir(staging_root)

    cmd = mock_run.call_args[0][0]
    assert cmd == ["tar", "-cf", str(staging_root) + ".tar", "-C", str(staging_root.parent), staging_root.name]
