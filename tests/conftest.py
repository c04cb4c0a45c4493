"""
Pytest configuration and shared fixtures.
"""
import sys
import pytest
from datetime import datetime
from pathlib import Path

# Allow running the tests from a source checkout without installing the package
SRC_DIR = Path(__file__).resolve().parent.parent / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture
def fixed_now():
    return datetime(2024, 1, 1, 0, 0, 0)


@pytest.fixture
def source_tree(tmp_path):
    """
    Creates a small source tree:

        src/a
        src/b
        src/c/d/e.txt
    """
    root = tmp_path / "src"
    (root / "c" / "d").mkdir(parents=True)
    (root / "a").write_text("alpha")
    (root / "b").write_bytes(b"\x00\x01beta")
    (root / "c" / "d" / "e.txt").write_text("echo")
    return root


@pytest.fixture
def backup_base(tmp_path):
    return tmp_path / "out" / "system-backup"


def relative_files(root: Path) -> set:
    """All files and folders below `root`, relative to it."""
    return {p.relative_to(root).as_posix() for p in root.rglob("*")}
