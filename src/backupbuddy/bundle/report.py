from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple


@dataclass
class BundleReport:
    """
    Collects the outcome of one bundling run.

    Attributes:
        staging_root (Path): Timestamped directory that holds the mirrored sources.
        bundled_sources (List[Path]): Sources that were bundled (possibly partially).
        failed_sources (List[Tuple[Path, str]]): Sources that could not be bundled at all, with the reason.
        copied (List[Path]): Destination paths of every copied file.
        skipped (List[Tuple[Path, str]]): Entries that were left out on purpose (non-regular files, cycles).
        warnings (List[str]): One message per file or directory that failed to copy.
        overwritten (List[Path]): Destination files replaced by a later source with the same mirrored path.
    """
    staging_root: Path
    bundled_sources: List[Path] = field(default_factory=list)
    failed_sources: List[Tuple[Path, str]] = field(default_factory=list)
    copied: List[Path] = field(default_factory=list)
    skipped: List[Tuple[Path, str]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    overwritten: List[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return len(self.bundled_sources) > 0

    def summary(self) -> str:
        return (f"{len(self.bundled_sources)} of {len(self.bundled_sources) + len(self.failed_sources)} sources bundled "
                f"into \"{self.staging_root}\": {len(self.copied)} files copied, {len(self.skipped)} skipped, "
                f"{len(self.warnings)} warnings")
