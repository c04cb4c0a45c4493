from pathlib import Path


class BundleError(Exception):
    """A source path could not be bundled into the staging root."""


class NotAbsoluteError(BundleError, ValueError):
    def __init__(self, path):
        super().__init__(f"Source path \"{path}\" is not absolute.")
        self.path = Path(path)


class SourceNotFoundError(BundleError):
    def __init__(self, path):
        super().__init__(f"Source path \"{path}\" does not exist.")
        self.path = Path(path)


class CopyError(Exception):
    """
    Raised when the tree copier is asked to do something its dispatch should have prevented,
    e.g. copying a directory through the file primitive. Always a programming error.
    """


class NotAFileError(CopyError):
    def __init__(self, path):
        super().__init__(f"Path \"{path}\" is not a file.")
        self.path = Path(path)


class NotAFolderError(CopyError):
    def __init__(self, path):
        super().__init__(f"Path \"{path}\" is not a folder.")
        self.path = Path(path)


class SourceInStagingRootError(BundleError):
    def __init__(self, path, staging_root):
        super().__init__(f"Source path \"{path}\" lies inside the staging root \"{staging_root}\".")
        self.path = Path(path)


class ArchiveError(Exception):
    pass


class EncryptionError(Exception):
    pass
