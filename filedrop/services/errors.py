# filedrop/services/errors.py
from pathlib import Path


class StorageError(Exception):
    """Basis voor I/O-fouten tijdens het wegschrijven van een upload."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"{path}: {cause.strerror or cause}")


class FileCreateError(StorageError):
    pass


class FileWriteError(StorageError):
    pass
