# filedrop/domain/uploads.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncIterable, Optional


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    NO_FILES = "no_files"
    DIRECTORY_UNAVAILABLE = "directory_unavailable"
    CREATE_FAILED = "create_failed"
    WRITE_FAILED = "write_failed"
    TIMED_OUT = "timed_out"


@dataclass
class FilePart:
    """Eén veld uit de multipart body. Zonder declared_name is het geen bestand."""

    declared_name: Optional[str]
    chunks: AsyncIterable[bytes]


@dataclass(frozen=True)
class SavedFile:
    stored_name: str
    size: int = 0


@dataclass(frozen=True)
class UploadOutcome:
    kind: OutcomeKind
    files: tuple[SavedFile, ...] = field(default=())
    reason: Optional[str] = None

    @classmethod
    def success(cls, files: list[SavedFile]) -> UploadOutcome:
        return cls(OutcomeKind.SUCCESS, files=tuple(files))

    @classmethod
    def failure(cls, kind: OutcomeKind, reason: Optional[str] = None) -> UploadOutcome:
        return cls(kind, reason=reason)

    @property
    def stored_names(self) -> list[str]:
        return [f.stored_name for f in self.files]
