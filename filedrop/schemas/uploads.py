# filedrop/schemas/uploads.py
from typing import Union

from pydantic import BaseModel

from filedrop.domain.uploads import OutcomeKind, UploadOutcome


class UploadFilesOut(BaseModel):
    files: list[str]


class ErrorOut(BaseModel):
    error: str


UploadResponseBody = Union[UploadFilesOut, ErrorOut]

# status + foutmelding per mislukte uitkomst
ERROR_RESPONSES: dict[OutcomeKind, tuple[int, str]] = {
    OutcomeKind.NO_FILES: (400, "No files uploaded"),
    OutcomeKind.DIRECTORY_UNAVAILABLE: (500, "Failed to create uploads directory"),
    OutcomeKind.CREATE_FAILED: (500, "Failed to create file"),
    OutcomeKind.WRITE_FAILED: (500, "Failed to write file"),
    OutcomeKind.TIMED_OUT: (408, "Upload timed out"),
}


def build_response(outcome: UploadOutcome) -> tuple[int, UploadResponseBody]:
    """Pure mapping van UploadOutcome naar (status_code, body)."""
    if outcome.kind is OutcomeKind.SUCCESS:
        return 200, UploadFilesOut(files=outcome.stored_names)

    status_code, message = ERROR_RESPONSES[outcome.kind]
    return status_code, ErrorOut(error=message)
