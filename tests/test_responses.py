import pytest

from filedrop.domain.uploads import OutcomeKind, SavedFile, UploadOutcome
from filedrop.schemas.uploads import ERROR_RESPONSES, build_response


def test_success_lists_stored_names():
    outcome = UploadOutcome.success([SavedFile("a-1-x-u.txt", 3), SavedFile("b-1-x-u", 0)])

    status_code, body = build_response(outcome)

    assert status_code == 200
    assert body.model_dump() == {"files": ["a-1-x-u.txt", "b-1-x-u"]}


@pytest.mark.parametrize(
    "kind, status_code, message",
    [
        (OutcomeKind.NO_FILES, 400, "No files uploaded"),
        (OutcomeKind.DIRECTORY_UNAVAILABLE, 500, "Failed to create uploads directory"),
        (OutcomeKind.CREATE_FAILED, 500, "Failed to create file"),
        (OutcomeKind.WRITE_FAILED, 500, "Failed to write file"),
        (OutcomeKind.TIMED_OUT, 408, "Upload timed out"),
    ],
)
def test_failures_map_to_error_body(kind, status_code, message):
    outcome = UploadOutcome.failure(kind, reason="disk says no")

    code, body = build_response(outcome)
    assert code == status_code
    # interne reden lekt niet naar de client
    assert body.model_dump() == {"error": message}


def test_every_failure_kind_has_a_response():
    failure_kinds = set(OutcomeKind) - {OutcomeKind.SUCCESS}

    assert set(ERROR_RESPONSES) == failure_kinds
