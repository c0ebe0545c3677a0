import errno

import pytest

from filedrop.domain.uploads import OutcomeKind
from filedrop.services.errors import FileWriteError
from filedrop.services.multipart_stream import InvalidMultipartBody, iter_form_parts
from filedrop.services.upload_orchestrator import UploadOrchestrator

pytestmark = pytest.mark.anyio

BOUNDARY = "testboundary42"
CONTENT_TYPE = f"multipart/form-data; boundary={BOUNDARY}"


def _file_head(name, filename):
    return (
        f"--{BOUNDARY}\r\n"
        f'Content-Disposition: form-data; name="{name}"; filename="{filename}"\r\n'
        "Content-Type: application/octet-stream\r\n\r\n"
    ).encode()


def _field(name, value):
    return (
        f"--{BOUNDARY}\r\n"
        f'Content-Disposition: form-data; name="{name}"\r\n\r\n'
        f"{value}\r\n"
    ).encode()


CLOSING = f"--{BOUNDARY}--\r\n".encode()


async def _body(*chunks, log=None):
    for i, chunk in enumerate(chunks, 1):
        if log is not None:
            log.append(f"body:{i}")
        yield chunk


async def _collect(content_type, body):
    result = []
    async for part in iter_form_parts(content_type, body):
        data = b"".join([chunk async for chunk in part.chunks])
        result.append((part.declared_name, data))
    return result


async def test_parts_and_fields_in_arrival_order():
    body = _body(
        _field("comment", "hello"),
        _file_head("files", "a.txt") + b"AAA\r\n",
        _file_head("files", "b.bin") + b"\x00\x01\r\n",
        CLOSING,
    )

    parts = await _collect(CONTENT_TYPE, body)

    assert parts == [(None, b"hello"), ("a.txt", b"AAA"), ("b.bin", b"\x00\x01")]


async def test_each_part_is_handed_out_while_the_body_arrives():
    log = []
    body = _body(
        _file_head("files", "a.txt") + b"AAAA",
        b"AAAA\r\n" + _file_head("files", "b.txt") + b"BBBB",
        b"\r\n" + CLOSING,
        log=log,
    )

    async for part in iter_form_parts(CONTENT_TYPE, body):
        async for _ in part.chunks:
            log.append(f"write:{part.declared_name}")

    # deel a wordt al geschreven voordat deel b binnen is
    assert log.index("write:a.txt") < log.index("body:2")
    assert log.index("write:b.txt") < log.index("body:3")


async def test_unread_field_data_is_skipped():
    body = _body(_field("note", "x" * 5000), _file_head("f", "only.txt") + b"data\r\n", CLOSING)

    names = [part.declared_name async for part in iter_form_parts(CONTENT_TYPE, body)]

    assert names == [None, "only.txt"]


async def test_empty_filename_is_reported_as_empty():
    body = _body(_file_head("f", "") + b"\r\n", CLOSING)

    assert await _collect(CONTENT_TYPE, body) == [("", b"")]


@pytest.mark.parametrize("content_type", ["", "application/x-www-form-urlencoded", "text/plain"])
async def test_non_multipart_body_has_no_parts(content_type):
    assert await _collect(content_type, _body(b"a=1&b=2")) == []


async def test_missing_boundary_is_invalid():
    with pytest.raises(InvalidMultipartBody):
        await _collect("multipart/form-data", _body(b"garbage"))


async def test_garbage_body_is_invalid():
    with pytest.raises(InvalidMultipartBody):
        await _collect(CONTENT_TYPE, _body(b"this is not a multipart body at all"))


async def test_truncated_part_is_invalid():
    body = _body(_file_head("f", "cut.txt") + b"half of the")

    with pytest.raises(InvalidMultipartBody):
        await _collect(CONTENT_TYPE, body)


async def test_write_failure_stops_reading_the_body(uploads_dir):
    log = []
    body = _body(
        _file_head("files", "first.txt") + b"1111\r\n",
        _file_head("files", "second.txt") + b"2222\r\n",
        _file_head("files", "third.txt") + b"3333\r\n",
        CLOSING,
        log=log,
    )

    async def failing_writer(path, chunks):
        async for _ in chunks:
            raise FileWriteError(path, OSError(errno.ENOSPC, "No space left on device"))
        return 0

    orchestrator = UploadOrchestrator(uploads_dir, timeout_seconds=5, writer=failing_writer)
    parts = iter_form_parts(CONTENT_TYPE, body)
    try:
        outcome = await orchestrator.handle_upload("1", "docs", parts)
    finally:
        await parts.aclose()

    assert outcome.kind is OutcomeKind.WRITE_FAILED
    # fail-fast: de rest van de body wordt niet meer binnengehaald
    assert log == ["body:1"]
