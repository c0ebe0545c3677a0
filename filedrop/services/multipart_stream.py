# filedrop/services/multipart_stream.py
"""
Streaming multipart decoder bovenop python-multipart.

De parser wordt pas gevoed als de consument (de orchestrator) om een
volgend deel of de volgende chunk vraagt. Deel N wordt dus weggeschreven
terwijl het binnenkomt en er staat nooit meer dan één body-chunk aan
geparste data in het geheugen.
"""
from collections import deque
from typing import AsyncIterable, AsyncIterator, Optional

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

from filedrop.domain.uploads import FilePart

_PART = "part"
_DATA = "data"
_END = "end"


class InvalidMultipartBody(Exception):
    pass


class MultipartStream:
    def __init__(self, boundary: bytes, body: AsyncIterable[bytes]):
        self._body = body.__aiter__()
        self._events: deque = deque()
        self._exhausted = False
        self._part_open = False

        self._headers: dict[bytes, bytes] = {}
        self._header_field = b""
        self._header_value = b""

        self._parser = MultipartParser(
            boundary,
            {
                "on_part_begin": self._on_part_begin,
                "on_header_field": self._on_header_field,
                "on_header_value": self._on_header_value,
                "on_header_end": self._on_header_end,
                "on_headers_finished": self._on_headers_finished,
                "on_part_data": self._on_part_data,
                "on_part_end": self._on_part_end,
            },
        )

    # --- parser callbacks ---
    def _on_part_begin(self) -> None:
        self._headers = {}

    def _on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def _on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def _on_header_end(self) -> None:
        self._headers[self._header_field.lower()] = self._header_value
        self._header_field = b""
        self._header_value = b""

    def _on_headers_finished(self) -> None:
        _, options = parse_options_header(self._headers.get(b"content-disposition", b""))
        filename = options.get(b"filename")
        declared = filename.decode("utf-8", errors="replace") if filename is not None else None
        self._events.append((_PART, declared))

    def _on_part_data(self, data: bytes, start: int, end: int) -> None:
        if end > start:
            self._events.append((_DATA, bytes(data[start:end])))

    def _on_part_end(self) -> None:
        self._events.append((_END, None))

    # --- pull-kant ---
    def _feed(self, chunk: Optional[bytes]) -> None:
        try:
            if chunk is None:
                self._parser.finalize()
            elif chunk:
                self._parser.write(chunk)
        except MultipartParseError as e:
            raise InvalidMultipartBody(str(e)) from e

    async def _next_event(self) -> Optional[tuple]:
        while not self._events:
            if self._exhausted:
                return None
            try:
                chunk = await self._body.__anext__()
            except StopAsyncIteration:
                self._exhausted = True
                self._feed(None)
                continue
            self._feed(chunk)
        return self._events.popleft()

    async def _part_chunks(self) -> AsyncIterator[bytes]:
        while self._part_open:
            event = await self._next_event()
            if event is None:
                raise InvalidMultipartBody("body ended inside a part")
            kind, payload = event
            if kind == _END:
                self._part_open = False
            else:
                yield payload

    async def _skip_rest_of_part(self) -> None:
        async for _ in self._part_chunks():
            pass

    async def parts(self) -> AsyncIterator[FilePart]:
        """Delen in binnenkomstvolgorde; niet-gelezen data wordt overgeslagen."""
        while True:
            await self._skip_rest_of_part()
            event = await self._next_event()
            if event is None:
                return
            kind, payload = event
            if kind == _PART:
                self._part_open = True
                yield FilePart(payload, self._part_chunks())


async def iter_form_parts(content_type: str, body: AsyncIterable[bytes]) -> AsyncIterator[FilePart]:
    """
    Delen van een multipart/form-data body. Andere content-types (of geen
    body) leveren geen delen op: daar zitten geen bestanden in.
    """
    ctype, params = parse_options_header(content_type or "")
    if ctype.lower() != b"multipart/form-data":
        return

    boundary = params.get(b"boundary")
    if not boundary:
        raise InvalidMultipartBody("missing boundary in multipart body")

    async for part in MultipartStream(boundary, body).parts():
        yield part
